"""Cross-cutting request/response concerns.

- **SecurityHeadersMiddleware**: Adds security headers
- **RequestContextMiddleware**: Manages correlation IDs
- **RequestLoggingMiddleware**: Request logging with timing
- **error_handler**: Exception handlers producing ``ErrorResponse`` bodies
- **authentication**: Bearer token and policy dependencies

Middleware order on the way in:
1. Security headers
2. Request context (correlation ID)
3. Request logging (logs with correlation context)
"""
