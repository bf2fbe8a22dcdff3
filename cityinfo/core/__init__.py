"""Core package for cross-cutting application functionality.

This package provides the foundational components used across all layers
of the CityInfo application:

- **config**: Centralized configuration management with environment support
- **constants**: Shared limits (name lengths, page sizes, token lifetime)
- **context**: Request context (correlation ID, authenticated subject)
- **exceptions**: Structured exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Loguru setup with console and JSON formatters
- **observability**: Distributed tracing with OpenTelemetry
- **pagination**: Pagination metadata returned alongside list queries
"""
