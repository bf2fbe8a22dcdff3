"""Helpers for building API responses.

- **responses**: orjson and XML response classes
- **negotiation**: Accept header handling and negotiated responses
"""
