"""HTTP API layer built on FastAPI.

Key components:
- **main**: Application factory and lifecycle management
- **routes**: Cities, points of interest, files and authentication
- **middleware**: Security headers, correlation IDs, request logging, error
  handling and bearer token authorization
- **schemas**: Pydantic transfer objects
- **mapping**: Entity to transfer object translation
- **utils**: JSON/XML responses, content negotiation and JSON Patch
"""
