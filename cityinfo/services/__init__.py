"""Application services used by the route handlers.

- **authentication**: credential validation and bearer token issuance
- **notifications**: mail notifications sent when data is removed
"""
