"""CityInfo - cities and points of interest over HTTP.

CityInfo exposes a two-level resource hierarchy (cities that own points of
interest) through an async FastAPI application backed by SQLAlchemy.

Architecture Overview:
- **API Layer**: FastAPI routers, middleware, content negotiation and auth
- **Core Layer**: Configuration, logging, errors, tracing and shared models
- **Services Layer**: Token issuance and deletion notifications
- **Infrastructure Layer**: Async database access, models and repositories

Key Features:
- **Pagination**: Filtered, searchable city listings with X-Pagination metadata
- **Partial updates**: RFC 6902 JSON Patch on points of interest
- **Security**: Signed bearer tokens and claim-based policies
- **Representations**: JSON by default, XML on request
"""
