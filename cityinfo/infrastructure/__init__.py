"""Infrastructure layer: relational persistence for cities and points of interest.

The database package owns the async engine, the per-request session, the ORM
models and the repositories the route handlers talk to.
"""
