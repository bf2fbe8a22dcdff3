"""Pydantic models for request validation and response serialization.

- **cities** / **points_of_interest**: resource representations
- **authentication**: credentials for token issuance
- **errors**: the error body shared by every failure response
"""
