"""Standardized error response schema.

Every error body produced by the API (validation failures, patch failures,
authentication and authorization failures, unsupported media types and
internal errors) has this shape. Missing resources are the exception: they
are answered with an empty 404.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(
        ...,
        description="Name of the service",
        examples=["CityInfo API"],
    )

    version: str = Field(
        ...,
        description="Version of the service",
        examples=["1.0.0"],
    )

    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "UNAUTHORIZED", "FORBIDDEN"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Request validation failed", "Invalid bearer token"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details, e.g. field or path keyed messages",
        examples=[{"validation_errors": {"name": ["Field required"]}}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
        examples=["2024-06-14T12:00:00+00:00"],
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW", "HIGH"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this error response",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": {
                        "validation_errors": {
                            "name": ["String should have at most 50 characters"]
                        }
                    },
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2024-06-14T12:00:00+00:00",
                    "severity": "LOW",
                    "service_info": {
                        "name": "CityInfo API",
                        "version": "1.0.0",
                        "environment": "production",
                    },
                },
                {
                    "error_code": "FORBIDDEN",
                    "message": "Policy 'MustLiveInBerlin' requires claim 'city'",
                    "timestamp": "2024-06-14T12:00:02+00:00",
                    "severity": "MEDIUM",
                },
                {
                    "error_code": "INTERNAL_ERROR",
                    "message": "A problem happened while handling your request.",
                    "timestamp": "2024-06-14T12:00:03+00:00",
                    "severity": "CRITICAL",
                },
            ]
        }
    }
