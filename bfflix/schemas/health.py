"""Schema for the public health check."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness answer for load balancers and deploy checks."""
    status: str = Field(default="ok", examples=["ok"])
    service: str = Field(default="bfflix-backend")
    environment: str = Field(
        ...,
        description="Value of ENVIRONMENT (development, staging, production, ...)",
        examples=["production"]
    )
