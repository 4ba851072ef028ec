"""Health check schemas."""

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str
    database: str
    version: str
