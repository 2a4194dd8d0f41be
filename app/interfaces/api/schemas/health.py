"""Pydantic model describing the health endpoint."""

from pydantic import BaseModel


class HealthRead(BaseModel):
    status: str
    connected_users: int
    connections: int


__all__ = ["HealthRead"]
