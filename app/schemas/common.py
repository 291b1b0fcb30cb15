"""
Schemas comunes y base para reutilización.
"""

from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict


# TypeVar para respuestas genéricas
T = TypeVar("T")


class BaseSchema(BaseModel):
    """Schema base con configuración común."""

    model_config = ConfigDict(
        from_attributes=True,  # Permite crear desde ORM models
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class APIResponse(BaseModel, Generic[T]):
    """Respuesta estándar de la API."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    errors: list[str] | None = None


class ErrorResponse(BaseModel):
    """Respuesta de error estándar."""

    success: bool = False
    message: str
    errors: list[str] | None = None
    request_id: str | None = None
