"""
API Module - Black Box Interface

Purpose: Typed resource records and HTTP payloads
Interface: Resource specs, resource states, request/response models
Hidden: Field validation details

The API module only describes data - it contains no business logic.
"""

from .models import (
    AppResourceBody,
    AppResourceSpec,
    AppResourceState,
    DiffPreviewResponse,
    ErrorResponse,
    HealthResponse,
    TemplateResourceSpec,
    TemplateResourceState,
)

__all__ = [
    "AppResourceBody",
    "AppResourceSpec",
    "AppResourceState",
    "DiffPreviewResponse",
    "ErrorResponse",
    "HealthResponse",
    "TemplateResourceSpec",
    "TemplateResourceState",
]
