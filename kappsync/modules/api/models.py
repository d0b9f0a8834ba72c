"""
Kappsync shared data models.

These models define the typed resource records passed between the
HTTP layer, the reconciler and the storage module. Specs are validated
once at the boundary; the core reads typed fields only.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Resource specs (caller owned, immutable for one lifecycle event)


class AppResourceSpec(BaseModel):
    """Declarative description of a kapp application."""

    model_config = ConfigDict(frozen=True)

    app: str = Field(..., description="App name", min_length=1)
    namespace: str = Field(..., description="Namespace name", min_length=1)
    config_yaml: str = Field(
        default="", description="Configuration as YAML", repr=False
    )
    files: List[str] = Field(default_factory=list, description="Files")
    diff_changes: Optional[bool] = Field(None, description="Show changes")
    diff_context: Optional[int] = Field(
        None, description="Show number of lines around changed lines", ge=0
    )
    debug_logs: bool = Field(default=False, description="Enable debug logging")

    @property
    def identity(self) -> str:
        """External identity string, `<namespace>/<app>`."""
        return f"{self.namespace}/{self.app}"


class AppResourceBody(BaseModel):
    """Request body for app endpoints; app and namespace come from the path."""

    config_yaml: str = Field(default="", repr=False)
    files: List[str] = Field(default_factory=list)
    diff_changes: Optional[bool] = None
    diff_context: Optional[int] = Field(None, ge=0)
    debug_logs: bool = False

    def to_spec(self, namespace: str, app: str) -> AppResourceSpec:
        """Bind the body to a resource identity."""
        return AppResourceSpec(app=app, namespace=namespace, **self.model_dump())


class TemplateResourceSpec(BaseModel):
    """Declarative description of a kbld template."""

    model_config = ConfigDict(frozen=True)

    config_yaml: str = Field(
        default="", description="Configuration as YAML", repr=False
    )
    files: List[str] = Field(default_factory=list, description="Files")
    debug_logs: bool = Field(default=False, description="Enable debug logging")

    @model_validator(mode="after")
    def require_input(self):
        """Ensure kbld has something to template."""
        if not self.config_yaml and not self.files:
            raise ValueError("Either config_yaml or files must be set")
        return self


# Derived state (owned by the reconciler)


class AppResourceState(BaseModel):
    """Persisted attributes of a kapp application."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default="", description="Resource identity")
    cluster_drift_detected: bool = Field(
        default=False,
        description="Internal (forces resource update when detected cluster drift)",
    )
    change_diff: str = Field(
        default="", description="Shows calculated diff", repr=False
    )


class TemplateResourceState(BaseModel):
    """Persisted attributes of a kbld template."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default="", description="SHA-256 of the rendered output")
    result: str = Field(default="", description="Rendered output", repr=False)


# Response models (API output)


class DiffPreviewResponse(BaseModel):
    """Planned attributes produced by a diff preview."""

    identity: str
    planned: AppResourceState


class HealthResponse(BaseModel):
    """Service health."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error payload returned by the API."""

    error: str
    stderr: Optional[str] = None
