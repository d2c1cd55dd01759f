"""Custom exception hierarchy for widgetboard.

Most layout operations never raise: a mutation addressed to a page or
widget instance that no longer exists is a silent no-op. The exceptions
below cover the boundaries where something can genuinely go wrong
(reading and writing the persisted snapshot, registry and template
lookups, configuration) so callers can catch them specifically.

Exception Hierarchy:
    WidgetboardError (base)
    ├── PersistenceError - snapshot storage
    │   ├── SnapshotError - unparseable or structurally invalid snapshot
    │   └── StorageWriteError (retryable)
    ├── RegistryError - widget catalogue
    │   └── UnknownWidgetTypeError
    ├── TemplateError - page templates
    │   └── TemplateNotFoundError
    └── ConfigurationError - settings/configuration issues

Usage:
    from widgetboard.exceptions import SnapshotError

    try:
        workspace = workspace_from_dict(data)
    except SnapshotError as e:
        logger.warning(f"Ignoring stored layout: {e}")
"""

from typing import Any, Optional


class WidgetboardError(Exception):
    """Base exception for all widgetboard errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., IDs, paths)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Persistence Errors
# =============================================================================


class PersistenceError(WidgetboardError):
    """Base exception for layout snapshot storage."""

    pass


class SnapshotError(PersistenceError):
    """A stored snapshot could not be parsed into a workspace."""

    def __init__(
        self,
        message: str = "Invalid layout snapshot",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class StorageWriteError(PersistenceError):
    """Writing the snapshot to storage failed - retryable."""

    def __init__(
        self,
        message: str = "Failed to write layout snapshot",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, retryable=True, **context)


# =============================================================================
# Registry Errors
# =============================================================================


class RegistryError(WidgetboardError):
    """Base exception for the widget registry."""

    pass


class UnknownWidgetTypeError(RegistryError):
    """A widget type is not present in the registry."""

    def __init__(
        self,
        message: str = "Unknown widget type",
        *,
        widget_type: Optional[str] = None,
        **context: Any,
    ) -> None:
        if widget_type:
            context["widget_type"] = widget_type
        super().__init__(message, **context)


# =============================================================================
# Template Errors
# =============================================================================


class TemplateError(WidgetboardError):
    """Base exception for page templates."""

    pass


class TemplateNotFoundError(TemplateError):
    """A requested page template does not exist."""

    def __init__(
        self,
        message: str = "Template not found",
        *,
        template_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if template_id:
            context["template_id"] = template_id
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(WidgetboardError):
    """Invalid or missing configuration."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
