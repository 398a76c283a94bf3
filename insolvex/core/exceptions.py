"""Exception hierarchy for insolvency document extraction.

Normalization, matching and aggregation never raise for bad data; these
exceptions belong to the model-calling and file-handling edges.
"""

from pathlib import Path
from typing import Any, Optional


class InsolvexError(Exception):
    """Base exception for all extraction errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_failure_record(self, source: str) -> dict[str, str]:
        """Row for a batch failure list."""
        return {
            "source": source,
            "error_type": type(self).__name__,
            "error_message": self.message[:200],
        }


class ImageValidationError(InsolvexError):
    """A page image is missing, empty or was not given at all."""

    def __init__(self, file_path: Path | str, reason: str) -> None:
        self.file_path = Path(file_path)
        self.reason = reason
        super().__init__(
            f"Invalid page image {self.file_path}: {reason}",
            {"file_path": str(self.file_path), "reason": reason}
        )


class ExtractionError(InsolvexError):
    """Base class for failures while extracting one document with the vision model."""

    def __init__(
        self,
        source: str,
        message: str,
        model_used: Optional[str] = None,
        original_error: Optional[Exception] = None
    ) -> None:
        self.source = source
        self.model_used = model_used
        self.original_error = original_error

        parts = [f"Extraction failed for {source}: {message}"]
        if model_used:
            parts.append(f"(Model: {model_used})")
        if original_error:
            parts.append(f"(Original error: {original_error})")

        super().__init__(" ".join(parts), {"source": source, "model_used": model_used})


class APIError(ExtractionError):
    """The model call kept failing or failed permanently."""

    def __init__(
        self,
        source: str,
        api_error: Exception,
        model_used: Optional[str] = None,
        retry_count: int = 0
    ) -> None:
        super().__init__(source, f"model call failed after {retry_count} attempt(s)", model_used, api_error)
        self.retry_count = retry_count


class InvalidAPIResponseError(ExtractionError):
    """The model replied with nothing usable as JSON."""

    def __init__(
        self,
        source: str,
        response_text: str,
        model_used: Optional[str] = None,
        parsing_error: Optional[Exception] = None
    ) -> None:
        preview = response_text[:100] if response_text else "<empty>"
        super().__init__(source, f"unparseable model reply: {preview}", model_used, parsing_error)
        self.response_text = response_text


class SecurityError(InsolvexError):
    """An input or output path failed a safety check."""

    def __init__(
        self,
        message: str,
        security_check: str,
        file_path: Optional[Path | str] = None
    ) -> None:
        self.security_check = security_check
        self.file_path = Path(file_path) if file_path else None

        details = {"security_check": security_check}
        if file_path:
            details["file_path"] = str(file_path)
        super().__init__(f"Security check failed ({security_check}): {message}", details)


class PathTraversalError(SecurityError):
    """Path tries to leave the directory it names."""

    def __init__(self, attempted_path: str) -> None:
        super().__init__(f"Path traversal attempt detected: {attempted_path}", "path_traversal", attempted_path)
        self.attempted_path = attempted_path


class ResourceLimitError(SecurityError):
    """Too many page images, or a page image that is too large."""

    def __init__(
        self,
        resource_type: str,
        current_usage: float,
        limit: float,
        unit: str = ""
    ) -> None:
        suffix = f" {unit}" if unit else ""
        super().__init__(
            f"{resource_type} ({current_usage}{suffix}) exceeds limit ({limit}{suffix})",
            "resource_limit"
        )
        self.resource_type = resource_type
        self.current_usage = current_usage
        self.limit = limit
        self.unit = unit


class ConfigurationError(InsolvexError):
    """A required setting is missing or invalid."""

    def __init__(self, setting_name: str, issue: str) -> None:
        super().__init__(
            f"Configuration error for '{setting_name}': {issue}",
            {"setting_name": setting_name, "issue": issue}
        )
        self.setting_name = setting_name
        self.issue = issue


__all__ = [
    "InsolvexError",
    "ImageValidationError",
    "ExtractionError",
    "APIError",
    "InvalidAPIResponseError",
    "SecurityError",
    "PathTraversalError",
    "ResourceLimitError",
    "ConfigurationError",
]
