"""
SupremeError - exception wrapper around a pre-built ErrorDetail.

Collaborators that prefer raising over returning ``Result.err`` raise this;
request-scope interception unwraps the detail unchanged.
"""

from __future__ import annotations

from typing import Any

from supreme_core.models.error_models import ErrorDetail


class SupremeError(Exception):
    """Exception carrying an immutable ErrorDetail."""

    def __init__(self, error_detail: ErrorDetail) -> None:
        super().__init__(f"[{error_detail.error_code.value}] {error_detail.message}")
        self.error_detail = error_detail

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def status_code(self) -> int:
        return self.error_detail.status_code

    @property
    def is_operational(self) -> bool:
        return self.error_detail.is_operational

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        return {
            "error": str(self),
            "error_detail": self.error_detail.model_dump(mode="json"),
        }

    def __repr__(self) -> str:
        return (
            f"SupremeError(code={self.error_code}, "
            f"message={self.error_detail.message!r}, "
            f"status_code={self.status_code}, "
            f"severity={self.error_detail.severity.value})"
        )
