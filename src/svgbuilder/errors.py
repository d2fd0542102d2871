"""Exception types shared across svgbuilder."""
from __future__ import annotations


class SvgBuilderError(ValueError):
    """Structured error with a stable code for CLI mapping."""

    code = "E_SVGBUILDER"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return self.message


class LoadError(SvgBuilderError):
    """Raised when an external document cannot be fetched or parsed."""

    code = "E_LOAD"


class BackendUnavailableError(SvgBuilderError):
    """Raised when the selected backend cannot host an SVG document."""

    code = "E_BACKEND"
