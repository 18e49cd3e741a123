"""Input validation package."""

from investwise.validation.validator import (
    InputValidationError,
    InputValidator,
    format_issue,
)

__all__ = ["InputValidationError", "InputValidator", "format_issue"]
