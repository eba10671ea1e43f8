"""Validation errors for configuration models."""

from pathlib import Path
from typing import Any, List, Optional


class ValidationError(Exception):
    """Exception raised for validation errors."""

    def __init__(self, *errors: Any) -> None:
        self.errors = errors[0] if len(errors) == 1 else errors
        super().__init__(*errors)

    def __str__(self) -> str:
        if isinstance(self.errors, str):
            return self.errors
        else:
            return "\n".join(map(str, self.errors))


class ConfigurationParseError(Exception):
    """Raised when a configuration file cannot be parsed into the model.

    Carries enough context (file, line, offending key) for the CLI to point
    the user at the problem.
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[Path] = None,
        line_number: Optional[int] = None,
        key: Optional[str] = None,
        original_error: Optional[Any] = None,
    ):
        self.message = message
        self.config_file = config_file
        self.line_number = line_number
        self.key = key
        self.original_error = original_error
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        context: List[str] = []
        if self.key:
            context.append(f"key: {self.key}")
        if self.config_file:
            location = str(self.config_file)
            if self.line_number:
                location += f":{self.line_number}"
            context.append(f"in {location}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"
