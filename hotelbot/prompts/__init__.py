"""Validators that turn raw user text into typed slot values."""

from .validators import (
    ChoiceValidator,
    ConfirmValidator,
    DateValidator,
    NumberValidator,
    TextValidator,
    Validator,
    format_choices,
    get_validator,
)

__all__ = [
    "ChoiceValidator",
    "ConfirmValidator",
    "DateValidator",
    "NumberValidator",
    "TextValidator",
    "Validator",
    "format_choices",
    "get_validator",
]
