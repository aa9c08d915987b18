"""Structured error models for wizard validation results."""

from __future__ import annotations

from pydantic import BaseModel


class WizardError(BaseModel):
    """A structured validation error with an optional field path."""

    code: str
    message: str
    path: str | None = None


class ValidationResult(BaseModel):
    """Result of validating a model draft."""

    valid: bool
    errors: list[WizardError] = []
