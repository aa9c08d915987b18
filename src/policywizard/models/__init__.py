"""Pydantic domain models for the policy wizard."""

from policywizard.models.errors import ValidationResult, WizardError
from policywizard.models.policy import Cube, CubeDimension, Model, Policy

__all__ = [
    "Cube",
    "CubeDimension",
    "Model",
    "Policy",
    "ValidationResult",
    "WizardError",
]
