"""Default model factory — holds the draft model edited in the wizard's model step."""

from __future__ import annotations

import logging

from policywizard.models.errors import ValidationResult, WizardError
from policywizard.models.policy import Model, Policy
from policywizard.service.collaborators import ModelContext

logger = logging.getLogger("policywizard.service")

DATE_TIME_TYPE = "DateTime"
AUTO_GENERATED_FORMAT = "autoGenerated"


class TemplateModelFactory:
    """Keeps one draft :class:`Model` plus the wizard slot it is being edited in.

    The draft starts as a copy of *template* (an empty model by default) and is
    validated against the policy it will be added to.
    """

    def __init__(self, policy: Policy, template: Model | None = None) -> None:
        self._policy = policy
        self._template = template if template is not None else Model()
        self._draft = self._template.model_copy(deep=True)
        self._position = len(policy.transformations)

    # -- draft editing -------------------------------------------------------

    def get_model(self) -> Model:
        return self._draft

    def set_model(self, model: Model) -> None:
        """Replace the draft (e.g. with the form contents submitted by the UI)."""
        self._draft = model.model_copy(deep=True)

    def reset_model(self, position: int) -> None:
        """Start a fresh draft from the template for the slot at *position*."""
        self._draft = self._template.model_copy(deep=True)
        self._position = position

    def get_context(self) -> ModelContext:
        return ModelContext(position=self._position)

    # -- checks --------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Check the draft and return every problem found."""
        draft = self._draft
        errors: list[WizardError] = []

        if not draft.name.strip():
            errors.append(
                WizardError(code="MISSING_NAME", message="Model name is required", path="name")
            )
        elif any(t.name == draft.name for t in self._policy.transformations):
            errors.append(
                WizardError(
                    code="DUPLICATE_MODEL_NAME",
                    message=f"A model named '{draft.name}' already exists in the policy",
                    path="name",
                )
            )

        if not draft.type.strip():
            errors.append(
                WizardError(code="MISSING_TYPE", message="Model type is required", path="type")
            )

        if not draft.output_fields:
            errors.append(
                WizardError(
                    code="MISSING_OUTPUT_FIELDS",
                    message="A model must produce at least one output field",
                    path="outputFields",
                )
            )
        seen: set[str] = set()
        for i, output in enumerate(draft.output_fields):
            if output in seen:
                errors.append(
                    WizardError(
                        code="DUPLICATE_OUTPUT_FIELD",
                        message=f"Output field '{output}' is declared more than once",
                        path=f"outputFields[{i}]",
                    )
                )
            seen.add(output)

        if errors:
            logger.debug("Model draft '%s' has %d validation errors", draft.name, len(errors))
        return ValidationResult(valid=not errors, errors=errors)

    def is_valid_model(self) -> bool:
        return self.validate().valid

    def is_auto_generated_date_time(self) -> bool:
        """True for a DateTime model whose input format is generated at ingestion time."""
        return (
            self._draft.type == DATE_TIME_TYPE
            and self._draft.configuration.get("inputFormat") == AUTO_GENERATED_FORMAT
        )
