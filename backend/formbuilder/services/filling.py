"""
Multi-step form filling.

``FillSession`` walks a respondent through the ordered steps of a form.
Moving forward is gated by validating the fields of the current step, moving
back never is, and only the last step can submit. Answers are keyed by field
id; the stored submission is keyed by field label.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from formbuilder.errors import AnswerRejected, ValidationFailed
from formbuilder.services import ordering
from formbuilder.services.field_types import ValidationResult, render_and_validate

logger = logging.getLogger(__name__)


def validate_fields(fields: Sequence[Any], answers: Dict[str, Any]) -> ValidationResult:
    """First failing field in display order, or an ok result (fail-fast)."""
    for field in ordering.ordered(fields):
        _, result = render_and_validate(field, answers.get(field.id))
        if not result.valid:
            return result
    return ValidationResult.ok()


def build_submission_data(steps: Sequence[Any], answers: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map every field of every step, in document order, to its answer.

    Keys are field labels. When two fields share a label the later one wins,
    and the collision is logged.
    """
    data: Dict[str, Any] = {}
    seen: Dict[str, str] = {}
    for step in ordering.ordered(steps):
        for field in ordering.ordered(step.fields):
            if field.label in seen:
                logger.warning(
                    "Fields %s and %s share the label %r; keeping the later answer",
                    seen[field.label], field.id, field.label
                )
            seen[field.label] = field.id
            value = answers.get(field.id)
            data[field.label] = value if value is not None else ""
    return data


class FillSession:
    """Navigation state for one respondent filling one form."""

    def __init__(self, steps: Sequence[Any], answers: Optional[Dict[str, Any]] = None):
        self.steps: List[Any] = ordering.ordered(steps)
        self.answers: Dict[str, Any] = dict(answers or {})
        self.current = 0

    @property
    def is_last_step(self) -> bool:
        return self.current >= len(self.steps) - 1

    def set_answer(self, field_id: str, value: Any) -> None:
        self.answers[field_id] = value

    def validate_step(self, index: Optional[int] = None) -> ValidationResult:
        """Validate one step (the current one by default)."""
        if index is None:
            index = self.current
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < max(len(self.steps), 1):
            raise ValidationFailed("INVALID_STEP_INDEX", "Step index is out of range")
        if not self.steps:
            return ValidationResult.ok()
        return validate_fields(self.steps[index].fields, self.answers)

    def advance(self) -> ValidationResult:
        """Move to the next step if the current one is valid."""
        result = self.validate_step()
        if result.valid and not self.is_last_step:
            self.current += 1
        return result

    def back(self) -> None:
        """Return to the previous step without validating anything."""
        if self.current > 0:
            self.current -= 1

    def submit(self) -> Dict[str, Any]:
        """
        Validate the last step and build the label-keyed submission data.

        Raises ``AnswerRejected`` for the first invalid field.
        """
        if not self.is_last_step:
            raise ValidationFailed("NOT_LAST_STEP", "Only the last step can be submitted")
        self._raise_if_invalid(self.validate_step())

        data = build_submission_data(self.steps, self.answers)
        if not data:
            raise ValidationFailed("EMPTY_DATA", "data must not be empty")
        return data

    def submit_all(self) -> Dict[str, Any]:
        """
        Walk every gate from the first step and submit.

        Used when the answers arrive in one request, so a client that skipped
        the per-step gates gets the same checks as one that went through them.
        """
        self.current = 0
        while not self.is_last_step:
            result = self.advance()
            self._raise_if_invalid(result)
        return self.submit()

    def _raise_if_invalid(self, result: ValidationResult) -> None:
        if not result.valid:
            raise AnswerRejected(result.message, field_id=result.field_id, step_index=self.current)

