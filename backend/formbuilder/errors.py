"""Typed API errors carrying a stable machine-readable code."""

from fastapi import HTTPException, status


class FormBuilderError(HTTPException):
    """
    Base error for the form builder.

    The response detail is always ``{"error": <message>, "code": <CODE>}`` so
    clients can branch on ``code`` while showing ``error`` to the user.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(
            status_code=self.status_code,
            detail={"error": message, "code": code},
        )

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationFailed(FormBuilderError):
    """Caller input failed a constraint; raised before any write."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(FormBuilderError):
    """A referenced entity id does not resolve."""
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(FormBuilderError):
    """The caller does not own the entity."""
    status_code = status.HTTP_403_FORBIDDEN


class AIGenerationFailed(FormBuilderError):
    """Whole-form generation returned a response that could not be parsed."""
    status_code = status.HTTP_502_BAD_GATEWAY


class AnswerRejected(ValidationFailed):
    """
    A respondent's answer failed field validation.

    The detail also names the offending field and the step it sits on so
    the filler can jump back to it.
    """

    def __init__(self, message: str, field_id=None, step_index=None):
        super().__init__("INVALID_ANSWER", message)
        self.field_id = field_id
        self.step_index = step_index
        self.detail.update({"field_id": field_id, "step_index": step_index})
