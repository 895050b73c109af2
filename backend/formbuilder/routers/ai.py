"""AI-assisted generation router."""

from fastapi import APIRouter, Depends

from formbuilder.schemas.ai import (
    GenerateRequest,
    FieldSuggestionRequest,
    FieldImprovementRequest,
    GeneratedForm,
    GeneratedFields,
    FieldImprovementResponse,
)
from formbuilder.services.ai import AIService, get_ai_service
from formbuilder.services.auth import SessionContext, get_current_session

router = APIRouter()


@router.post("/generate-form", response_model=GeneratedForm)
async def generate_form(
    request: GenerateRequest,
    ai: AIService = Depends(get_ai_service),
    session: SessionContext = Depends(get_current_session)
):
    """
    Generate a multi-step form draft from a description.

    Without a configured API key the deterministic fallback is returned. An
    unparseable model response is reported as 502 ``AI_PARSE_FAILED``.
    """
    draft, used_fallback = await ai.generate_form(request.prompt)
    return GeneratedForm(form=draft, used_fallback=used_fallback)


@router.post("/generate-fields", response_model=GeneratedFields)
async def generate_fields(
    request: GenerateRequest,
    ai: AIService = Depends(get_ai_service),
    session: SessionContext = Depends(get_current_session)
):
    """Quick generation of a flat list of fields; never fails."""
    fields, used_fallback = await ai.generate_fields(request.prompt)
    return GeneratedFields(fields=fields, used_fallback=used_fallback)


@router.post("/suggest-fields", response_model=GeneratedFields)
async def suggest_fields(
    request: FieldSuggestionRequest,
    ai: AIService = Depends(get_ai_service),
    session: SessionContext = Depends(get_current_session)
):
    """Suggest fields to add to an existing form."""
    fields, used_fallback = await ai.suggest_fields(
        request.form_title,
        request.form_description,
        request.existing_fields,
    )
    return GeneratedFields(fields=fields, used_fallback=used_fallback)


@router.post("/field-improvements", response_model=FieldImprovementResponse)
async def field_improvements(
    request: FieldImprovementRequest,
    ai: AIService = Depends(get_ai_service),
    session: SessionContext = Depends(get_current_session)
):
    return await ai.suggest_field_improvements(request.field_label, request.field_type)
