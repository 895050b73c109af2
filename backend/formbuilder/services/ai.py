"""
AI-assisted form and field generation.

Each call makes exactly one request to an OpenAI-compatible chat completion
endpoint and walks through::

    IDLE -> REQUESTING -> PARSED_OK | PARSE_FAILED | HTTP_FAILED -> DONE

A missing API key, a transport error or a non-2xx response (HTTP_FAILED)
always falls back to the deterministic generators in
``formbuilder.services.fallback``. What happens on PARSE_FAILED depends on
the call site:

- ``generate_fields`` and ``suggest_fields`` fall back, like HTTP_FAILED.
- ``generate_form`` raises ``AIGenerationFailed`` so the caller sees the
  failure. This asymmetry is kept on purpose; both paths are tested.
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import httpx

from formbuilder.config import Settings, get_settings
from formbuilder.errors import AIGenerationFailed
from formbuilder.schemas.form import FieldDraft, FormDraft, StepDraft
from formbuilder.services.fallback import fallback_fields, fallback_form, fallback_suggestions
from formbuilder.services.field_types import normalize_options

logger = logging.getLogger(__name__)


SYSTEM_MESSAGE = "You are a helpful assistant that outputs only valid JSON when asked."

FORM_PROMPT = """You are a form generation assistant. Generate a multi-step form configuration based on the user's description.

Return ONLY a valid JSON object with this structure:
{{
  "title": "Form Title",
  "description": "Form description",
  "steps": [
    {{
      "title": "Step Title",
      "description": "Step description",
      "fields": [
        {{
          "type": "text|email|tel|number|url|textarea|select|radio|checkbox|date",
          "label": "Field Label",
          "placeholder": "Placeholder text",
          "required": true,
          "options": ["option1", "option2"]
        }}
      ]
    }}
  ]
}}

Guidelines:
- Create logical step groupings
- Use appropriate field types
- Include helpful placeholders
- Mark important fields as required
- Include "options" only for select, radio or checkbox fields

User request: {prompt}

Generate the form configuration:"""

FIELDS_PROMPT = """You are a form field generator AI. Based on the user's description, generate appropriate form fields.

Return ONLY valid JSON in this exact format (no markdown, no code blocks, no explanations):
{{
  "fields": [
    {{
      "type": "text|email|number|tel|url|textarea|select|radio|checkbox|date",
      "label": "Field Label",
      "placeholder": "Placeholder text (optional)",
      "required": true,
      "options": ["option1", "option2"]
    }}
  ]
}}

Guidelines:
- Use appropriate field types (email for emails, tel for phone numbers, etc.)
- Generate realistic placeholders
- Set required based on field importance
- Include options array only for select, radio, or checkbox types
- Generate 3-8 relevant fields based on the prompt

User request: {prompt}"""

SUGGESTIONS_PROMPT = """You are a form builder AI assistant. Suggest 3-5 relevant fields for a form based on its context.

Form Title: {title}
Form Description: {description}
Existing Fields: {existing}

Return ONLY valid JSON array (no markdown, no code blocks):
[
  {{
    "type": "text|email|number|tel|url|textarea|select|radio|checkbox|date",
    "label": "Field Label",
    "placeholder": "Placeholder text",
    "required": false
  }}
]"""

IMPROVEMENTS_PROMPT = """You are a form optimization AI. Suggest improvements for form fields.
Return ONLY a valid JSON object (no markdown) with this structure:
{{
  "suggestions": [
    {{
      "type": "validation|placeholder|options",
      "message": "Brief suggestion text"
    }}
  ]
}}

Field: "{label}" ({field_type}). Suggest 2-3 improvements."""

FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE = re.compile(r"\s*```$")
OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class GenerationState(str, Enum):
    """Lifecycle of one generation request."""
    IDLE = "idle"
    REQUESTING = "requesting"
    PARSED_OK = "parsed_ok"
    PARSE_FAILED = "parse_failed"
    HTTP_FAILED = "http_failed"
    DONE = "done"


class CompletionError(Exception):
    """The completion API could not produce a response."""


class CompletionUnavailable(CompletionError):
    """No API key is configured."""


class CompletionClient:
    """Minimal async client for an OpenAI-compatible chat completion API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "CompletionClient":
        return cls(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            timeout=settings.ai_request_timeout,
            **kwargs,
        )

    @property
    def configured(self) -> bool:
        return self.api_key is not None

    async def complete(self, prompt: str) -> str:
        """Send one prompt and return the raw text of the first choice."""
        if not self.configured:
            raise CompletionUnavailable("No completion API key configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        if not response.is_success:
            raise CompletionError(f"Completion API returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise CompletionError("Completion API returned a non-JSON body") from exc

        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise CompletionError("Completion API returned no choices")
        message = choices[0].get("message")
        if not isinstance(message, dict):
            raise CompletionError("Completion API returned a choice without a message")
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise CompletionError("Completion API returned non-text content")
        return content


@dataclass
class GenerationOutcome:
    """What a single request/response round trip ended in."""
    state: GenerationState
    text: Optional[str] = None
    error: Optional[str] = None


def strip_code_fences(text: str) -> str:
    """Remove a leading ```/```json marker and a trailing ``` marker."""
    cleaned = (text or "").strip()
    cleaned = FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def extract_json_object(text: str) -> Optional[str]:
    """The outermost ``{...}`` substring, or None when there is none."""
    match = OBJECT_PATTERN.search(text or "")
    return match.group(0) if match else None


def _new_draft_id() -> str:
    return str(uuid.uuid4())


def _field_draft(raw: Any, order_index: int) -> Optional[FieldDraft]:
    if not isinstance(raw, dict):
        return None
    label = str(raw.get("label") or "").strip()
    if not label:
        return None
    options = normalize_options(raw.get("options"))
    placeholder = raw.get("placeholder")
    if placeholder is not None:
        placeholder = str(placeholder).strip() or None
    return FieldDraft(
        id=_new_draft_id(),
        type=str(raw.get("type") or "text").strip().lower() or "text",
        label=label,
        placeholder=placeholder,
        required=raw.get("required") is True,
        options=options or None,
        order_index=order_index,
    )


def build_field_drafts(raw_fields: Any) -> List[FieldDraft]:
    """
    Turn generated field dicts into drafts with fresh ids and dense order.

    Accepts a bare list or an object wrapping it under ``fields`` or
    ``suggestions``; anything else raises ValueError.
    """
    if isinstance(raw_fields, dict):
        raw_fields = raw_fields.get("fields", raw_fields.get("suggestions"))
    if not isinstance(raw_fields, list):
        raise ValueError("Expected a list of fields")

    drafts = []
    for raw in raw_fields:
        draft = _field_draft(raw, len(drafts))
        if draft is not None:
            drafts.append(draft)
    return drafts


def build_form_draft(config: Any) -> FormDraft:
    """Turn a generated ``{title, description, steps}`` object into a FormDraft."""
    if not isinstance(config, dict):
        raise ValueError("Expected a JSON object")
    steps = config.get("steps")
    if not isinstance(steps, list):
        raise ValueError("Expected a steps list")

    step_drafts = []
    for raw_step in steps:
        if not isinstance(raw_step, dict):
            continue
        step_drafts.append(StepDraft(
            id=_new_draft_id(),
            title=str(raw_step.get("title") or f"Step {len(step_drafts) + 1}").strip(),
            description=raw_step.get("description") or None,
            order_index=len(step_drafts),
            fields=build_field_drafts(raw_step.get("fields") or []),
        ))

    return FormDraft(
        title=str(config.get("title") or "Untitled Form").strip(),
        description=config.get("description") or None,
        steps=step_drafts,
    )


class AIService:
    """Generation call sites sharing one completion client."""

    def __init__(self, client: CompletionClient):
        self.client = client

    async def _request(self, prompt: str) -> GenerationOutcome:
        """One round trip; transport failures are returned, not raised."""
        logger.debug("AI generation state=%s", GenerationState.REQUESTING.value)
        try:
            text = await self.client.complete(prompt)
        except CompletionUnavailable as exc:
            logger.info("AI completion not configured, using fallback")
            return GenerationOutcome(GenerationState.HTTP_FAILED, error=str(exc))
        except CompletionError as exc:
            logger.warning("AI completion failed, using fallback: %s", exc)
            return GenerationOutcome(GenerationState.HTTP_FAILED, error=str(exc))
        return GenerationOutcome(GenerationState.REQUESTING, text=text)

    @staticmethod
    def _finish(outcome: GenerationOutcome, state: GenerationState) -> None:
        outcome.state = state
        logger.debug("AI generation state=%s -> %s", state.value, GenerationState.DONE.value)

    async def generate_form(self, prompt: str) -> Tuple[FormDraft, bool]:
        """
        Whole-form generation.

        Returns the draft and whether the fallback produced it. A response
        that cannot be parsed raises ``AIGenerationFailed``.
        """
        outcome = await self._request(FORM_PROMPT.format(prompt=prompt))
        if outcome.state == GenerationState.HTTP_FAILED:
            self._finish(outcome, GenerationState.HTTP_FAILED)
            return build_form_draft(fallback_form(prompt)), True

        candidate = extract_json_object(strip_code_fences(outcome.text))
        try:
            if candidate is None:
                raise ValueError("no JSON object in response")
            draft = build_form_draft(json.loads(candidate))
        except ValueError as exc:
            self._finish(outcome, GenerationState.PARSE_FAILED)
            logger.warning("AI form response could not be parsed: %s", exc)
            raise AIGenerationFailed("AI_PARSE_FAILED", "Failed to parse AI response")

        self._finish(outcome, GenerationState.PARSED_OK)
        return draft, False

    async def _fields_with_fallback(self, prompt: str, fallback) -> Tuple[List[FieldDraft], bool]:
        outcome = await self._request(prompt)
        if outcome.state != GenerationState.HTTP_FAILED:
            try:
                drafts = build_field_drafts(json.loads(strip_code_fences(outcome.text)))
            except ValueError as exc:
                self._finish(outcome, GenerationState.PARSE_FAILED)
                logger.warning("AI field response could not be parsed, using fallback: %s", exc)
            else:
                self._finish(outcome, GenerationState.PARSED_OK)
                return drafts, False
        else:
            self._finish(outcome, GenerationState.HTTP_FAILED)
        return build_field_drafts(fallback()), True

    async def generate_fields(self, prompt: str) -> Tuple[List[FieldDraft], bool]:
        """Quick generation of a flat field list from a prompt."""
        return await self._fields_with_fallback(
            FIELDS_PROMPT.format(prompt=prompt),
            lambda: fallback_fields(prompt),
        )

    async def suggest_fields(
        self,
        form_title: str,
        form_description: str,
        existing_fields: List[str]
    ) -> Tuple[List[FieldDraft], bool]:
        """Suggest fields to add to a form, given what it already has."""
        prompt = SUGGESTIONS_PROMPT.format(
            title=form_title,
            description=form_description,
            existing=", ".join(existing_fields) or "None",
        )
        return await self._fields_with_fallback(
            prompt,
            lambda: fallback_suggestions(form_title, form_description, existing_fields),
        )

    async def suggest_field_improvements(self, field_label: str, field_type: str) -> Dict[str, Any]:
        """Improvement hints for one field; any failure yields no hints."""
        outcome = await self._request(
            IMPROVEMENTS_PROMPT.format(label=field_label, field_type=field_type)
        )
        if outcome.state == GenerationState.HTTP_FAILED:
            return {"suggestions": [], "used_fallback": True}
        try:
            parsed = json.loads(strip_code_fences(outcome.text))
        except ValueError:
            logger.warning("AI improvement response could not be parsed")
            return {"suggestions": [], "used_fallback": True}

        raw = parsed.get("suggestions") if isinstance(parsed, dict) else None
        suggestions = [
            {"type": str(item.get("type") or "general"), "message": str(item["message"])}
            for item in (raw if isinstance(raw, list) else [])
            if isinstance(item, dict) and item.get("message")
        ]
        return {"suggestions": suggestions, "used_fallback": False}


def get_ai_service() -> AIService:
    """Dependency that provides the AI service."""
    return AIService(CompletionClient.from_settings(get_settings()))
