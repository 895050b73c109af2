import asyncio
import json
import unittest

import httpx

from formbuilder.errors import AIGenerationFailed
from formbuilder.services.ai import (
    AIService,
    CompletionClient,
    build_field_drafts,
    extract_json_object,
    strip_code_fences,
)
from formbuilder.services.fallback import fallback_fields, fallback_form, fallback_suggestions


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _service(handler, api_key="test-key"):
    client = CompletionClient(api_key=api_key, transport=httpx.MockTransport(handler))
    return AIService(client)


def _replying(content, status_code=200):
    def handler(request):
        return httpx.Response(status_code, json=_completion(content))
    return handler


class ParsingTests(unittest.TestCase):
    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_code_fences('```\n[1]\n```'), "[1]")
        self.assertEqual(strip_code_fences('  {"a": 1} '), '{"a": 1}')

    def test_extract_json_object(self):
        self.assertEqual(extract_json_object('Sure! {"title": "x"} Enjoy.'), '{"title": "x"}')
        self.assertIsNone(extract_json_object("no json here"))

    def test_field_drafts_get_fresh_ids_and_dense_order(self):
        drafts = build_field_drafts({"fields": [
            {"type": "Email", "label": "Email", "required": True},
            {"type": "text"},
            {"label": "Notes", "placeholder": "  "},
        ]})
        self.assertEqual([draft.label for draft in drafts], ["Email", "Notes"])
        self.assertEqual([draft.order_index for draft in drafts], [0, 1])
        self.assertEqual(drafts[0].type, "email")
        self.assertEqual(drafts[1].type, "text")
        self.assertIsNone(drafts[1].placeholder)
        self.assertNotEqual(drafts[0].id, drafts[1].id)

    def test_field_drafts_reject_non_lists(self):
        with self.assertRaises(ValueError):
            build_field_drafts({"title": "no fields"})


class FallbackTests(unittest.TestCase):
    def test_blood_donation_form(self):
        form = fallback_form("blood donation drive")
        self.assertEqual([step["title"] for step in form["steps"]], ["Donor Information", "Eligibility", "Consent"])
        self.assertEqual([len(step["fields"]) for step in form["steps"]], [4, 4, 2])

    def test_fallbacks_return_fresh_copies(self):
        first = fallback_form("blood donation drive")
        first["steps"].clear()
        self.assertEqual(len(fallback_form("blood donation drive")["steps"]), 3)

    def test_keyword_routing(self):
        self.assertEqual(fallback_form("event signup")["title"], "Registration Form")
        self.assertEqual(fallback_form("something else")["title"], "Custom Form")
        self.assertEqual(fallback_fields("Customer FEEDBACK")[2]["label"], "Rating")
        self.assertEqual(fallback_fields("contact us")[1]["label"], "Email Address")
        self.assertEqual(len(fallback_fields("")), 3)
        self.assertEqual(len(fallback_suggestions("Anything", "", ["Name"])), 3)


class GenerateFormTests(unittest.TestCase):
    def test_without_credentials_uses_fallback_deterministically(self):
        service = AIService(CompletionClient(api_key=None))
        for _ in range(2):
            draft, used_fallback = asyncio.run(service.generate_form("blood donation drive"))
            self.assertTrue(used_fallback)
            self.assertEqual(
                [(step.title, len(step.fields)) for step in draft.steps],
                [("Donor Information", 4), ("Eligibility", 4), ("Consent", 2)]
            )
            self.assertEqual([step.order_index for step in draft.steps], [0, 1, 2])

    def test_http_error_uses_fallback(self):
        service = _service(_replying("irrelevant", status_code=500))
        draft, used_fallback = asyncio.run(service.generate_form("contact form"))
        self.assertTrue(used_fallback)
        self.assertEqual(draft.title, "Registration Form")

    def test_transport_error_uses_fallback(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        draft, used_fallback = asyncio.run(_service(handler).generate_form("anything"))
        self.assertTrue(used_fallback)
        self.assertEqual(draft.title, "Custom Form")

    def test_malformed_envelope_uses_fallback(self):
        for body in ([1, 2], {"choices": ["x"]}, {"choices": []}, {"choices": [{"message": {"content": 7}}]}):
            def handler(request, body=body):
                return httpx.Response(200, json=body)

            draft, used_fallback = asyncio.run(_service(handler).generate_form("anything"))
            self.assertTrue(used_fallback)
            self.assertEqual(draft.title, "Custom Form")

            fields, used_fallback = asyncio.run(_service(handler).generate_fields("contact"))
            self.assertTrue(used_fallback)
            self.assertEqual(len(fields), 3)

    def test_fenced_response_is_parsed(self):
        content = "```json\n" + json.dumps({
            "title": "Pet Adoption",
            "steps": [{"title": "About you", "fields": [{"type": "text", "label": "Name", "required": True}]}],
        }) + "\n```"
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=_completion(content))

        draft, used_fallback = asyncio.run(_service(handler).generate_form("pet adoption"))
        self.assertFalse(used_fallback)
        self.assertEqual(draft.title, "Pet Adoption")
        self.assertEqual(draft.steps[0].fields[0].label, "Name")
        self.assertEqual(len(seen), 1)
        self.assertIn("pet adoption", seen[0]["messages"][1]["content"])

    def test_unparseable_response_is_surfaced(self):
        for content in ("no braces at all", "{not json}", '{"title": "no steps"}'):
            with self.assertRaises(AIGenerationFailed) as ctx:
                asyncio.run(_service(_replying(content)).generate_form("anything"))
            self.assertEqual(ctx.exception.code, "AI_PARSE_FAILED")
            self.assertEqual(ctx.exception.status_code, 502)


class GenerateFieldsTests(unittest.TestCase):
    def test_parsed_fields(self):
        content = json.dumps({"fields": [{"type": "email", "label": "Work email"}]})
        fields, used_fallback = asyncio.run(_service(_replying(content)).generate_fields("work"))
        self.assertFalse(used_fallback)
        self.assertEqual(fields[0].label, "Work email")

    def test_unparseable_response_falls_back(self):
        fields, used_fallback = asyncio.run(_service(_replying("oops")).generate_fields("survey"))
        self.assertTrue(used_fallback)
        self.assertEqual([field.label for field in fields], ["Name", "Email", "Rating", "Comments"])
        self.assertEqual(fields[2].options, ["Excellent", "Good", "Average", "Poor"])

    def test_suggestions_accept_bare_array(self):
        content = json.dumps([{"type": "date", "label": "Start date"}])
        fields, used_fallback = asyncio.run(
            _service(_replying(content)).suggest_fields("Job", "Hiring", ["Name"])
        )
        self.assertFalse(used_fallback)
        self.assertEqual(fields[0].type, "date")

    def test_suggestions_fall_back_on_parse_failure(self):
        fields, used_fallback = asyncio.run(
            _service(_replying("```\nnot json\n```")).suggest_fields("Job", "", [])
        )
        self.assertTrue(used_fallback)
        self.assertEqual([field.label for field in fields], ["Additional Info", "Category", "Date"])


class FieldImprovementTests(unittest.TestCase):
    def test_suggestions_are_returned(self):
        content = json.dumps({"suggestions": [
            {"type": "validation", "message": "Check the format"},
            {"type": "placeholder"},
        ]})
        result = asyncio.run(_service(_replying(content)).suggest_field_improvements("Email", "email"))
        self.assertEqual(result["suggestions"], [{"type": "validation", "message": "Check the format"}])
        self.assertFalse(result["used_fallback"])

    def test_failures_yield_no_suggestions(self):
        for service in (_service(_replying("nope")), AIService(CompletionClient(api_key=""))):
            result = asyncio.run(service.suggest_field_improvements("Email", "email"))
            self.assertEqual(result["suggestions"], [])
