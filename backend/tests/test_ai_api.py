import httpx

from support import DatabaseTestCase

from formbuilder.main import app
from formbuilder.services.ai import AIService, CompletionClient, get_ai_service


def _service_replying(content):
    def handler(request):
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})
    return AIService(CompletionClient(api_key="test-key", transport=httpx.MockTransport(handler)))


class AIApiTests(DatabaseTestCase):
    def tearDown(self):
        app.dependency_overrides.pop(get_ai_service, None)

    def test_generate_form_without_key_uses_fallback(self):
        response = self.client.post(
            "/api/ai/generate-form", json={"prompt": "blood donation drive"}, headers=self.auth()
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertTrue(body["used_fallback"])
        self.assertEqual([len(step["fields"]) for step in body["form"]["steps"]], [4, 4, 2])

    def test_generate_form_parse_failure_is_502(self):
        app.dependency_overrides[get_ai_service] = lambda: _service_replying("I cannot help with that")
        response = self.client.post("/api/ai/generate-form", json={"prompt": "anything"}, headers=self.auth())
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], {"error": "Failed to parse AI response", "code": "AI_PARSE_FAILED"})

    def test_generate_fields_parse_failure_falls_back(self):
        app.dependency_overrides[get_ai_service] = lambda: _service_replying("I cannot help with that")
        response = self.client.post("/api/ai/generate-fields", json={"prompt": "contact"}, headers=self.auth())
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["used_fallback"])
        self.assertEqual(len(response.json()["fields"]), 3)

    def test_suggest_fields_and_improvements(self):
        response = self.client.post(
            "/api/ai/suggest-fields",
            json={"form_title": "Job application", "existing_fields": ["Name"]},
            headers=self.auth(),
        )
        self.assertEqual([field["label"] for field in response.json()["fields"]], ["Additional Info", "Category", "Date"])

        response = self.client.post(
            "/api/ai/field-improvements", json={"field_label": "Email"}, headers=self.auth()
        )
        self.assertEqual(response.json()["suggestions"], [])

    def test_empty_prompt_is_rejected(self):
        response = self.client.post("/api/ai/generate-fields", json={"prompt": ""}, headers=self.auth())
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["code"], "INVALID_PROMPT")
