import uuid

from support import DatabaseTestCase

from formbuilder.models import Submission, SubmissionDraft

TREE = [
    {
        "title": "Contact",
        "fields": [
            {"type": "text", "label": "Name", "required": True},
            {"type": "email", "label": "Email", "required": True},
        ],
    },
    {
        "title": "Extra",
        "fields": [
            {"type": "text", "label": "Name"},
            {"type": "checkbox", "label": "Topics", "options": ["News", "Offers"]},
            {"type": "checkbox", "label": "I agree to the terms", "required": True},
        ],
    },
]


class PublicApiTestCase(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        response = self.client.post("/api/forms", json={"title": "Newsletter", "steps": TREE}, headers=self.auth())
        self.form = response.json()
        self.fields = {
            (step_index, field["order_index"]): field["id"]
            for step_index, step in enumerate(self.form["steps"])
            for field in step["fields"]
        }

    def publish(self):
        self.client.post(f"/api/forms/{self.form['id']}/publish", headers=self.auth())

    def answers(self, **overrides):
        answers = {
            self.fields[(0, 0)]: "Ann",
            self.fields[(0, 1)]: "ann@example.com",
            self.fields[(1, 0)]: "Annie",
            self.fields[(1, 1)]: ["News"],
            self.fields[(1, 2)]: True,
        }
        answers.update(overrides)
        return answers


class PublicFormTests(PublicApiTestCase):
    def test_unpublished_and_missing_forms_look_the_same(self):
        unpublished = self.client.get(f"/api/public/forms/{self.form['id']}")
        missing = self.client.get(f"/api/public/forms/{uuid.uuid4()}")
        self.assertEqual(unpublished.status_code, 404)
        self.assertEqual(unpublished.json(), missing.json())
        self.assertEqual(unpublished.json()["detail"]["code"], "FORM_NOT_FOUND")

    def test_published_form_has_render_hints(self):
        self.publish()
        response = self.client.get(f"/api/public/forms/{self.form['id']}")
        self.assertEqual(response.status_code, 200)
        extra = response.json()["steps"][1]["fields"]
        self.assertEqual(
            [field["render"]["strategy"] for field in extra],
            ["single_line", "checkbox_group", "boolean"]
        )
        self.assertEqual(extra[1]["render"]["options"], ["News", "Offers"])
        self.assertNotIn("user_id", response.json())

    def test_step_gate(self):
        self.publish()
        url = f"/api/public/forms/{self.form['id']}/steps/0/validate"

        response = self.client.post(url, json={"answers": {self.fields[(0, 0)]: "Ann"}})
        self.assertEqual(response.json(), {
            "valid": False,
            "step_index": 0,
            "field_id": self.fields[(0, 1)],
            "message": "Email is required",
        })

        response = self.client.post(url, json={"answers": self.answers()})
        self.assertTrue(response.json()["valid"])

        response = self.client.post(f"/api/public/forms/{self.form['id']}/steps/7/validate", json={"answers": {}})
        self.assertEqual(response.json()["detail"]["code"], "INVALID_STEP_INDEX")


class PublicSubmissionTests(PublicApiTestCase):
    def test_submission_is_keyed_by_label(self):
        self.publish()
        response = self.client.post(
            f"/api/public/forms/{self.form['id']}/submissions",
            json={"answers": self.answers()},
        )
        self.assertEqual(response.status_code, 201, response.text)
        # The second "Name" field overwrites the first
        self.assertEqual(response.json()["data"], {
            "Name": "Annie",
            "Email": "ann@example.com",
            "Topics": ["News"],
            "I agree to the terms": True,
        })

    def test_unanswered_optional_fields_are_empty_strings(self):
        self.publish()
        answers = self.answers()
        del answers[self.fields[(1, 0)]]
        del answers[self.fields[(1, 1)]]
        response = self.client.post(f"/api/public/forms/{self.form['id']}/submissions", json={"answers": answers})
        self.assertEqual(response.json()["data"]["Name"], "")
        self.assertEqual(response.json()["data"]["Topics"], "")

    def test_first_invalid_answer_aborts(self):
        self.publish()
        response = self.client.post(
            f"/api/public/forms/{self.form['id']}/submissions",
            json={"answers": self.answers(**{self.fields[(0, 1)]: "nope", self.fields[(1, 2)]: False})},
        )
        self.assertEqual(response.status_code, 400)
        detail = response.json()["detail"]
        self.assertEqual(detail["code"], "INVALID_ANSWER")
        self.assertEqual(detail["error"], "Enter a valid email")
        self.assertEqual(detail["step_index"], 0)

        response = self.client.post(
            f"/api/public/forms/{self.form['id']}/submissions",
            json={"answers": self.answers(**{self.fields[(1, 2)]: False})},
        )
        self.assertEqual(response.json()["detail"]["error"], "I agree to the terms is required")
        self.assertEqual(response.json()["detail"]["step_index"], 1)

        with self.SessionLocal() as db:
            self.assertEqual(db.query(Submission).count(), 0)

    def test_nested_answer_values_are_rejected(self):
        self.publish()
        response = self.client.post(
            f"/api/public/forms/{self.form['id']}/submissions",
            json={"answers": self.answers(**{self.fields[(0, 0)]: {"first": "Ann"}})},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["code"], "INVALID_ANSWERS")

        with self.SessionLocal() as db:
            self.assertEqual(db.query(Submission).count(), 0)

    def test_unpublished_form_rejects_submissions(self):
        response = self.client.post(
            f"/api/public/forms/{self.form['id']}/submissions",
            json={"answers": self.answers()},
        )
        self.assertEqual(response.status_code, 404)


class DraftTests(PublicApiTestCase):
    def test_save_restore_and_clear_on_submit(self):
        self.publish()
        url = f"/api/public/forms/{self.form['id']}/drafts/browser-1"

        self.assertEqual(self.client.get(url).json()["detail"]["code"], "DRAFT_NOT_FOUND")

        self.client.put(url, json={"answers": {self.fields[(0, 0)]: "A"}})
        response = self.client.put(url, json={"answers": {self.fields[(0, 0)]: "Ann"}})
        self.assertEqual(response.status_code, 200, response.text)

        response = self.client.get(url)
        self.assertEqual(response.json()["answers"], {self.fields[(0, 0)]: "Ann"})
        self.assertEqual(response.json()["draft_key"], "browser-1")

        response = self.client.post(
            f"/api/public/forms/{self.form['id']}/submissions",
            json={"answers": self.answers(), "draft_key": "browser-1"},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.client.get(url).status_code, 404)

        with self.SessionLocal() as db:
            self.assertEqual(db.query(SubmissionDraft).count(), 0)

    def test_invalid_answers_payload(self):
        self.publish()
        response = self.client.put(
            f"/api/public/forms/{self.form['id']}/drafts/browser-1", json={"answers": ["x"]}
        )
        self.assertEqual(response.json()["detail"]["code"], "INVALID_ANSWERS")
