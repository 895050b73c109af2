import unittest
from types import SimpleNamespace

from formbuilder.errors import AnswerRejected, ValidationFailed
from formbuilder.services.filling import FillSession, build_submission_data


def _field(field_id, label, order_index, field_type="text", required=False, options=None):
    return SimpleNamespace(
        id=field_id,
        type=field_type,
        label=label,
        placeholder=None,
        required=required,
        options=options,
        order_index=order_index,
        created_at=None,
    )


def _step(step_id, order_index, fields):
    return SimpleNamespace(id=step_id, order_index=order_index, created_at=None, fields=fields)


class FillSessionTests(unittest.TestCase):
    def setUp(self):
        self.steps = [
            _step("s2", 1, [
                _field("terms", "I agree to the terms", 0, "checkbox", required=True),
            ]),
            _step("s1", 0, [
                _field("email", "Email", 1, "email", required=True),
                _field("name", "Name", 0, required=True),
            ]),
        ]

    def test_steps_follow_order_index(self):
        session = FillSession(self.steps)
        self.assertEqual([step.id for step in session.steps], ["s1", "s2"])

    def test_advance_is_gated_and_fail_fast(self):
        session = FillSession(self.steps)
        result = session.advance()
        self.assertFalse(result.valid)
        # Name sorts before Email, so it is the one reported
        self.assertEqual(result.field_id, "name")
        self.assertEqual(result.message, "Name is required")
        self.assertEqual(session.current, 0)

        session.set_answer("name", "Ann")
        session.set_answer("email", "not-an-email")
        self.assertEqual(session.advance().message, "Enter a valid email")

        session.set_answer("email", "ann@example.com")
        self.assertTrue(session.advance().valid)
        self.assertEqual(session.current, 1)
        self.assertTrue(session.is_last_step)

    def test_back_never_validates(self):
        session = FillSession(self.steps, {"name": "Ann", "email": "ann@example.com"})
        session.advance()
        session.set_answer("name", "")
        session.back()
        self.assertEqual(session.current, 0)
        session.back()
        self.assertEqual(session.current, 0)

    def test_submit_only_from_last_step(self):
        session = FillSession(self.steps, {"name": "Ann", "email": "ann@example.com", "terms": True})
        with self.assertRaises(ValidationFailed) as ctx:
            session.submit()
        self.assertEqual(ctx.exception.code, "NOT_LAST_STEP")

        session.advance()
        data = session.submit()
        self.assertEqual(data, {"Name": "Ann", "Email": "ann@example.com", "I agree to the terms": True})

    def test_submit_rejects_unchecked_affirmation(self):
        session = FillSession(self.steps, {"name": "Ann", "email": "ann@example.com", "terms": False})
        session.advance()
        with self.assertRaises(AnswerRejected) as ctx:
            session.submit()
        self.assertEqual(ctx.exception.message, "I agree to the terms is required")
        self.assertEqual(ctx.exception.field_id, "terms")
        self.assertEqual(ctx.exception.step_index, 1)

    def test_submit_all_reports_first_failing_step(self):
        session = FillSession(self.steps, {"terms": False})
        with self.assertRaises(AnswerRejected) as ctx:
            session.submit_all()
        self.assertEqual(ctx.exception.step_index, 0)
        self.assertEqual(ctx.exception.field_id, "name")

    def test_validate_step_out_of_range(self):
        with self.assertRaises(ValidationFailed) as ctx:
            FillSession(self.steps).validate_step(5)
        self.assertEqual(ctx.exception.code, "INVALID_STEP_INDEX")

    def test_form_without_fields_cannot_be_submitted(self):
        with self.assertRaises(ValidationFailed) as ctx:
            FillSession([_step("s1", 0, [])]).submit_all()
        self.assertEqual(ctx.exception.code, "EMPTY_DATA")


class SubmissionDataTests(unittest.TestCase):
    def test_keys_are_labels_and_missing_answers_are_empty(self):
        steps = [_step("s1", 0, [_field("a", "Name", 0), _field("b", "Phone", 1, "tel")])]
        self.assertEqual(build_submission_data(steps, {"a": "Ann"}), {"Name": "Ann", "Phone": ""})

    def test_duplicate_labels_keep_the_last_answer(self):
        steps = [
            _step("s1", 0, [_field("first", "Name", 0)]),
            _step("s2", 1, [_field("second", "Name", 0)]),
        ]
        with self.assertLogs("formbuilder.services.filling", level="WARNING"):
            data = build_submission_data(steps, {"first": "Ann", "second": "Bob"})
        self.assertEqual(data, {"Name": "Bob"})
