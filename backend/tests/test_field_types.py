import unittest

from formbuilder.services.field_types import (
    FieldKind,
    RenderStrategy,
    classify,
    normalize_options,
    render_and_validate,
    resolve_strategy,
)


def _field(**overrides):
    field = {
        "id": "f1",
        "type": "text",
        "label": "Name",
        "placeholder": None,
        "required": False,
        "options": None,
    }
    field.update(overrides)
    return field


class ClassifyTests(unittest.TestCase):
    def test_known_types(self):
        self.assertEqual(classify("Email"), FieldKind.EMAIL)
        self.assertEqual(classify(" textarea "), FieldKind.TEXTAREA)

    def test_legacy_boolean_aliases(self):
        self.assertEqual(classify("boolean"), FieldKind.CHECKBOX)
        self.assertEqual(classify("bool"), FieldKind.CHECKBOX)

    def test_unknown_types(self):
        self.assertEqual(classify("password"), FieldKind.UNKNOWN)
        self.assertEqual(classify(None), FieldKind.UNKNOWN)


class NormalizeOptionsTests(unittest.TestCase):
    def test_label_value_dicts(self):
        options = [{"label": "Yes", "value": "y"}, {"value": "n"}, "Maybe"]
        self.assertEqual(normalize_options(options), ["Yes", "n", "Maybe"])

    def test_json_and_comma_strings(self):
        self.assertEqual(normalize_options('["A", "B"]'), ["A", "B"])
        self.assertEqual(normalize_options("Red, Green ,,Blue"), ["Red", "Green", "Blue"])

    def test_missing(self):
        self.assertEqual(normalize_options(None), [])
        self.assertEqual(normalize_options(""), [])


class RenderStrategyTests(unittest.TestCase):
    def test_checkbox_without_options_is_boolean(self):
        spec = resolve_strategy(_field(type="checkbox", label="Subscribe"))
        self.assertEqual(spec.strategy, RenderStrategy.BOOLEAN)

    def test_checkbox_with_options_is_group(self):
        spec = resolve_strategy(_field(type="checkbox", options=["A", "B"]))
        self.assertEqual(spec.strategy, RenderStrategy.CHECKBOX_GROUP)
        self.assertEqual(spec.options, ("A", "B"))

    def test_unknown_type_affirmation_label_is_boolean(self):
        spec = resolve_strategy(_field(type="consent-box", label="I accept the policy"))
        self.assertEqual(spec.strategy, RenderStrategy.BOOLEAN)

    def test_unknown_type_plain_label_is_text(self):
        spec = resolve_strategy(_field(type="password", label="Password"))
        self.assertEqual(spec.strategy, RenderStrategy.SINGLE_LINE)
        self.assertEqual(spec.input_type, "text")

    def test_text_field_with_affirmation_label_stays_text(self):
        spec = resolve_strategy(_field(type="text", label="I am a member since"))
        self.assertEqual(spec.strategy, RenderStrategy.SINGLE_LINE)

    def test_select_with_comma_string_options(self):
        spec = resolve_strategy(_field(type="select", options="One, Two"))
        self.assertEqual(spec.strategy, RenderStrategy.SELECT)
        self.assertEqual(spec.options, ("One", "Two"))

    def test_scalar_input_types(self):
        self.assertEqual(resolve_strategy(_field(type="tel")).input_type, "tel")
        self.assertEqual(resolve_strategy(_field(type="date")).strategy, RenderStrategy.DATE)
        self.assertEqual(resolve_strategy(_field(type="textarea")).strategy, RenderStrategy.MULTI_LINE)


class ValidateValueTests(unittest.TestCase):
    def test_required_select(self):
        field = _field(type="select", label="Choice", options=["A", "B"], required=True)

        _, result = render_and_validate(field, "")
        self.assertFalse(result.valid)
        self.assertEqual(result.message, "Choice is required")

        _, result = render_and_validate(field, "A")
        self.assertTrue(result.valid)

        # Options describe the field; they do not restrict the answer
        _, result = render_and_validate(field, "C")
        self.assertTrue(result.valid)

    def test_affirmation_checkbox(self):
        field = _field(type="checkbox", label="I agree to the terms", required=True)

        _, result = render_and_validate(field, False)
        self.assertFalse(result.valid)
        self.assertEqual(result.message, "I agree to the terms is required")
        self.assertEqual(result.field_id, "f1")

        _, result = render_and_validate(field, True)
        self.assertTrue(result.valid)

    def test_required_checkbox_group_needs_a_choice(self):
        field = _field(type="checkbox", label="Days", options=["Mon", "Tue"], required=True)
        self.assertFalse(render_and_validate(field, [])[1].valid)
        self.assertTrue(render_and_validate(field, ["Mon"])[1].valid)

    def test_email(self):
        field = _field(type="email", label="Email")
        self.assertEqual(render_and_validate(field, "nope")[1].message, "Enter a valid email")
        self.assertTrue(render_and_validate(field, "a@b.co")[1].valid)
        self.assertTrue(render_and_validate(field, "")[1].valid)

    def test_phone(self):
        field = _field(type="tel", label="Phone")
        self.assertEqual(render_and_validate(field, "12-34")[1].message, "Enter a valid phone")
        self.assertTrue(render_and_validate(field, "+1 (555) 000-0000")[1].valid)

    def test_date(self):
        field = _field(type="date", label="Birthday", required=True)
        self.assertEqual(render_and_validate(field, "31/12/2020")[1].message, "Enter a valid date")
        self.assertTrue(render_and_validate(field, "2020-12-31")[1].valid)
        self.assertTrue(render_and_validate(field, "2020-12-31T10:00:00Z")[1].valid)

    def test_required_text_whitespace(self):
        field = _field(required=True)
        self.assertFalse(render_and_validate(field, "   ")[1].valid)
        self.assertFalse(render_and_validate(field, None)[1].valid)
