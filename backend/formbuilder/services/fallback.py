"""
Deterministic generators used when the completion API is unavailable.

Each function keyword-matches the lower-cased prompt against a fixed,
ordered list of phrases and returns a fresh copy of a hand-written
structure. They are pure and never fail.
"""

import copy
from typing import Any, Dict, List, Optional


BLOOD_DONATION_FORM = {
    "title": "Blood Donation Form",
    "description": "Collect donor details and medical screening information.",
    "steps": [
        {
            "title": "Donor Information",
            "description": "Basic contact details",
            "fields": [
                {"type": "text", "label": "Full Name", "placeholder": "Enter your full name", "required": True},
                {"type": "email", "label": "Email", "placeholder": "you@example.com", "required": True},
                {"type": "tel", "label": "Phone Number", "placeholder": "+1 (555) 000-0000", "required": True},
                {"type": "date", "label": "Date of Birth", "required": True},
            ],
        },
        {
            "title": "Eligibility",
            "description": "Medical screening",
            "fields": [
                {
                    "type": "select",
                    "label": "Blood Type",
                    "options": ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"],
                    "required": True,
                },
                {"type": "checkbox", "label": "I am not currently ill", "required": True},
                {"type": "checkbox", "label": "I have not donated blood in the last 3 months", "required": True},
                {
                    "type": "textarea",
                    "label": "Medical Conditions",
                    "placeholder": "List any relevant conditions",
                    "required": False,
                },
            ],
        },
        {
            "title": "Consent",
            "description": "Review and agree",
            "fields": [
                {"type": "checkbox", "label": "I consent to donate blood", "required": True},
                {
                    "type": "textarea",
                    "label": "Additional Notes",
                    "placeholder": "Anything else we should know?",
                    "required": False,
                },
            ],
        },
    ],
}

REGISTRATION_FORM = {
    "title": "Registration Form",
    "description": "Basic details to get started",
    "steps": [
        {
            "title": "Details",
            "fields": [
                {"type": "text", "label": "Name", "placeholder": "Your full name", "required": True},
                {"type": "email", "label": "Email", "placeholder": "you@example.com", "required": True},
                {"type": "tel", "label": "Phone", "placeholder": "+1 (555) 000-0000", "required": False},
            ],
        }
    ],
}

CUSTOM_FORM = {
    "title": "Custom Form",
    "description": "Generated from your prompt",
    "steps": [
        {
            "title": "Step 1",
            "fields": [
                {"type": "text", "label": "Name", "placeholder": "Enter your name", "required": True},
                {"type": "email", "label": "Email", "placeholder": "you@example.com", "required": True},
                {"type": "textarea", "label": "Notes", "placeholder": "Add more details", "required": False},
            ],
        }
    ],
}

CONTACT_FIELDS = [
    {"type": "text", "label": "Full Name", "placeholder": "Enter your full name", "required": True},
    {"type": "email", "label": "Email Address", "placeholder": "your@email.com", "required": True},
    {"type": "tel", "label": "Phone Number", "placeholder": "+1 (555) 000-0000", "required": False},
]

SURVEY_FIELDS = [
    {"type": "text", "label": "Name", "placeholder": "Your name", "required": True},
    {"type": "email", "label": "Email", "placeholder": "your@email.com", "required": True},
    {"type": "select", "label": "Rating", "options": ["Excellent", "Good", "Average", "Poor"], "required": True},
    {"type": "textarea", "label": "Comments", "placeholder": "Share your feedback...", "required": False},
]

REGISTRATION_FIELDS = [
    {"type": "text", "label": "Full Name", "placeholder": "Enter your full name", "required": True},
    {"type": "email", "label": "Email", "placeholder": "your@email.com", "required": True},
    {"type": "tel", "label": "Phone", "placeholder": "+1 (555) 000-0000", "required": False},
    {"type": "date", "label": "Date of Birth", "required": False},
]

GENERIC_FIELDS = [
    {"type": "text", "label": "Name", "placeholder": "Enter your name", "required": True},
    {"type": "email", "label": "Email", "placeholder": "your@email.com", "required": True},
    {"type": "textarea", "label": "Message", "placeholder": "Enter your message", "required": False},
]

SUGGESTED_FIELDS = [
    {"type": "text", "label": "Additional Info", "placeholder": "Enter details", "required": False},
    {"type": "select", "label": "Category", "options": ["Option 1", "Option 2", "Option 3"], "required": False},
    {"type": "date", "label": "Date", "placeholder": "Select date", "required": False},
]

# Checked in order; the first rule whose keywords match wins
FIELD_RULES = [
    (("contact", "email"), CONTACT_FIELDS),
    (("survey", "feedback"), SURVEY_FIELDS),
    (("registration", "signup"), REGISTRATION_FIELDS),
]


def fallback_form(prompt: Optional[str]) -> Dict[str, Any]:
    """Whole-form fallback: a canned ``{title, description, steps}`` tree."""
    text = (prompt or "").lower()
    if "blood" in text and "donation" in text:
        return copy.deepcopy(BLOOD_DONATION_FORM)
    if any(keyword in text for keyword in ("contact", "registration", "signup")):
        return copy.deepcopy(REGISTRATION_FORM)
    return copy.deepcopy(CUSTOM_FORM)


def fallback_fields(prompt: Optional[str]) -> List[Dict[str, Any]]:
    """Quick-generation fallback: a canned list of fields."""
    text = (prompt or "").lower()
    for keywords, fields in FIELD_RULES:
        if any(keyword in text for keyword in keywords):
            return copy.deepcopy(fields)
    return copy.deepcopy(GENERIC_FIELDS)


def fallback_suggestions(
    form_title: str = "",
    form_description: str = "",
    existing_fields: Optional[List[str]] = None
) -> List[Dict[str, Any]]:
    """Context suggestion fallback: the same three general-purpose fields."""
    return copy.deepcopy(SUGGESTED_FIELDS)
