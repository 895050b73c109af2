"""Starter templates offered on a fresh installation."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from formbuilder.models.template import Template
from formbuilder.services.validation import clean_template

logger = logging.getLogger(__name__)


STARTER_TEMPLATES: List[Dict[str, Any]] = [
    {
        "name": "Contact Form",
        "description": "Simple contact form for general inquiries",
        "icon": "Mail",
        "category": "General",
        "config": {
            "steps": [
                {
                    "title": "Contact Information",
                    "fields": [
                        {"type": "text", "label": "Full Name", "required": True,
                         "placeholder": "Enter your full name"},
                        {"type": "email", "label": "Email", "required": True,
                         "placeholder": "your@email.com"},
                        {"type": "textarea", "label": "Message", "required": True,
                         "placeholder": "Enter your message"},
                    ],
                }
            ]
        },
    },
    {
        "name": "Survey Form",
        "description": "Multi-step survey to collect feedback",
        "icon": "ClipboardList",
        "category": "Survey",
        "config": {
            "steps": [
                {
                    "title": "Personal Information",
                    "fields": [
                        {"type": "text", "label": "Name", "required": True, "placeholder": "Your name"},
                        {"type": "select", "label": "Age Range", "required": True,
                         "options": ["18-24", "25-34", "35-44", "45+"]},
                    ],
                },
                {
                    "title": "Survey Questions",
                    "fields": [
                        {"type": "radio", "label": "How satisfied are you with our service?", "required": True,
                         "options": ["Very Satisfied", "Satisfied", "Neutral", "Dissatisfied", "Very Dissatisfied"]},
                        {"type": "textarea", "label": "Additional Comments", "required": False,
                         "placeholder": "Share your thoughts..."},
                    ],
                },
            ]
        },
    },
    {
        "name": "Registration Form",
        "description": "Multi-step registration form",
        "icon": "UserPlus",
        "category": "Registration",
        "config": {
            "steps": [
                {
                    "title": "Account Information",
                    "fields": [
                        {"type": "text", "label": "Username", "required": True,
                         "placeholder": "Choose a username"},
                        {"type": "email", "label": "Email Address", "required": True,
                         "placeholder": "your@email.com"},
                        {"type": "password", "label": "Password", "required": True,
                         "placeholder": "Enter a strong password"},
                    ],
                },
                {
                    "title": "Personal Details",
                    "fields": [
                        {"type": "text", "label": "First Name", "required": True, "placeholder": "First name"},
                        {"type": "text", "label": "Last Name", "required": True, "placeholder": "Last name"},
                        {"type": "tel", "label": "Phone Number", "required": False,
                         "placeholder": "+1 (555) 000-0000"},
                        {"type": "checkbox", "label": "I agree to the terms and conditions", "required": True},
                    ],
                },
            ]
        },
    },
    {
        "name": "Feedback Form",
        "description": "Collect product or service feedback",
        "icon": "MessageSquare",
        "category": "Feedback",
        "config": {
            "steps": [
                {
                    "title": "Your Feedback",
                    "fields": [
                        {"type": "text", "label": "Name", "required": True, "placeholder": "Your name"},
                        {"type": "email", "label": "Email", "required": True, "placeholder": "your@email.com"},
                        {"type": "select", "label": "Feedback Category", "required": True,
                         "options": ["Product Quality", "Customer Service", "Website Experience", "Pricing", "Other"]},
                        {"type": "radio", "label": "Overall Rating", "required": True,
                         "options": ["1", "2", "3", "4", "5"]},
                        {"type": "textarea", "label": "Detailed Feedback", "required": True,
                         "placeholder": "Please share your feedback in detail..."},
                    ],
                }
            ]
        },
    },
]


def seed_templates(db: Session) -> int:
    """
    Insert the starter templates, or refresh them when they already exist.

    Templates are matched by name. Returns the number of new templates.
    """
    created = 0
    for payload in STARTER_TEMPLATES:
        cleaned = clean_template(payload)
        template = db.query(Template).filter(Template.name == cleaned["name"]).first()
        if template is None:
            db.add(Template(**cleaned))
            created += 1
            logger.info("Created template: %s", cleaned["name"])
        else:
            for key, value in cleaned.items():
                setattr(template, key, value)
            logger.info("Updated template: %s", cleaned["name"])
    db.commit()
    return created
