"""
Contact Service - Validates project inquiries from the contact form.

Inquiries are checked field by field so the form can show a message
next to each input. Nothing is stored or sent.
"""
import logging
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{6,20}$")


class ProjectType(str, Enum):
    PROTOTYPE = "prototype"
    VALIDATION = "validation"
    TOOLING = "tooling"
    END_USE = "enduse"
    OTHER = "other"

    @property
    def label(self) -> str:
        return PROJECT_TYPE_LABELS[self]


PROJECT_TYPE_LABELS = {
    ProjectType.PROTOTYPE: "Functional Prototype",
    ProjectType.VALIDATION: "Design Validation",
    ProjectType.TOOLING: "Manufacturing Tooling",
    ProjectType.END_USE: "End-Use Parts",
    ProjectType.OTHER: "Other",
}


class ContactInquiry(BaseModel):
    """A validated contact-form submission."""
    name: str
    email: str
    phone: Optional[str] = None
    project_type: ProjectType
    message: str

    @field_validator('name', 'message')
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required")
        return value

    @field_validator('email')
    @classmethod
    def email_shape(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Enter a valid email address")
        return value

    @field_validator('phone')
    @classmethod
    def phone_shape(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not PHONE_PATTERN.match(value):
            raise ValueError("Enter a valid phone number")
        return value


class ContactFormError(ValueError):
    """Raised when an inquiry fails validation; `errors` maps field → message."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def submit_inquiry(data: dict) -> ContactInquiry:
    """
    Validate a contact-form submission.

    Args:
        data: Raw form values keyed by field name

    Returns:
        The validated ContactInquiry

    Raises:
        ContactFormError: with one message per invalid field
    """
    try:
        inquiry = ContactInquiry(**data)
    except ValidationError as e:
        errors = {}
        for err in e.errors():
            field = str(err['loc'][0]) if err['loc'] else 'form'
            message = err['msg']
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.setdefault(field, message)
        raise ContactFormError(errors) from e

    logger.info("Contact inquiry received: %s project from %s", inquiry.project_type.value, inquiry.email)
    return inquiry
