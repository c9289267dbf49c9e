"""
Field validation rules.

Validators only read a snapshot of a field and return a `ValidationResult`;
they never touch the page. Reflecting a result on screen is the job of
`FieldErrorState`, and blocking a submission is the job of `FormGatekeeper`.
"""

import re
from dataclasses import dataclass
from enum import Enum

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

INVALID_EMAIL_MESSAGE = 'Please enter a valid email address'
REQUIRED_MESSAGE = 'This field is required'


class FieldType(str, Enum):
    TEXT = 'text'
    EMAIL = 'email'
    PASSWORD = 'password'
    FILE = 'file'
    OTHER = 'other'

    @classmethod
    def from_element_type(cls, raw: str) -> 'FieldType':
        """Map an element's `type` attribute (or tag name) onto a FieldType."""
        value = (raw or 'text').strip().lower()
        if value == 'textarea':
            return cls.TEXT
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Field:
    """What the validator needs to know about a form control."""

    type: FieldType
    value: str = ''
    required: bool = False
    name: str = ''


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str = ''

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def accept(cls) -> 'ValidationResult':
        return cls(True)

    @classmethod
    def reject(cls, message: str) -> 'ValidationResult':
        return cls(False, message)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def validate_field(field: Field) -> ValidationResult:
    """Apply the field rules; the first failing rule wins.

    The email format is only checked on non-empty values, so an empty optional
    email field passes. Whitespace-only values count as empty.
    """
    value = field.value.strip()

    if field.type is FieldType.EMAIL and value and not is_valid_email(value):
        return ValidationResult.reject(INVALID_EMAIL_MESSAGE)

    if field.required and not value:
        return ValidationResult.reject(REQUIRED_MESSAGE)

    return ValidationResult.accept()
