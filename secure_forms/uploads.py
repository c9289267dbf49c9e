"""
Upload checks for file inputs.

`validate_file` is a pure predicate over the selected file's declared MIME
type and size. `UploadGuard` wires it to the `change` event of every file
input: a rejected file is cleared from the input so it cannot be submitted
by accident, an accepted one produces a short success notification.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from secure_forms.validators import ValidationResult

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({
    'image/jpeg',
    'image/png',
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
})
ALLOWED_EXTENSIONS = '.jpg,.jpeg,.png,.pdf,.doc,.docx'
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
MAX_UPLOAD_READABLE = '5MB'

INVALID_TYPE_MESSAGE = f'Invalid file type. Allowed: JPG, PNG, PDF, DOC (max {MAX_UPLOAD_READABLE})'
TOO_LARGE_MESSAGE = f'File too large. Maximum size is {MAX_UPLOAD_READABLE}'
ACCEPTED_MESSAGE = 'File looks good!'


@dataclass(frozen=True)
class FileDescriptor:
    mime_type: str
    size_bytes: int


def validate_file(descriptor: Optional[FileDescriptor]) -> ValidationResult:
    """Check a selected file. No selection is not an error.

    The type check runs first, so a file that is both the wrong type and too
    large reports the type problem.
    """
    if descriptor is None:
        return ValidationResult.accept()
    if descriptor.mime_type not in ALLOWED_MIME_TYPES:
        return ValidationResult.reject(INVALID_TYPE_MESSAGE)
    if descriptor.size_bytes > MAX_UPLOAD_BYTES:
        return ValidationResult.reject(TOO_LARGE_MESSAGE)
    return ValidationResult.accept()


class UploadGuard:
    def __init__(self, document, events, errors, notifications):
        self.document = document
        self.events = events
        self.errors = errors
        self.notifications = notifications

    def setup(self) -> None:
        for element in self.document.file_inputs():
            if not self.events.is_wired(element, 'change'):
                self.events.on(element, 'change', lambda event: self.check(event.target))
            if not element.get('accept'):
                element['accept'] = ALLOWED_EXTENSIONS

    def check(self, element) -> bool:
        result = validate_file(self.document.selected_file(element))
        if not result:
            logger.info('Rejected upload on %r: %s', element.get('name'), result.message)
            self.errors.show(element, result.message)
            self.document.set_value(element, '')
            return False
        if self.document.selected_file(element) is None:
            return True
        self.errors.clear(element)
        self.notifications.notify(ACCEPTED_MESSAGE, 'success')
        return True
