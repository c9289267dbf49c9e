"""Per-field error annotations."""

from typing import Optional

ERROR_CLASS = 'error'
ANNOTATION_CLASSES = 'field-error security-warning'
ANNOTATION_KEY_ATTR = 'data-error-for'
ANNOTATION_STYLE = 'font-size: 0.8rem; margin-top: 5px; padding: 5px 10px;'


class FieldErrorState:
    """Shows and clears the error annotation of a field.

    This is the only writer of a field's error state. An annotation is placed
    right after its field and tagged with the field's key, so fields sharing a
    parent do not clear each other's errors.
    """

    def __init__(self, document):
        self.document = document

    def _annotation(self, field):
        parent = field.parent
        if parent is None:
            return None
        key = self.document.field_key(field)
        return parent.find('div', attrs={ANNOTATION_KEY_ATTR: key}, recursive=False)

    def show(self, field, message: str) -> None:
        self.clear(field)
        annotation = self.document.create('div', {
            'class': ANNOTATION_CLASSES,
            ANNOTATION_KEY_ATTR: self.document.field_key(field),
            'style': ANNOTATION_STYLE,
            'role': 'alert',
        }, text=message)
        self.document.insert_after(field, annotation)
        self.document.add_class(field, ERROR_CLASS)

    def clear(self, field) -> None:
        annotation = self._annotation(field)
        if annotation is not None:
            self.document.remove(annotation)
        self.document.remove_class(field, ERROR_CLASS)

    def has_error(self, field) -> bool:
        return self.document.has_class(field, ERROR_CLASS)

    def message_for(self, field) -> Optional[str]:
        annotation = self._annotation(field)
        return annotation.get_text() if annotation is not None else None
