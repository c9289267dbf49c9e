"""
Document collaborator.

`Document` is the only place that knows the page is a BeautifulSoup tree. It
finds elements by role (forms, fields of a form, file inputs, password
inputs, secure links), reads field snapshots for the validators, and performs
the handful of mutations the security layer needs: inserting and removing
elements, toggling classes, setting values and tracking file selections.

A file input never carries its selection in the markup. The selected file is
tracked next to the tree, the way a browser keeps `input.files` outside the
serialized HTML.
"""

import itertools
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from secure_forms.uploads import FileDescriptor
from secure_forms.validators import Field, FieldType

FIELD_TAGS = ['input', 'textarea']
FIELD_KEY_ATTR = 'data-field-key'


def _type_is(expected: str):
    return lambda value: bool(value) and value.strip().lower() == expected


class Document:
    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self._files: Dict[int, Tuple[Tag, FileDescriptor, str]] = {}
        self._keys = itertools.count(1)

    @classmethod
    def from_html(cls, html: str) -> 'Document':
        return cls(BeautifulSoup(html, 'html.parser'))

    def html(self) -> str:
        return str(self.soup)

    @property
    def body(self) -> Tag:
        return self.soup.body or self.soup

    # Discovery

    def forms(self) -> List[Tag]:
        return self.soup.find_all('form')

    def form_by_id(self, form_id: str) -> Tag:
        form = self.soup.find('form', id=form_id)
        if form is None:
            raise LookupError(f'no form with id {form_id!r} on the page')
        return form

    def fields(self, form: Tag) -> List[Tag]:
        return form.find_all(FIELD_TAGS)

    def named(self, container: Tag, name: str) -> Optional[Tag]:
        return container.find(attrs={'name': name})

    def file_inputs(self) -> List[Tag]:
        return self.soup.find_all('input', attrs={'type': _type_is('file')})

    def password_inputs(self) -> List[Tag]:
        return self.soup.find_all('input', attrs={'type': _type_is('password')})

    def secure_links(self) -> List[Tag]:
        return self.soup.find_all('a', href=lambda href: bool(href) and href.startswith('https://'))

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    # Field state

    def element_type(self, element: Tag) -> FieldType:
        if element.name == 'textarea':
            return FieldType.TEXT
        return FieldType.from_element_type(element.get('type', 'text'))

    def field_key(self, element: Tag) -> str:
        """Identifier, unique on the page, pairing a field with its error annotation.

        A field's id is used when no other element carries it; otherwise a
        `field-N` key is generated. Names are never used, since array inputs
        and radio groups share them.
        """
        key = element.get(FIELD_KEY_ATTR)
        if not key:
            element_id = element.get('id')
            if element_id and self._key_is_free(element_id, element):
                key = element_id
            else:
                key = f'field-{next(self._keys)}'
                while not self._key_is_free(key, element):
                    key = f'field-{next(self._keys)}'
            element[FIELD_KEY_ATTR] = key
        return key

    def _key_is_free(self, key: str, element: Tag) -> bool:
        others = self.soup.find_all(attrs={'id': key}) + self.soup.find_all(attrs={FIELD_KEY_ATTR: key})
        return all(other is element for other in others)

    def value(self, element: Tag) -> str:
        if element.name == 'textarea':
            return element.string or ''
        if self.element_type(element) is FieldType.FILE:
            selection = self._files.get(id(element))
            return selection[2] if selection else ''
        return element.get('value', '')

    def set_value(self, element: Tag, value: str) -> None:
        if element.name == 'textarea':
            element.string = value
        elif self.element_type(element) is FieldType.FILE:
            # Scripts may only reset a file input, never pick a file for it
            if value:
                raise ValueError('a file input can only be reset to an empty value')
            self._files.pop(id(element), None)
        else:
            element['value'] = value

    def snapshot(self, element: Tag) -> Field:
        return Field(
            type=self.element_type(element),
            value=self.value(element),
            required=element.has_attr('required'),
            name=element.get('name', ''),
        )

    def fill(self, form: Tag, values: Mapping[str, str], skip: Iterable[str] = ()) -> None:
        """Write submitted values into the form's fields, matched by name."""
        skipped = set(skip)
        for element in self.fields(form):
            name = element.get('name')
            if not name or name in skipped:
                continue
            kind = (element.get('type') or '').lower()
            if kind in ('checkbox', 'radio'):
                if values.get(name) == element.get('value', 'on'):
                    element['checked'] = ''
                elif element.has_attr('checked'):
                    del element['checked']
            elif kind in ('file', 'submit', 'button', 'reset', 'image'):
                continue
            elif name in values:
                self.set_value(element, values.get(name))

    def select_file(self, element: Tag, descriptor: FileDescriptor, filename: str) -> None:
        self._files[id(element)] = (element, descriptor, filename)

    def selected_file(self, element: Tag) -> Optional[FileDescriptor]:
        selection = self._files.get(id(element))
        return selection[1] if selection else None

    # Mutation

    def create(self, name: str, attrs: Optional[Mapping[str, str]] = None,
               text: Optional[str] = None) -> Tag:
        attrs = dict(attrs or {})
        if isinstance(attrs.get('class'), str):
            attrs['class'] = attrs['class'].split()
        tag = self.soup.new_tag(name, attrs=attrs)
        if text is not None:
            tag.string = text
        return tag

    def append(self, parent: Tag, element: Tag) -> Tag:
        parent.append(element)
        return element

    def insert_after(self, reference: Tag, element: Tag) -> Tag:
        reference.insert_after(element)
        return element

    def remove(self, element: Tag) -> None:
        if element.parent is not None:
            element.extract()

    def is_attached(self, element: Tag) -> bool:
        return any(parent is self.soup for parent in element.parents)

    def classes(self, element: Tag) -> List[str]:
        value = element.get('class') or []
        return value.split() if isinstance(value, str) else list(value)

    def has_class(self, element: Tag, name: str) -> bool:
        return name in self.classes(element)

    def add_class(self, element: Tag, name: str) -> None:
        classes = self.classes(element)
        if name not in classes:
            element['class'] = classes + [name]

    def remove_class(self, element: Tag, name: str) -> None:
        classes = [c for c in self.classes(element) if c != name]
        if classes:
            element['class'] = classes
        elif element.has_attr('class'):
            del element['class']
