"""
Per-page security context.

`SecurityManager` is what runs when a page has loaded. It owns the one token
of the page and composes the components that share it: error annotations,
notifications, the form gatekeeper, the upload guard and the cosmetic
enhancements. Nothing here is global; every loaded page gets its own manager.
"""

import logging
from typing import Optional

from secure_forms.dom import Document
from secure_forms.enhancements import PasswordToggle, add_security_indicators
from secure_forms.events import EventLoop, EventSource
from secure_forms.field_state import FieldErrorState
from secure_forms.gatekeeper import FormGatekeeper
from secure_forms.notifications import NotificationCenter
from secure_forms.tokens import Token, TokenProvider
from secure_forms.uploads import FileDescriptor, UploadGuard

logger = logging.getLogger(__name__)


class SecurityManager:
    def __init__(self, document: Document, loop: Optional[EventLoop] = None,
                 events: Optional[EventSource] = None,
                 token_provider: Optional[TokenProvider] = None):
        self.document = document
        self.loop = loop or EventLoop()
        self.events = events or EventSource()
        self.token: Token = (token_provider or TokenProvider()).generate()
        self.errors = FieldErrorState(document)
        self.notifications = NotificationCenter(document, self.loop)
        self.gatekeeper = FormGatekeeper(document, self.events, self.token,
                                         self.errors, self.notifications)
        self.uploads = UploadGuard(document, self.events, self.errors, self.notifications)
        self.password_toggle = PasswordToggle(document, self.events)

    @classmethod
    def load(cls, html: str, **kwargs) -> 'SecurityManager':
        """Parse a page and run the page-load initialisation on it."""
        manager = cls(Document.from_html(html), **kwargs)
        manager.init()
        return manager

    def init(self) -> None:
        self.gatekeeper.attach_all()
        self.uploads.setup()
        add_security_indicators(self.document)
        self.password_toggle.setup()
        logger.info('Security features loaded (%d form(s))', len(self.document.forms()))

    # User interaction, as the browser would deliver it

    def type_into(self, field, value: str) -> None:
        self.document.set_value(field, value)
        self.events.dispatch(field, 'input')

    def blur(self, field) -> None:
        self.events.dispatch(field, 'blur')

    def choose_file(self, field, descriptor: FileDescriptor, filename: str) -> bool:
        """Select a file and fire `change`; returns whether the file was kept."""
        self.document.select_file(field, descriptor, filename)
        self.events.dispatch(field, 'change')
        return self.document.selected_file(field) is not None

    def click(self, element) -> None:
        self.events.dispatch(element, 'click')

    def submit(self, form) -> bool:
        """Fire `submit`; returns True when the default submission may proceed."""
        event = self.events.dispatch(form, 'submit')
        return not event.default_prevented

    def notify(self, text: str, kind='info'):
        return self.notifications.notify(text, kind)

    def html(self) -> str:
        return self.document.html()
