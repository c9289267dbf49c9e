"""
Form gatekeeper.

Attaching a form injects the page token, validates fields when they lose
focus, clears a field's error as soon as the user types in it, and
intercepts submission. Every submit attempt re-validates every field, since
a value may have changed without a blur, and cancels the submission when any
of them fails.

Each form goes through IDLE -> VALIDATING -> ACCEPTED | REJECTED and is back
to IDLE once the attempt is decided.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from secure_forms.tokens import TOKEN_FIELD_NAME
from secure_forms.validators import validate_field

logger = logging.getLogger(__name__)

FORM_ERRORS_MESSAGE = 'Please fix form errors before submitting.'


class GateState(str, Enum):
    IDLE = 'idle'
    VALIDATING = 'validating'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'


class FormGatekeeper:
    def __init__(self, document, events, token, errors, notifications):
        self.document = document
        self.events = events
        self.token = token
        self.errors = errors
        self.notifications = notifications
        self._states: Dict[int, GateState] = {}
        self._outcomes: Dict[int, GateState] = {}

    def attach_all(self) -> None:
        for form in self.document.forms():
            self.attach(form)

    def attach(self, form) -> None:
        self.inject_token(form)
        if self.events.is_wired(form, 'submit'):
            return
        self._states[id(form)] = GateState.IDLE
        self.events.on(form, 'submit', self.on_submit)
        for field in self.document.fields(form):
            self.events.on(field, 'blur', lambda event: self.validate_field(event.target))
            self.events.on(field, 'input', lambda event: self.errors.clear(event.target))

    def inject_token(self, form) -> None:
        if self.document.named(form, TOKEN_FIELD_NAME) is not None:
            return
        hidden = self.document.create('input', {
            'type': 'hidden',
            'name': TOKEN_FIELD_NAME,
            'value': self.token.value,
        })
        self.document.append(form, hidden)

    def state(self, form) -> GateState:
        return self._states.get(id(form), GateState.IDLE)

    def last_outcome(self, form) -> Optional[GateState]:
        return self._outcomes.get(id(form))

    def _transition(self, form, state: GateState) -> None:
        logger.debug('Form %r: %s -> %s', form.get('id'), self.state(form).value, state.value)
        self._states[id(form)] = state

    def validate_field(self, element) -> bool:
        result = validate_field(self.document.snapshot(element))
        if not result:
            self.errors.show(element, result.message)
            return False
        self.errors.clear(element)
        return True

    def validate_form(self, form) -> bool:
        # Every field is checked so that all failing fields get annotated
        outcomes = [self.validate_field(field) for field in self.document.fields(form)]
        return all(outcomes)

    def on_submit(self, event) -> None:
        form = event.target
        self._transition(form, GateState.VALIDATING)
        if self.validate_form(form):
            self._transition(form, GateState.ACCEPTED)
        else:
            self._transition(form, GateState.REJECTED)
            event.prevent_default()
            logger.info('Blocked submission of form %r', form.get('id'))
            self.notifications.notify(FORM_ERRORS_MESSAGE, 'error')
        self._outcomes[id(form)] = self.state(form)
        self._transition(form, GateState.IDLE)
