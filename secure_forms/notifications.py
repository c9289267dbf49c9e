"""
Transient page notifications.

Only one notification is visible at a time: a new one removes whatever is
on screen before it is shown. Each notification schedules its own removal on
the event loop. When a newer notification has already replaced it, that
deferred removal finds the element detached and does nothing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

DISMISS_AFTER_SECONDS = 5.0
MESSAGE_CLASS = 'security-message'
MESSAGE_STYLE = ('position: fixed; top: 20px; right: 20px; z-index: 10000; '
                 'max-width: 300px; box-shadow: 0 4px 12px rgba(0,0,0,0.3);')


class NotificationKind(str, Enum):
    INFO = 'info'
    SUCCESS = 'success'
    ERROR = 'error'


@dataclass
class Notification:
    text: str
    kind: NotificationKind
    created_at: float
    element: Any = None


class NotificationCenter:
    def __init__(self, document, loop, dismiss_after: float = DISMISS_AFTER_SECONDS):
        self.document = document
        self.loop = loop
        self.dismiss_after = dismiss_after
        self._current: Optional[Notification] = None

    def notify(self, text: str, kind='info') -> Notification:
        kind = NotificationKind(kind)
        for existing in self.document.select(f'.{MESSAGE_CLASS}'):
            self.document.remove(existing)

        element = self.document.create('div', {
            'class': f'{MESSAGE_CLASS} security-{kind.value}',
            'role': 'status',
            'style': MESSAGE_STYLE,
            'data-dismiss-after': str(int(self.dismiss_after * 1000)),
        }, text=text)
        self.document.append(self.document.body, element)

        notification = Notification(text, kind, self.loop.time(), element)
        self._current = notification
        self.loop.call_later(self.dismiss_after, self._dismiss, notification)
        logger.debug('Notification (%s): %s', kind.value, text)
        return notification

    def _dismiss(self, notification: Notification) -> None:
        if self.document.is_attached(notification.element):
            self.document.remove(notification.element)
        if self._current is notification:
            self._current = None

    def current(self) -> Optional[Notification]:
        if self._current is not None and not self.document.is_attached(self._current.element):
            self._current = None
        return self._current

    def visible(self):
        return self.document.select(f'.{MESSAGE_CLASS}')
