"""
Cosmetic page enhancements: a lock marker after links to https:// targets and
a show/hide toggle next to password fields.
"""

SECURE_INDICATOR_CLASS = 'secure-indicator'
SECURE_INDICATOR_TEXT = ' \U0001F512'
PASSWORD_WRAPPER_CLASS = 'password-wrapper'
PASSWORD_TOGGLE_CLASS = 'password-toggle'
SHOW_ICON = '\U0001F441\uFE0F'
HIDE_ICON = '\U0001F512'


def add_security_indicators(document) -> int:
    added = 0
    for link in document.secure_links():
        if link.find(class_=SECURE_INDICATOR_CLASS) is not None:
            continue
        indicator = document.create('span', {
            'class': SECURE_INDICATOR_CLASS,
            'title': 'Secure connection',
        }, text=SECURE_INDICATOR_TEXT)
        document.append(link, indicator)
        added += 1
    return added


class PasswordToggle:
    def __init__(self, document, events):
        self.document = document
        self.events = events

    def setup(self) -> None:
        for field in self.document.password_inputs():
            if field.parent is not None and self.document.has_class(field.parent, PASSWORD_WRAPPER_CLASS):
                continue
            self.wrap(field)

    def wrap(self, field):
        wrapper = self.document.create('div', {
            'class': PASSWORD_WRAPPER_CLASS,
            'style': 'position: relative; display: inline-block; width: 100%;',
        })
        toggle = self.document.create('button', {
            'type': 'button',
            'class': PASSWORD_TOGGLE_CLASS,
            'aria-label': 'Show password',
            'style': ('background: none; border: none; cursor: pointer; position: absolute; '
                      'right: 10px; top: 50%; transform: translateY(-50%);'),
        }, text=SHOW_ICON)
        field.wrap(wrapper)
        self.document.append(wrapper, toggle)
        self.events.on(toggle, 'click', lambda event: self.flip(field, toggle))
        return toggle

    def flip(self, field, toggle) -> None:
        if field.get('type', '').lower() == 'password':
            field['type'] = 'text'
            toggle.string = HIDE_ICON
            toggle['aria-label'] = 'Hide password'
        else:
            field['type'] = 'password'
            toggle.string = SHOW_ICON
            toggle['aria-label'] = 'Show password'
