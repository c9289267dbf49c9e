"""
Per-page anti-forgery token.

The token is attached to every form of a page as a hidden `csrf_token`
field. It is built from a fixed prefix, a pseudo-random base-36 segment and a
base-36 timestamp, which makes it unique in practice across page loads on the
same client. It is not a secret: the randomness comes from `random`, not
`secrets`, and nothing verifies it on the server. If a consumer ever starts
checking it server-side, `TokenProvider` must be given a cryptographically
secure source.
"""

import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

TOKEN_PREFIX = 'csrf_'
TOKEN_FIELD_NAME = 'csrf_token'
RANDOM_SEGMENT_LENGTH = 9

_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(number: int) -> str:
    """Render a non-negative integer in base 36 (lower case)."""
    if number < 0:
        raise ValueError('base-36 rendering needs a non-negative integer')
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_DIGITS[remainder])
    return ''.join(reversed(digits))


def fraction_to_base36(fraction: float, length: int) -> str:
    """Return the first `length` base-36 digits after the point of `fraction`."""
    digits = []
    for _ in range(length):
        fraction *= 36
        digit = int(fraction)
        digits.append(_DIGITS[digit])
        fraction -= digit
    return ''.join(digits)


@dataclass(frozen=True)
class Token:
    value: str

    def __str__(self) -> str:
        return self.value


class TokenProvider:
    """Builds page tokens.

    `rng` returns a float in [0, 1) and `clock` returns seconds since the
    epoch; both default to the standard library and can be swapped in tests.
    """

    def __init__(self, rng: Optional[Callable[[], float]] = None,
                 clock: Optional[Callable[[], float]] = None):
        self._rng = rng or random.random
        self._clock = clock or time.time

    def generate(self) -> Token:
        random_part = fraction_to_base36(self._rng(), RANDOM_SEGMENT_LENGTH)
        timestamp_part = to_base36(int(self._clock() * 1000))
        return Token(f'{TOKEN_PREFIX}{random_part}_{timestamp_part}')
