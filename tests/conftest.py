import pytest
from bs4 import BeautifulSoup

from secure_forms import create_app
from secure_forms.events import EventLoop
from secure_forms.security import SecurityManager
from secure_forms.tokens import TokenProvider

SIGNUP_PAGE = """
<html><body>
  <form id="signup" method="post">
    <input type="text" name="name" required>
    <input type="email" name="email">
    <input type="submit" name="go" value="Go">
  </form>
  <form id="feedback" method="post">
    <div class="form-group"><textarea name="notes" required></textarea></div>
    <input type="hidden" name="csrf_token" value="already-here">
  </form>
  <form id="profile">
    <input type="password" name="password" required>
    <input type="file" name="avatar">
  </form>
  <a href="https://example.org/">secure</a>
  <a href="http://example.org/">plain</a>
</body></html>
"""


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'FORCE_HTTPS': False,
        'SESSION_COOKIE_SECURE': False,
        'RATELIMIT_ENABLED': False,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def loop():
    return EventLoop()


@pytest.fixture
def page(loop):
    provider = TokenProvider(rng=lambda: 0.5, clock=lambda: 1.0)
    return SecurityManager.load(SIGNUP_PAGE, loop=loop, token_provider=provider)


@pytest.fixture
def soup_of():
    def parse(response):
        return BeautifulSoup(response.get_data(as_text=True), 'html.parser')
    return parse
