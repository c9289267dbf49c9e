"""
Main entry point for the Flask application.

Every HTML page the application serves is a secured page: the rendered
template is loaded into a `SecurityManager`, which adds the page token to
each form, wires field and submit validation, checks file inputs and adds the
cosmetic indicators, exactly as it would on page load in the browser.

Form posts are replayed against a freshly loaded page. The submitted values
are written into the form, selected files go through the upload check, and
the form's `submit` event is dispatched. A cancelled submission answers 400
with the annotated page so the user sees the same errors they would have seen
before sending; an accepted one is processed and redirected.

Sensitive configuration values are loaded from environment variables via
python-dotenv.

The application uses:
  * Flask-WTF / WTForms to define and render the forms.
  * Flask-Talisman to set HTTP security headers (Content Security Policy,
    HSTS, etc.).
  * Flask-Limiter to throttle form posts.
  * BeautifulSoup (through `secure_forms.dom`) as the page document.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask, flash, get_flashed_messages, redirect, render_template, request, url_for
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman
from werkzeug.utils import secure_filename

from secure_forms.forms import AccountForm, ContactForm, UploadForm
from secure_forms.security import SecurityManager
from secure_forms.tokens import TOKEN_FIELD_NAME
from secure_forms.uploads import FileDescriptor, TOO_LARGE_MESSAGE

# Flash categories understood by the notification center
NOTIFICATION_KINDS = {
    'success': 'success',
    'info': 'info',
    'message': 'info',
    'error': 'error',
    'danger': 'error',
    'warning': 'error',
}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ['true', '1', 'yes']


def create_app(test_config=None):
    """Factory to create and configure the Flask application."""
    # Load environment variables from a `.env` file if present.
    load_dotenv()

    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', os.urandom(32))
    app.config['MAX_CONTENT_LENGTH'] = int(os.getenv('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))
    app.config['RATELIMIT_DEFAULT'] = os.getenv('RATELIMIT_DEFAULT', '60 per minute')
    app.config['FORCE_HTTPS'] = _env_flag('FORCE_HTTPS', 'true')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Session cookie security
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'true')
    app.config['SESSION_COOKIE_HTTPONLY'] = True  # disallow access via JavaScript
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'  # reduce CSRF risk

    if test_config:
        app.config.update(test_config)

    logging.getLogger('secure_forms').setLevel(app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Security headers via Talisman
    Talisman(
        app,
        force_https=app.config['FORCE_HTTPS'],
        session_cookie_secure=app.config['SESSION_COOKIE_SECURE'],
        content_security_policy={
            'default-src': ["'self'"],
            'style-src': ["'self'", "'unsafe-inline'"],
            'script-src': ["'self'"],
        },
    )

    # Rate limiting (e.g. limit form posts per IP)
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[app.config['RATELIMIT_DEFAULT']],
    )

    limiter.init_app(app)
    # The extension only holds a weak reference; the app keeps the limiter alive
    app.limiter = limiter

    # Routes

    @app.route('/')
    def index():
        return secured_page('index.html').html()

    @app.route('/contact', methods=['GET', 'POST'])
    @limiter.limit('10 per minute', methods=['POST'])
    def contact():
        form = ContactForm()
        page = secured_page('contact.html', form=form)
        if request.method == 'POST':
            if not replay_submission(page, 'contact-form'):
                return page.html(), 400
            app.logger.info('Contact message accepted from %s', form.email.data.strip().lower())
            flash('Thanks, your message was sent.', 'success')
            return redirect(url_for('contact'))
        return page.html()

    @app.route('/account', methods=['GET', 'POST'])
    @limiter.limit('10 per minute', methods=['POST'])
    def account():
        form = AccountForm()
        page = secured_page('account.html', form=form)
        if request.method == 'POST':
            if not replay_submission(page, 'account-form'):
                return page.html(), 400
            flash(f'Account details saved for {form.username.data.strip()}.', 'success')
            return redirect(url_for('account'))
        return page.html()

    @app.route('/upload', methods=['GET', 'POST'])
    @limiter.limit('10 per minute', methods=['POST'])
    def upload():
        form = UploadForm()
        page = secured_page('upload.html', form=form)
        if request.method == 'POST':
            if not replay_submission(page, 'upload-form'):
                return page.html(), 400
            storage = request.files.get('document')
            if storage and storage.filename:
                flash(f'Received "{form.title.data.strip()}" ({secure_filename(storage.filename)}).', 'success')
            else:
                flash(f'Received "{form.title.data.strip()}" without a document.', 'info')
            return redirect(url_for('upload'))
        return page.html()

    @app.errorhandler(413)
    def request_too_large(error):
        page = secured_page('upload.html', form=UploadForm(formdata=None))
        page.notify(TOO_LARGE_MESSAGE, 'error')
        return page.html(), 413

    return app


def secured_page(template: str, **context) -> SecurityManager:
    """Render a template and run the page security layer over it.

    Pending flash messages are shown through the page's notification center,
    so at most one of them stays visible.
    """
    page = SecurityManager.load(render_template(template, **context))
    for category, message in get_flashed_messages(with_categories=True):
        page.notify(message, NOTIFICATION_KINDS.get(category, 'info'))
    return page


def describe_upload(storage) -> FileDescriptor:
    """Read the declared type and byte size of an uploaded file."""
    stream = storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return FileDescriptor(storage.mimetype or '', size)


def replay_submission(page: SecurityManager, form_id: str) -> bool:
    """Replay the current POST against a loaded page.

    Returns True when the submission was allowed through. A rejected file
    stops the replay at selection time, before `submit` fires.
    """
    document = page.document
    form = document.form_by_id(form_id)
    document.fill(form, request.form, skip=[TOKEN_FIELD_NAME])
    try:
        for name, storage in request.files.items():
            field = document.named(form, name)
            if field is None or not storage.filename:
                continue
            if not page.choose_file(field, describe_upload(storage), storage.filename):
                return False
        return page.submit(form)
    finally:
        # Never echo a password back into the page
        for field in document.password_inputs():
            document.set_value(field, '')


if __name__ == '__main__':

    app = create_app()
    # Bind to all interfaces and use port 5000 by default
    app.run(host='0.0.0.0', port=5000, debug=False)
