"""Page security layer for HTML forms, served through a Flask application."""

from secure_forms.app import create_app

__all__ = ['create_app']
