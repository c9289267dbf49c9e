"""
Form definitions for the Flask application.

The forms are plain `FlaskForm` classes used for rendering: `DataRequired`
renders the `required` attribute, `EmailField` renders `type="email"` and
`FileField` renders `type="file"`, which is all the page security layer needs
to decide how each control is checked. Flask-WTF's own CSRF field is turned
off because every secured page receives its `csrf_token` field from the
page's token provider instead.
"""

from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import EmailField, PasswordField, StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional


class SecuredForm(FlaskForm):
    class Meta:
        csrf = False


class ContactForm(SecuredForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=80)])
    email = EmailField('E-mail', validators=[DataRequired(), Length(max=120)])
    message = TextAreaField('Message', validators=[DataRequired()])
    submit = SubmitField('Send')


class AccountForm(SecuredForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=25)])
    email = EmailField('Recovery e-mail', validators=[Optional(), Length(max=120)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=8)])
    submit = SubmitField('Save')


class UploadForm(SecuredForm):
    title = StringField('Title', validators=[DataRequired()])
    document = FileField('Document')
    submit = SubmitField('Upload')
