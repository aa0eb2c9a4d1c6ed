"""
Authentication forms using Flask-WTF.
Accepts form-encoded or JSON bodies, with CSRF protection.
"""

from flask_wtf import FlaskForm
from wtforms import BooleanField, EmailField, PasswordField
from wtforms.validators import DataRequired, Email, Length


class LoginForm(FlaskForm):
    """Sign-in form with email and password."""

    email = EmailField('Email', validators=[
        DataRequired(message='Email is required'),
        Email(message='Invalid email format'),
        Length(max=254),
    ])

    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])

    remember_me = BooleanField('Remember me')

    def first_error(self) -> str:
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return 'Invalid request data'
