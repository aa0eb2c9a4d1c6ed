"""
Authentication routes: login, logout, current user.
Sign-in is JSON-first; the booking screens read the identity from /auth/me.
"""

from flask import Blueprint, session
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from extensions import booking_runtime
from models.user import User, get_user_by_email, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.decorators import ANONYMOUS_KEY
from utils.messages import MESSAGES

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Sign in with email and password.

    Body (form or JSON): email, password, remember_me
    """
    if current_user.is_authenticated:
        return api_success(data=current_user.to_dict())

    form = LoginForm()

    if not form.validate_on_submit():
        return api_error(form.first_error(), status=400)

    user_dict = get_user_by_email(form.email.data.strip().lower())

    if user_dict is None or not check_password(user_dict, form.password.data):
        return api_error(MESSAGES['invalid_credentials'], status=401)

    if not user_dict.get('active'):
        return api_error('This account has been deactivated', status=403)

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.uid)

    # Keep the draft started before signing in
    anonymous_key = session.pop(ANONYMOUS_KEY, None)
    if anonymous_key:
        state = booking_runtime.state
        with state.lock:
            state.sessions.rekey(anonymous_key, user.uid)

    return api_success(
        data=user.to_dict(),
        message=MESSAGES['login_success'].format(name=user.full_name or user.email),
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Sign out and drop the in-progress booking."""
    booking_runtime.state.sessions.evict(current_user.uid)
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me')
@login_required
def me():
    """Identity of the signed-in user."""
    return api_success(data=current_user.to_dict())


@auth_bp.route('/csrf-token')
def csrf_token():
    """CSRF token for clients posting JSON."""
    return api_success(data={'csrf_token': generate_csrf()})
