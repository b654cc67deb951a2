from functools import wraps

from flask import abort
from flask_login import current_user, login_required

from extensions import login_manager
from src.services import session_service


@login_manager.user_loader
def load_admin(token: str):
    """The Flask-Login id is the Redis session token."""
    return session_service.resolve_session(token)


def role_required(*roles):
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if current_user.role not in roles:
                abort(403)
            return view(*args, **kwargs)

        return wrapped

    return decorator
