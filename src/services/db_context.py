import threading
from contextlib import contextmanager

from flask import has_app_context

# App used when a service is called outside a request (scripts, shells).
# Created lazily so importing services never builds an app.
flask_app = None
_app_lock = threading.Lock()


def _fallback_app():
    global flask_app
    if flask_app is None:
        with _app_lock:
            if flask_app is None:
                from src.app_factory import create_app
                flask_app = create_app()
    return flask_app


@contextmanager
def db_context():
    """Provide an app context around a series of DB operations."""
    if has_app_context():
        yield
        return

    with _fallback_app().app_context():
        yield
