"""Django project configuration for HandyConnect.

Holds the settings package, URL routing, the Celery application and the
WSGI/ASGI entry points.
"""

# Import the Celery application as soon as Django starts so that shared
# tasks are registered against it.
from .celery import app as celery_app  # noqa: F401
