"""Development settings for HandyConnect project.

Extends the base settings with debug mode, permissive hosts/CORS and a
console e-mail backend. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']
CORS_ALLOW_ALL_ORIGINS = True

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Local bootstrap token so the first developer can claim the admin role
ADMIN_BOOTSTRAP_TOKEN = os.environ.get('ADMIN_BOOTSTRAP_TOKEN', 'dev-bootstrap-token')
