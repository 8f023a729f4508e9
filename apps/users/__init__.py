"""Users app package.

Defines the e-mail based custom user model with an account type (client or
worker) and a platform role (user or admin), the authentication endpoints
and the permission classes shared across the project. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout.
"""
