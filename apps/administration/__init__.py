"""Administration app package.

Holds the platform-wide application settings (app name, maintenance mode,
subscription fee, admin sign-in page texts, Stripe configuration), the
shared admin credentials with phone-based recovery, and the maintenance
mode gate applied to the API.
"""
