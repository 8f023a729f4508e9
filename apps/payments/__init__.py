"""Payments app package: one-time subscription through Stripe Checkout."""
