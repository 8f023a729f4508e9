"""Bookings app package: client requests and the worker's response workflow."""
