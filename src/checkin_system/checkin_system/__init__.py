"""Check-in System package.

Organized by feature modules (attendance, reports, location, settings, ...)
with a thin Flask controller layer over service/repository layers.
"""
