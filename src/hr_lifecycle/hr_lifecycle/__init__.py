"""HR lifecycle engine package.

Organized by feature modules (attendance, leaves, shifts, notifications, ...)
with a thin Flask controller layer over service/repository layers.
"""
