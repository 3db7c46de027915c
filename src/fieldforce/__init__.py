"""FieldForce package.

This package is organized by feature modules (attendance, tracking, expenses, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""

__version__ = "1.0.0"
