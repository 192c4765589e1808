"""Errors raised by the billing and reconciliation logic.

Crud functions raise these; ``main.py`` maps them onto HTTP responses so the
same functions can be called from routers, scheduled tasks and tests.
"""


class BillingError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    """Missing or malformed input, or a state transition that is not allowed."""
    status_code = 400


class NotFoundError(BillingError):
    """A referenced entity is absent for the tenant, or a selection came back empty."""
    status_code = 404


class AuthorizationError(BillingError):
    status_code = 403
