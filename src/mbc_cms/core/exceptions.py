"""Exceptions raised by the RBAC core and its collaborators.

Absence (unknown role, unknown permission) is never an error; only
infrastructure failures are.
"""


class MbcError(Exception):
    """Base exception for the MBC CMS API."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreError(MbcError):
    """Raised when the relational store fails.

    Covers connectivity loss, constraint violations and query failures.
    """


class AuthorizationError(MbcError):
    """Raised when an authorization query cannot be answered.

    Wraps the StoreError encountered while answering the query. It must
    never be treated as a deny.
    """

    def __init__(self, message: str, store_error: StoreError) -> None:
        super().__init__(message)
        self.store_error = store_error


class BootstrapError(MbcError):
    """Raised when the admin identity or default role cannot be ensured."""
