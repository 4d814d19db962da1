"""Exceptions raised by Kassza services.

Input validation failures are pydantic ValidationErrors raised while building
the forms in models.forms; they never reach these classes.
"""


class KasszaError(Exception):
    """Base class for application errors."""


class NotFoundError(KasszaError):
    """A referenced record is not part of the loaded ledger."""


class PersistenceError(KasszaError):
    """A call into the document store failed.

    The in-memory ledger is left as it was before the call.
    """


class AuthenticationError(KasszaError):
    """Sign-in, registration or session lookup failed."""
