"""Exception types shared across layers."""


class FamilyHubError(Exception):
    """Base class for all application errors."""


class StoreError(FamilyHubError):
    """The tabular store rejected or failed a request."""


class NotFoundError(FamilyHubError):
    """A requested row does not exist or is not owned by the caller."""


class ValidationError(FamilyHubError):
    """Input was rejected before (or by) the store.

    The message is meant to be shown to the user as-is.
    """


class InsufficientBalanceError(ValidationError):
    """A withdrawal exceeds the available balance."""


class AuthError(FamilyHubError):
    """Authentication failed or no session is present."""


class StorageError(FamilyHubError):
    """Object storage upload or lookup failed."""
