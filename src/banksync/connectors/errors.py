"""Exception types raised while talking to the bank API."""


class BankSyncError(Exception):
    """Base class for errors raised by the sync pipeline."""


class InvalidResponseError(BankSyncError):
    """The API answered, but the payload was missing expected fields."""


class AuthRejectedError(BankSyncError):
    """The login endpoint refused the submitted credential hash."""


class TokenInvalidError(BankSyncError):
    """A freshly issued session token failed validation."""


class TransactionFetchError(BankSyncError):
    """Fetching or normalizing transactions for one account failed."""

    def __init__(self, username: str, message: str):
        super().__init__(f"Transaction fetch failed for {username}: {message}")
        self.username = username
