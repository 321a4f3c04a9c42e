"""Errors raised by the flat-file stores."""


class StorageError(Exception):
    """Raised when a data file cannot be read or written."""
    pass


class InvalidUsernameError(StorageError):
    """Raised when a username is unusable as a file name."""
    pass


class UserExistsError(StorageError):
    """Raised on signup with a username that is already taken."""
    pass


class InvalidCredentialsError(StorageError):
    """Raised when a username/password pair does not match."""
    pass


class CardNotFoundError(StorageError):
    """Raised when a card id is not in the user's card file."""
    pass


class AudioNotFoundError(StorageError):
    """Raised when no clip is stored for a card."""
    pass
