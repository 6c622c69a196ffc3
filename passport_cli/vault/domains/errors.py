"""Exception types raised by the passport vault."""


class PassportError(Exception):
    """Base class for all vault errors."""
    pass


class ValidationError(PassportError):
    """Input rejected before any mutation took place."""
    pass


class NameEmptyError(ValidationError):
    pass


class ValueEmptyError(ValidationError):
    pass


class CommandEmptyError(ValidationError):
    pass


class PathEmptyError(ValidationError):
    pass


class AlreadyExistsError(ValidationError):
    pass


class NameExistsError(AlreadyExistsError):
    pass


class PathExistsError(AlreadyExistsError):
    pass


class NotFoundError(PassportError):
    pass


class ConfigError(PassportError):
    """Store file could not be read or has the wrong shape."""
    pass


class CryptoError(PassportError):
    """Encryption key could not be derived or encryption failed."""
    pass


class DecryptError(CryptoError):
    """
    A value could not be decrypted.

    Malformed input, truncated input and failed authentication all raise
    this same error, the cause is not reported.
    """

    def __init__(self, message: str = "decrypt: failed to decrypt data"):
        super().__init__(message)


class TokenizeError(PassportError):
    pass


class UnterminatedQuoteError(TokenizeError):
    pass


class EmptyCommandError(TokenizeError):
    pass


class RunError(PassportError):
    """Failure running a script's process."""

    def __init__(self, message: str, exit_code: int = -1):
        super().__init__(message)
        self.exit_code = exit_code


class SpawnError(RunError):
    """The child process could not be started."""
    pass


class ProcessError(RunError):
    """The child process terminated abnormally."""
    pass
