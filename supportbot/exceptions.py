"""Domain exceptions raised by the record store and application startup."""


class SupportBotError(Exception):
    """Base class for errors raised by this package."""


class DuplicateRecordError(SupportBotError, ValueError):
    """A unique key (user external id, conversation owner) is already taken."""


class RecordNotFoundError(SupportBotError, LookupError):
    """A record referenced by another record does not exist."""


class MissingCredentialError(SupportBotError, RuntimeError):
    """A credential required to start the service is not configured."""
