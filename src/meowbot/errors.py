"""Error types raised across the agent pipeline."""


class MeowbotError(Exception):
    """Base class for all meowbot errors."""


class SourceFetchError(MeowbotError):
    """Reading recent messages from the chat source failed."""


class GenerationError(MeowbotError):
    """The generation call failed at the transport level."""


class ReplyDecodeError(GenerationError):
    """The generation call returned text that could not be decoded."""


class DeliveryError(MeowbotError):
    """Dispatching a reply segment to the chat sink failed."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class PersistenceError(MeowbotError):
    """Reading or writing persisted state failed."""
