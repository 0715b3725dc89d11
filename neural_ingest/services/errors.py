"""Error types raised by processors, chunkers and the field map traverser."""


class ProcessorError(ValueError):
    """
    Base error. `field` names the offending document key or parameter,
    `limit` the numeric limit that was violated, when there is one.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        limit: int | float | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.field = field
        self.limit = limit
        self.cause = cause


class ConfigValidationError(ProcessorError):
    """Raised while building a processor from its configuration. Never retried."""


class DocumentValidationError(ProcessorError):
    """Raised for a single document; reported against that document only."""


class TokenizationError(DocumentValidationError):
    """Raised when the tokenizer cannot process a field value."""
