"""Chunking algorithm implementations."""

from typing import Any

from neural_ingest.services.chunking.base import BaseChunker
from neural_ingest.services.chunking.strategies.delimiter import DelimiterChunker
from neural_ingest.services.chunking.strategies.fixed_token_length import FixedTokenLengthChunker
from neural_ingest.services.errors import ConfigValidationError

CHUNKER_REGISTRY: dict[str, type[BaseChunker]] = {
    DelimiterChunker.ALGORITHM_NAME: DelimiterChunker,
    FixedTokenLengthChunker.ALGORITHM_NAME: FixedTokenLengthChunker,
}


def supported_algorithms() -> list[str]:
    return sorted(CHUNKER_REGISTRY)


def get_chunker_cls(algorithm: str) -> type[BaseChunker] | None:
    """Return the chunker class for the given algorithm name, or None."""
    return CHUNKER_REGISTRY.get(algorithm)


def create_chunker(algorithm: str, parameters: dict[str, Any]) -> BaseChunker:
    """Instantiate and validate a chunker. Raises ConfigValidationError."""
    cls = get_chunker_cls(algorithm)
    if cls is None:
        raise ConfigValidationError(
            f"Chunker algorithm [{algorithm}] is not supported. Supported chunker algorithms are {supported_algorithms()}",
            field=algorithm,
        )
    return cls(parameters)
