"""Base chunker contract."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel

from neural_ingest.services.chunking.governor import ChunkGovernor

# Runtime parameter injected by the processor from the index settings
MAX_TOKEN_COUNT_FIELD = "max_token_count"
MAX_CHUNK_LIMIT_FIELD = "max_chunk_limit"


class BaseChunker(ABC):
    """
    A chunking algorithm. Parameters are validated once at construction and
    the parsed model is read-only afterwards, so one instance may serve many
    documents concurrently.
    """

    ALGORITHM_NAME: ClassVar[str]

    def __init__(self, parameters: dict[str, Any]) -> None:
        self.parameters = self.parse_parameters(parameters)

    @classmethod
    @abstractmethod
    def parse_parameters(cls, parameters: dict[str, Any]) -> BaseModel:
        """Validate the raw parameter map. Raises ConfigValidationError."""
        ...

    @abstractmethod
    def chunk(
        self,
        content: str,
        governor: ChunkGovernor | None = None,
        runtime: dict[str, Any] | None = None,
    ) -> list[str]:
        """
        Split content into ordered chunks. Without a governor the chunker's own
        max_chunk_limit applies to this single string.
        """
        ...

    def _governor(self, governor: ChunkGovernor | None) -> ChunkGovernor:
        if governor is not None:
            return governor
        return ChunkGovernor(self.parameters.max_chunk_limit)
