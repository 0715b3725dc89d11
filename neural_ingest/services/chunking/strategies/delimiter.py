"""Delimiter chunking. Splits after each delimiter occurrence, keeping the delimiter."""

from typing import Any

from neural_ingest.config.chunking.models import (
    DEFAULT_DELIMITER,
    DISABLED_MAX_CHUNK_LIMIT,
    DelimiterParameters,
)
from neural_ingest.services.chunking.base import MAX_CHUNK_LIMIT_FIELD, BaseChunker
from neural_ingest.services.chunking.governor import ChunkGovernor
from neural_ingest.services.parameters import parse_integer_parameter, parse_string_parameter

DELIMITER_FIELD = "delimiter"


class DelimiterChunker(BaseChunker):
    ALGORITHM_NAME = "delimiter"

    parameters: DelimiterParameters

    @classmethod
    def parse_parameters(cls, parameters: dict[str, Any]) -> DelimiterParameters:
        return DelimiterParameters(
            delimiter=parse_string_parameter(parameters, DELIMITER_FIELD, DEFAULT_DELIMITER),
            max_chunk_limit=parse_integer_parameter(parameters, MAX_CHUNK_LIMIT_FIELD, DISABLED_MAX_CHUNK_LIMIT),
        )

    def chunk(
        self,
        content: str,
        governor: ChunkGovernor | None = None,
        runtime: dict[str, Any] | None = None,
    ) -> list[str]:
        """
        Each piece runs from the cursor through the end of the next delimiter.
        When the governor reaches its ceiling, the rest of the content is
        emitted verbatim as the last chunk.
        """
        if not content:
            return []
        governor = self._governor(governor)
        delimiter = self.parameters.delimiter
        chunks: list[str] = []
        start = 0
        position = content.find(delimiter)
        while position != -1:
            if governor.would_exceed(len(chunks)):
                break
            end = position + len(delimiter)
            chunks.append(content[start:end])
            start = end
            position = content.find(delimiter, start)
        if start < len(content):
            chunks.append(content[start:])
        governor.record(len(chunks))
        return chunks
