"""
Text chunking processor: validates a document against its field map, chunks
every configured string (or list of strings) and writes the chunk lists to the
target keys. One ChunkGovernor per document enforces max_chunk_limit across
all chunked fields.
"""

from typing import Any

from neural_ingest.config.chunking.models import DISABLED_MAX_CHUNK_LIMIT, ChunkingConfig
from neural_ingest.config.logging import get_logger
from neural_ingest.resources.index_settings import IndexSettingsProvider, StaticIndexSettings
from neural_ingest.services.chunking.base import MAX_CHUNK_LIMIT_FIELD, MAX_TOKEN_COUNT_FIELD, BaseChunker
from neural_ingest.services.chunking.governor import ChunkGovernor
from neural_ingest.services.chunking.strategies import create_chunker, supported_algorithms
from neural_ingest.services.chunking.strategies.fixed_token_length import FixedTokenLengthChunker
from neural_ingest.services.errors import ConfigValidationError
from neural_ingest.services.parameters import parse_integer_parameter
from neural_ingest.services.traversal.field_map import FieldMapTraverser, validate_field_map
from neural_ingest.services.traversal.value import ValueKind, kind_of

logger = get_logger(__name__)

TYPE = "text_chunking"
ALGORITHM_FIELD = "algorithm"
INDEX_FIELD = "_index"
DEFAULT_ALGORITHM = FixedTokenLengthChunker.ALGORITHM_NAME


def parse_algorithm_map(algorithm_map: dict[str, Any]) -> tuple[BaseChunker, ChunkingConfig]:
    """
    Build the chunker for a {algorithm_name: parameters} map. An empty map
    selects fixed_token_length with default parameters.
    Raises ConfigValidationError.
    """
    if len(algorithm_map) > 1:
        raise ConfigValidationError(
            f"Unable to create {TYPE} processor as [{ALGORITHM_FIELD}] contains multiple algorithms",
            field=ALGORITHM_FIELD,
        )
    if not algorithm_map:
        algorithm, parameters = DEFAULT_ALGORITHM, {}
    else:
        algorithm, parameters = next(iter(algorithm_map.items()))
    if algorithm not in supported_algorithms():
        raise ConfigValidationError(
            f"Unable to create {TYPE} processor as chunker algorithm [{algorithm}] is not supported. "
            f"Supported chunker algorithms are {supported_algorithms()}",
            field=ALGORITHM_FIELD,
        )
    if kind_of(parameters) is not ValueKind.MAP:
        raise ConfigValidationError(
            f"Unable to create {TYPE} processor as parameters for [{algorithm}] algorithm must be an object",
            field=algorithm,
        )
    max_chunk_limit = parse_integer_parameter(parameters, MAX_CHUNK_LIMIT_FIELD, DISABLED_MAX_CHUNK_LIMIT)
    if max_chunk_limit <= 0 and max_chunk_limit != DISABLED_MAX_CHUNK_LIMIT:
        raise ConfigValidationError(
            f"Parameter [{MAX_CHUNK_LIMIT_FIELD}] must be positive or {DISABLED_MAX_CHUNK_LIMIT} to disable this parameter",
            field=MAX_CHUNK_LIMIT_FIELD,
            limit=DISABLED_MAX_CHUNK_LIMIT,
        )
    chunker = create_chunker(algorithm, parameters)
    config = ChunkingConfig(algorithm=algorithm, parameters=chunker.parameters, max_chunk_limit=max_chunk_limit)
    return chunker, config


class TextChunkingProcessor:
    """Chunks configured document fields in place."""

    def __init__(
        self,
        tag: str | None,
        description: str | None,
        field_map: dict[str, Any],
        algorithm_map: dict[str, Any],
        index_settings: IndexSettingsProvider | None = None,
    ) -> None:
        validate_field_map(field_map, TYPE)
        self.tag = tag
        self.description = description
        self.chunker, self.config = parse_algorithm_map(algorithm_map)
        self.traverser = FieldMapTraverser(field_map)
        self.index_settings = index_settings or StaticIndexSettings()
        logger.info(
            "Chunking processor created",
            extra={"tag": tag, "algorithm": self.config.algorithm, "max_chunk_limit": self.config.max_chunk_limit},
        )

    @property
    def type(self) -> str:
        return TYPE

    def _runtime_parameters(self, index_name: str | None) -> dict[str, Any]:
        if self.config.algorithm == FixedTokenLengthChunker.ALGORITHM_NAME:
            return {MAX_TOKEN_COUNT_FIELD: self.index_settings.max_token_count(index_name)}
        return {}

    def execute(self, document: dict[str, Any]) -> dict[str, Any]:
        """
        Chunk every configured field of the document and write the results to
        the target keys. Raises DocumentValidationError (including
        TokenizationError); the document is unchanged when an error is raised.
        """
        index_name = document.get(INDEX_FIELD)
        self.traverser.validate(document, self.index_settings.max_nesting_depth(index_name))
        runtime = self._runtime_parameters(index_name)
        strings_to_chunk = sum(1 for text in self.traverser.extract(document).texts if text)
        governor = ChunkGovernor(self.config.max_chunk_limit, strings_to_chunk)

        def chunk_leaf(path: tuple[str, ...], value: Any) -> list[str]:
            kind = kind_of(value)
            if kind is ValueKind.NULL:
                return []
            if kind is ValueKind.STRING:
                return self.chunker.chunk(value, governor, runtime)
            chunks: list[str] = []
            for content in value:
                chunks.extend(self.chunker.chunk(content, governor, runtime))
            return chunks

        self.traverser.transform(document, chunk_leaf, visit_null=True)
        if governor.enabled and governor.chunk_count >= governor.max_chunk_limit:
            logger.debug(
                "Chunk limit reached, trailing content merged",
                extra={"tag": self.tag, "max_chunk_limit": governor.max_chunk_limit, "chunk_count": governor.chunk_count},
            )
        return document
