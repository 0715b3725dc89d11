"""Build processors from their untyped pipeline configuration maps."""

from typing import Any

from neural_ingest.resources.index_settings import IndexSettingsProvider
from neural_ingest.services.chunking.chunker import ALGORITHM_FIELD, TextChunkingProcessor
from neural_ingest.services.errors import ConfigValidationError
from neural_ingest.services.inference.base import BaseInferenceClient
from neural_ingest.services.inference.processor import (
    MODEL_ID_FIELD,
    InferenceProcessor,
    SparseEncodingProcessor,
    TextEmbeddingProcessor,
)
from neural_ingest.services.parameters import read_required_map, read_required_string
from neural_ingest.services.traversal.field_map import FIELD_MAP_FIELD

INFERENCE_PROCESSORS: dict[str, type[InferenceProcessor]] = {
    TextEmbeddingProcessor.TYPE: TextEmbeddingProcessor,
    SparseEncodingProcessor.TYPE: SparseEncodingProcessor,
}


def create_text_chunking_processor(
    config: dict[str, Any],
    index_settings: IndexSettingsProvider | None = None,
    tag: str | None = None,
    description: str | None = None,
) -> TextChunkingProcessor:
    """Config: {"field_map": {...}, "algorithm": {name: {...}}}. Raises ConfigValidationError."""
    field_map = read_required_map(config, FIELD_MAP_FIELD)
    algorithm_map = read_required_map(config, ALGORITHM_FIELD)
    return TextChunkingProcessor(tag, description, field_map, algorithm_map, index_settings)


def create_inference_processor(
    processor_type: str,
    config: dict[str, Any],
    client: BaseInferenceClient,
    index_settings: IndexSettingsProvider | None = None,
    tag: str | None = None,
    description: str | None = None,
) -> InferenceProcessor:
    """Config: {"model_id": "...", "field_map": {...}}. Raises ConfigValidationError."""
    cls = INFERENCE_PROCESSORS.get(processor_type)
    if cls is None:
        raise ConfigValidationError(
            f"Unknown inference processor type [{processor_type}]. Supported types are {sorted(INFERENCE_PROCESSORS)}",
            field=processor_type,
        )
    model_id = read_required_string(config, MODEL_ID_FIELD)
    field_map = read_required_map(config, FIELD_MAP_FIELD)
    return cls(tag, description, model_id, field_map, client, index_settings)
