"""
Inference processors: extract the configured texts of a document (or of a
batch of documents), run them through the inference client and scatter the
results back to the target keys.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from neural_ingest.config.logging import get_logger
from neural_ingest.resources.index_settings import IndexSettingsProvider, StaticIndexSettings
from neural_ingest.services.errors import ConfigValidationError
from neural_ingest.services.inference.base import BaseInferenceClient
from neural_ingest.services.inference.reorder import restore_order, sort_by_length
from neural_ingest.services.traversal.field_map import FieldMapTraverser, validate_field_map

logger = get_logger(__name__)

MODEL_ID_FIELD = "model_id"
INDEX_FIELD = "_index"


@dataclass
class DocumentWrapper:
    """One document of a batch and the error recorded against it, if any."""

    slot: int
    document: dict[str, Any] | None
    exception: Exception | None = None

    def update(self, document: dict[str, Any] | None, exception: Exception | None) -> None:
        self.document = document
        self.exception = exception


DocumentHandler = Callable[[dict[str, Any] | None, Exception | None], None]
BatchHandler = Callable[[list[DocumentWrapper]], None]


class InferenceProcessor:
    """
    Base processor for model inference over configured fields. A string leaf
    receives one result; a list leaf receives a list of
    {list_type_nested_map_key: result} objects.
    """

    def __init__(
        self,
        tag: str | None,
        description: str | None,
        processor_type: str,
        list_type_nested_map_key: str,
        model_id: str,
        field_map: dict[str, Any],
        client: BaseInferenceClient,
        index_settings: IndexSettingsProvider | None = None,
    ) -> None:
        if not isinstance(model_id, str) or not model_id.strip():
            raise ConfigValidationError(f"{MODEL_ID_FIELD} is null or empty, cannot process it", field=MODEL_ID_FIELD)
        validate_field_map(field_map, processor_type)
        self.tag = tag
        self.description = description
        self.type = processor_type
        self.list_type_nested_map_key = list_type_nested_map_key
        self.model_id = model_id
        self.client = client
        self.traverser = FieldMapTraverser(field_map)
        self.index_settings = index_settings or StaticIndexSettings()

    def _inference_texts(self, document: dict[str, Any]) -> list[str]:
        """
        Validate the document and return its texts in traversal order. Raises
        DocumentValidationError, or whatever the index settings lookup raises.
        """
        max_depth = self.index_settings.max_nesting_depth(document.get(INDEX_FIELD))
        self.traverser.validate(document, max_depth)
        return self.traverser.extract(document).texts

    def execute(self, document: dict[str, Any], handler: DocumentHandler) -> None:
        """
        Run inference for a single document. handler receives (document, None)
        on success or (None, error) on failure.
        """
        try:
            texts = self._inference_texts(document)
        except Exception as e:
            logger.debug(
                "Document rejected before inference",
                extra={"processor": self.type, "error_type": type(e).__name__, "error": str(e)},
            )
            handler(None, e)
            return
        if not texts:
            handler(document, None)
            return

        def on_success(results: list[Any]) -> None:
            try:
                self.traverser.scatter(document, results, self.list_type_nested_map_key)
            except ValueError as e:
                handler(None, e)
                return
            handler(document, None)

        self.client.infer_async(self.model_id, texts, on_success, lambda e: handler(None, e))

    def batch_execute(self, wrappers: list[DocumentWrapper], handler: BatchHandler) -> None:
        """
        Run one inference call for all documents of a batch. Documents that
        fail preparation (validation or index settings lookup) are marked and
        left out; the others are scattered once the results come back. If
        inference fails, every document not already marked gets the inference
        error.
        """
        if not wrappers:
            handler([])
            return

        prepared: list[tuple[DocumentWrapper, list[str]]] = []
        for wrapper in wrappers:
            if wrapper.exception is not None or wrapper.document is None:
                continue
            try:
                texts = self._inference_texts(wrapper.document)
            except Exception as e:
                logger.debug(
                    "Document excluded from batch inference",
                    extra={"slot": wrapper.slot, "error_type": type(e).__name__, "error": str(e)},
                )
                wrapper.update(wrapper.document, e)
                continue
            if texts:
                prepared.append((wrapper, texts))

        inference_texts = [text for _, texts in prepared for text in texts]
        if not inference_texts:
            handler(wrappers)
            return
        sorted_texts, mapping = sort_by_length(inference_texts)

        def on_failure(exception: Exception) -> None:
            logger.warning(
                "Batch inference failed",
                extra={"processor": self.type, "model_id": self.model_id, "error": str(exception)},
            )
            for wrapper in wrappers:
                if wrapper.exception is None:
                    wrapper.update(wrapper.document, exception)
            handler(wrappers)

        def on_success(results: list[Any]) -> None:
            try:
                results = restore_order(results, mapping)
            except ValueError as e:
                on_failure(e)
                return
            start = 0
            for wrapper, texts in prepared:
                document_results = results[start : start + len(texts)]
                start += len(texts)
                try:
                    self.traverser.scatter(wrapper.document, document_results, self.list_type_nested_map_key)
                except ValueError as e:
                    wrapper.update(wrapper.document, e)
            handler(wrappers)

        logger.info(
            "Dispatching batch inference",
            extra={"processor": self.type, "documents": len(prepared), "texts": len(sorted_texts)},
        )
        self.client.infer_async(self.model_id, sorted_texts, on_success, on_failure)


class TextEmbeddingProcessor(InferenceProcessor):
    """Writes dense vectors; list leaves become [{"knn": vector}, ...]."""

    TYPE = "text_embedding"
    LIST_TYPE_NESTED_MAP_KEY = "knn"

    def __init__(
        self,
        tag: str | None,
        description: str | None,
        model_id: str,
        field_map: dict[str, Any],
        client: BaseInferenceClient,
        index_settings: IndexSettingsProvider | None = None,
    ) -> None:
        super().__init__(
            tag, description, self.TYPE, self.LIST_TYPE_NESTED_MAP_KEY, model_id, field_map, client, index_settings
        )


class SparseEncodingProcessor(InferenceProcessor):
    """Writes token-weight maps; list leaves become [{"sparse_encoding": weights}, ...]."""

    TYPE = "sparse_encoding"
    LIST_TYPE_NESTED_MAP_KEY = "sparse_encoding"

    def __init__(
        self,
        tag: str | None,
        description: str | None,
        model_id: str,
        field_map: dict[str, Any],
        client: BaseInferenceClient,
        index_settings: IndexSettingsProvider | None = None,
    ) -> None:
        super().__init__(
            tag, description, self.TYPE, self.LIST_TYPE_NESTED_MAP_KEY, model_id, field_map, client, index_settings
        )
