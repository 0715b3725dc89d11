"""Tests for the text embedding and sparse encoding processors."""

from typing import Any

import pytest

from neural_ingest.resources.index_settings import StaticIndexSettings
from neural_ingest.services.errors import ConfigValidationError, DocumentValidationError
from neural_ingest.services.inference.base import CallableInferenceClient
from neural_ingest.services.inference.processor import (
    DocumentWrapper,
    SparseEncodingProcessor,
    TextEmbeddingProcessor,
)

FIELD_MAP = {"title": "title_embedding", "tags": "tags_embedding"}


class Outcome:
    """Collects what a processor passed to its completion handler."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)


def failing_client(message: str = "model unavailable") -> CallableInferenceClient:
    def infer(model_id: str, texts: list[str]) -> list[Any]:
        raise RuntimeError(message)

    return CallableInferenceClient(infer)


def short_client() -> CallableInferenceClient:
    return CallableInferenceClient(lambda model_id, texts: texts[:-1])


class UnreachableIndexSettings(StaticIndexSettings):
    """Fails the depth lookup for one index, as a dropped cluster connection would."""

    def __init__(self, unreachable_index: str) -> None:
        super().__init__()
        self.unreachable_index = unreachable_index

    def max_nesting_depth(self, index_name: str | None) -> int:
        if index_name == self.unreachable_index:
            raise ConnectionError("settings lookup failed")
        return super().max_nesting_depth(index_name)


class TestConfiguration:
    @pytest.mark.parametrize("model_id", ["", "   "])
    def test_blank_model_id(self, model_id, recording_client) -> None:
        with pytest.raises(ConfigValidationError, match="model_id is null or empty, cannot process it"):
            TextEmbeddingProcessor(None, None, model_id, FIELD_MAP, recording_client)

    def test_invalid_field_map(self, recording_client) -> None:
        with pytest.raises(ConfigValidationError, match="Unable to create sparse_encoding processor"):
            SparseEncodingProcessor(None, None, "model", {"title": ""}, recording_client)

    def test_types(self, recording_client) -> None:
        assert TextEmbeddingProcessor(None, None, "m", FIELD_MAP, recording_client).type == "text_embedding"
        assert SparseEncodingProcessor(None, None, "m", FIELD_MAP, recording_client).type == "sparse_encoding"


class TestExecute:
    def test_string_and_list_fields(self, recording_client) -> None:
        processor = TextEmbeddingProcessor(None, None, "model-1", FIELD_MAP, recording_client)
        document = {"title": "T", "tags": ["a", "b"]}
        outcome = Outcome()
        processor.execute(document, outcome)
        assert outcome.calls == [(document, None)]
        assert document["title_embedding"] == "vec:T"
        assert document["tags_embedding"] == [{"knn": "vec:a"}, {"knn": "vec:b"}]
        assert recording_client.calls == [("model-1", ["T", "a", "b"])]

    def test_sparse_encoding_list_key(self, recording_client) -> None:
        processor = SparseEncodingProcessor(None, None, "model", {"tags": "tags_tokens"}, recording_client)
        document = {"tags": ["a"]}
        processor.execute(document, Outcome())
        assert document["tags_tokens"] == [{"sparse_encoding": "vec:a"}]

    def test_invalid_document(self, recording_client) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, recording_client)
        outcome = Outcome()
        processor.execute({"title": 42}, outcome)
        [(document, error)] = outcome.calls
        assert document is None
        assert isinstance(error, DocumentValidationError)
        assert recording_client.calls == []

    def test_nothing_to_infer(self, recording_client) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, recording_client)
        document = {"other": "x"}
        outcome = Outcome()
        processor.execute(document, outcome)
        assert outcome.calls == [(document, None)]
        assert recording_client.calls == []

    def test_inference_failure(self) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, failing_client())
        outcome = Outcome()
        document = {"title": "T"}
        processor.execute(document, outcome)
        [(result, error)] = outcome.calls
        assert result is None
        assert isinstance(error, RuntimeError)
        assert "title_embedding" not in document

    def test_result_count_mismatch(self) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, short_client())
        outcome = Outcome()
        document = {"title": "T", "tags": ["a"]}
        processor.execute(document, outcome)
        [(result, error)] = outcome.calls
        assert result is None
        assert isinstance(error, ValueError)
        assert document == {"title": "T", "tags": ["a"]}


class TestBatchExecute:
    def test_single_inference_call_in_length_order(self, recording_client) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, recording_client)
        earlier_error = RuntimeError("failed upstream")
        wrappers = [
            DocumentWrapper(0, {"title": "ccc", "tags": ["bb"]}),
            DocumentWrapper(1, {"title": 5}),
            DocumentWrapper(2, {"title": "a"}),
            DocumentWrapper(3, {"title": "skipped"}, earlier_error),
        ]
        outcome = Outcome()
        processor.batch_execute(wrappers, outcome)

        assert outcome.calls == [(wrappers,)]
        assert recording_client.calls == [("model", ["a", "bb", "ccc"])]
        assert wrappers[0].document == {
            "title": "ccc",
            "tags": ["bb"],
            "title_embedding": "vec:ccc",
            "tags_embedding": [{"knn": "vec:bb"}],
        }
        assert wrappers[0].exception is None
        assert isinstance(wrappers[1].exception, DocumentValidationError)
        assert wrappers[2].document["title_embedding"] == "vec:a"
        assert wrappers[3].exception is earlier_error
        assert "title_embedding" not in wrappers[3].document

    def test_empty_batch(self, recording_client) -> None:
        outcome = Outcome()
        TextEmbeddingProcessor(None, None, "model", FIELD_MAP, recording_client).batch_execute([], outcome)
        assert outcome.calls == [([],)]
        assert recording_client.calls == []

    def test_nothing_to_infer(self, recording_client) -> None:
        wrappers = [DocumentWrapper(0, {"other": "x"})]
        outcome = Outcome()
        TextEmbeddingProcessor(None, None, "model", FIELD_MAP, recording_client).batch_execute(wrappers, outcome)
        assert outcome.calls == [(wrappers,)]
        assert wrappers[0].exception is None
        assert recording_client.calls == []

    def test_inference_failure_marks_unmarked_documents(self) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, failing_client())
        wrappers = [
            DocumentWrapper(0, {"title": "a"}),
            DocumentWrapper(1, {"title": ["x", None]}),
            DocumentWrapper(2, {"title": "b"}),
        ]
        processor.batch_execute(wrappers, Outcome())
        assert str(wrappers[0].exception) == "model unavailable"
        assert isinstance(wrappers[1].exception, DocumentValidationError)
        assert wrappers[2].exception is wrappers[0].exception

    def test_result_count_mismatch_marks_documents(self) -> None:
        processor = TextEmbeddingProcessor(None, None, "model", FIELD_MAP, short_client())
        wrappers = [DocumentWrapper(0, {"title": "a"}), DocumentWrapper(1, {"title": "b"})]
        processor.batch_execute(wrappers, Outcome())
        assert all(isinstance(w.exception, ValueError) for w in wrappers)
        assert wrappers[0].document == {"title": "a"}

    def test_settings_lookup_failure_isolated_to_document(self, recording_client) -> None:
        processor = TextEmbeddingProcessor(
            None, None, "model", FIELD_MAP, recording_client, UnreachableIndexSettings("bad")
        )
        wrappers = [
            DocumentWrapper(0, {"_index": "bad", "title": "a"}),
            DocumentWrapper(1, {"_index": "good", "title": "b"}),
        ]
        outcome = Outcome()
        processor.batch_execute(wrappers, outcome)

        assert outcome.calls == [(wrappers,)]
        assert isinstance(wrappers[0].exception, ConnectionError)
        assert "title_embedding" not in wrappers[0].document
        assert wrappers[1].exception is None
        assert wrappers[1].document["title_embedding"] == "vec:b"
        assert recording_client.calls == [("model", ["b"])]

    def test_settings_lookup_failure_in_single_execute(self, recording_client) -> None:
        processor = TextEmbeddingProcessor(
            None, None, "model", FIELD_MAP, recording_client, UnreachableIndexSettings("bad")
        )
        outcome = Outcome()
        processor.execute({"_index": "bad", "title": "a"}, outcome)
        [(document, error)] = outcome.calls
        assert document is None
        assert isinstance(error, ConnectionError)
        assert recording_client.calls == []
