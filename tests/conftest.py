"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from neural_ingest.config.settings import get_settings
from neural_ingest.services.inference.base import CallableInferenceClient

SAMPLE_TEXT = (
    "This is an example document to be chunked. The document contains a single paragraph, "
    "two sentences and 24 tokens by standard tokenizer in OpenSearch."
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; clear around every test so env overrides stay local."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


class RecordingClient(CallableInferenceClient):
    """Inference client that tags each text and records every call."""

    def __init__(self) -> None:
        super().__init__(lambda model_id, texts: [f"vec:{t}" for t in texts])
        self.calls: list[tuple[str, list[str]]] = []

    def infer(self, model_id: str, texts: list[str]) -> list[Any]:
        self.calls.append((model_id, list(texts)))
        return super().infer(model_id, texts)


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()
