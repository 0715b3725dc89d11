"""Inference client contract: one result per input text, in input order."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class BaseInferenceClient(ABC):
    """
    Abstract inference backend (text embedding, sparse encoding). Results
    must come back in the same order as the submitted texts.
    """

    @abstractmethod
    def infer(self, model_id: str, texts: list[str]) -> list[Any]:
        """Run the model over texts synchronously. Returns one result per text."""
        ...

    def infer_async(
        self,
        model_id: str,
        texts: list[str],
        on_success: Callable[[list[Any]], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        """
        Callback flavour of infer. The default runs infer inline and routes
        its outcome; backends with native async calls override this.
        """
        try:
            results = self.infer(model_id, texts)
        except Exception as e:
            on_failure(e)
            return
        on_success(results)


class CallableInferenceClient(BaseInferenceClient):
    """Adapts a plain function (model_id, texts) -> results."""

    def __init__(self, fn: Callable[[str, list[str]], list[Any]]) -> None:
        self._fn = fn

    def infer(self, model_id: str, texts: list[str]) -> list[Any]:
        return list(self._fn(model_id, texts))
