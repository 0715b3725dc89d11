"""Index-level limits consulted per document: maximum nesting depth and tokenizer token count."""

from abc import ABC, abstractmethod

from neural_ingest.config.settings import get_settings


class IndexSettingsProvider(ABC):
    """Source of per-index limits. Implementations fall back to settings defaults for unknown indices."""

    @abstractmethod
    def max_nesting_depth(self, index_name: str | None) -> int:
        ...

    @abstractmethod
    def max_token_count(self, index_name: str | None) -> int:
        ...


class StaticIndexSettings(IndexSettingsProvider):
    """Settings defaults, optionally overridden per index name."""

    def __init__(
        self,
        depth_overrides: dict[str, int] | None = None,
        token_count_overrides: dict[str, int] | None = None,
    ) -> None:
        self._depth_overrides = dict(depth_overrides or {})
        self._token_count_overrides = dict(token_count_overrides or {})

    def max_nesting_depth(self, index_name: str | None) -> int:
        if index_name in self._depth_overrides:
            return self._depth_overrides[index_name]
        return get_settings().index_mapping_depth_limit

    def max_token_count(self, index_name: str | None) -> int:
        if index_name in self._token_count_overrides:
            return self._token_count_overrides[index_name]
        return get_settings().index_analyze_max_token_count
