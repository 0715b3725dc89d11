"""Index limits read from OpenSearch index settings, with settings defaults for missing indices."""

from typing import Any

from opensearchpy import OpenSearch
from opensearchpy.exceptions import NotFoundError

from neural_ingest.config.logging import get_logger
from neural_ingest.config.settings import get_settings
from neural_ingest.resources.index_settings import IndexSettingsProvider
from neural_ingest.resources.opensearch.client import get_opensearch_client

logger = get_logger(__name__)

DEPTH_LIMIT_SETTING = "index.mapping.depth.limit"
MAX_TOKEN_COUNT_SETTING = "index.analyze.max_token_count"


class OpenSearchIndexSettings(IndexSettingsProvider):
    """
    Looks up index.mapping.depth.limit and index.analyze.max_token_count.
    Explicit index settings win over cluster defaults; an index that does not
    exist yet (or no index name) uses the settings defaults.
    """

    def __init__(self, client: OpenSearch | None = None) -> None:
        self._client = client

    @property
    def client(self) -> OpenSearch:
        if self._client is None:
            self._client = get_opensearch_client()
        return self._client

    def _read_setting(self, index_name: str | None, setting: str) -> int | None:
        if not index_name:
            return None
        try:
            response: dict[str, Any] = self.client.indices.get_settings(
                index=index_name,
                name=setting,
                flat_settings=True,
                include_defaults=True,
            )
        except NotFoundError:
            logger.info(
                "Index not found, using default setting",
                extra={"index_name": index_name, "setting": setting},
            )
            return None
        body = response.get(index_name, {})
        value = body.get("settings", {}).get(setting)
        if value is None:
            value = body.get("defaults", {}).get(setting)
        return int(value) if value is not None else None

    def max_nesting_depth(self, index_name: str | None) -> int:
        value = self._read_setting(index_name, DEPTH_LIMIT_SETTING)
        return value if value is not None else get_settings().index_mapping_depth_limit

    def max_token_count(self, index_name: str | None) -> int:
        value = self._read_setting(index_name, MAX_TOKEN_COUNT_SETTING)
        return value if value is not None else get_settings().index_analyze_max_token_count
