"""Shared OpenSearch client with timeouts and explicit shutdown."""

from opensearchpy import OpenSearch

from neural_ingest.config.logging import get_logger
from neural_ingest.config.storage.opensearch import get_opensearch_config

logger = get_logger(__name__)

_client: OpenSearch | None = None


def get_opensearch_client() -> OpenSearch:
    """Return the shared OpenSearch client. Creates it on first use."""
    global _client
    if _client is None:
        cfg = get_opensearch_config()
        _client = OpenSearch(
            hosts=[cfg["host"]],
            http_auth=(cfg["username"], cfg["password"]),
            use_ssl=cfg["use_ssl"],
            verify_certs=cfg["verify_certs"],
            timeout=cfg["timeout"],
        )
        logger.info(
            "OpenSearch client initialized",
            extra={"host": cfg["host"], "timeout": cfg["timeout"]},
        )
    return _client


def close_opensearch_client() -> None:
    """Close the OpenSearch client and release connections."""
    global _client
    if _client is not None:
        try:
            _client.close()
            logger.info("OpenSearch client closed")
        except Exception as e:
            logger.warning("Error closing OpenSearch client", extra={"error": str(e)})
        _client = None
