"""Per-document chunk count ceiling shared by every chunked field of one document."""

from neural_ingest.config.chunking.models import DISABLED_MAX_CHUNK_LIMIT


class ChunkGovernor:
    """
    Counts chunks emitted for one document. Every string still waiting to be
    chunked reserves one slot, so the last fields always get at least their
    merged tail chunk. Empty strings produce no chunks and hold no slot.
    Create a fresh governor per document; never share one.
    """

    def __init__(self, max_chunk_limit: int = DISABLED_MAX_CHUNK_LIMIT, strings_to_chunk: int = 1) -> None:
        self.max_chunk_limit = max_chunk_limit
        self.chunk_count = 0
        self.strings_remaining = strings_to_chunk

    @property
    def enabled(self) -> bool:
        return self.max_chunk_limit != DISABLED_MAX_CHUNK_LIMIT

    def would_exceed(self, emitted: int) -> bool:
        """True when emitting one more chunk for the current string would reach the ceiling."""
        if not self.enabled:
            return False
        return self.chunk_count + emitted + self.strings_remaining >= self.max_chunk_limit

    def record(self, emitted: int) -> None:
        """Account for the chunks of one finished string."""
        self.chunk_count += emitted
        self.strings_remaining = max(0, self.strings_remaining - 1)
