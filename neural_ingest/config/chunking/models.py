"""Chunking configuration models. Immutable once parsed; no business logic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# max_chunk_limit sentinel: no ceiling on the number of chunks per document
DISABLED_MAX_CHUNK_LIMIT = -1

DEFAULT_DELIMITER = "\n\n"
DEFAULT_TOKENIZER = "standard"
DEFAULT_TOKEN_LIMIT = 384
DEFAULT_OVERLAP_RATE = 0.0
OVERLAP_RATE_UPPER_BOUND = 0.5


class DelimiterParameters(BaseModel):
    """Parameters of the delimiter algorithm."""

    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(default=DEFAULT_DELIMITER, min_length=1)
    max_chunk_limit: int = Field(default=DISABLED_MAX_CHUNK_LIMIT)


class FixedTokenLengthParameters(BaseModel):
    """Parameters of the fixed token length algorithm."""

    model_config = ConfigDict(frozen=True)

    tokenizer: str = Field(default=DEFAULT_TOKENIZER, description="Word tokenizer name")
    token_limit: int = Field(default=DEFAULT_TOKEN_LIMIT, ge=1, description="Tokens per chunk")
    overlap_rate: float = Field(
        default=DEFAULT_OVERLAP_RATE,
        ge=0.0,
        le=OVERLAP_RATE_UPPER_BOUND,
        description="Fraction of a chunk's tokens repeated at the start of the next chunk",
    )
    max_chunk_limit: int = Field(default=DISABLED_MAX_CHUNK_LIMIT)


class ChunkingConfig(BaseModel):
    """Parsed algorithm map of a chunking processor. Shared read-only across documents."""

    model_config = ConfigDict(frozen=True)

    algorithm: Literal["delimiter", "fixed_token_length"]
    parameters: DelimiterParameters | FixedTokenLengthParameters
    max_chunk_limit: int = Field(default=DISABLED_MAX_CHUNK_LIMIT)

    @property
    def limit_enabled(self) -> bool:
        return self.max_chunk_limit != DISABLED_MAX_CHUNK_LIMIT
