"""
Fixed token length chunking. Windows of token_limit tokens advance by
token_limit - overlap tokens; chunk boundaries are the start offsets of tokens,
so the original whitespace and punctuation are preserved.
"""

from decimal import ROUND_DOWN, Decimal
from typing import Any

from neural_ingest.config.chunking.models import (
    DEFAULT_OVERLAP_RATE,
    DEFAULT_TOKEN_LIMIT,
    DEFAULT_TOKENIZER,
    DISABLED_MAX_CHUNK_LIMIT,
    OVERLAP_RATE_UPPER_BOUND,
    FixedTokenLengthParameters,
)
from neural_ingest.config.settings import get_settings
from neural_ingest.services.chunking.base import MAX_CHUNK_LIMIT_FIELD, MAX_TOKEN_COUNT_FIELD, BaseChunker
from neural_ingest.services.chunking.governor import ChunkGovernor
from neural_ingest.services.chunking.tokenizer import WORD_TOKENIZERS, tokenize
from neural_ingest.services.errors import ConfigValidationError
from neural_ingest.services.parameters import (
    parse_double_parameter,
    parse_integer_parameter,
    parse_positive_integer_parameter,
    parse_string_parameter,
)

TOKENIZER_FIELD = "tokenizer"
TOKEN_LIMIT_FIELD = "token_limit"
OVERLAP_RATE_FIELD = "overlap_rate"


def overlap_token_count(token_limit: int, overlap_rate: float) -> int:
    """floor(token_limit * overlap_rate) in exact decimal arithmetic, capped at token_limit - 1."""
    overlap = (Decimal(str(overlap_rate)) * token_limit).to_integral_value(rounding=ROUND_DOWN)
    return min(int(overlap), token_limit - 1)


class FixedTokenLengthChunker(BaseChunker):
    ALGORITHM_NAME = "fixed_token_length"

    parameters: FixedTokenLengthParameters

    @classmethod
    def parse_parameters(cls, parameters: dict[str, Any]) -> FixedTokenLengthParameters:
        token_limit = parse_positive_integer_parameter(parameters, TOKEN_LIMIT_FIELD, DEFAULT_TOKEN_LIMIT)
        overlap_rate = parse_double_parameter(parameters, OVERLAP_RATE_FIELD, DEFAULT_OVERLAP_RATE)
        if not 0 <= overlap_rate <= OVERLAP_RATE_UPPER_BOUND:
            raise ConfigValidationError(
                f"Parameter [{OVERLAP_RATE_FIELD}] must be between 0 and {OVERLAP_RATE_UPPER_BOUND}",
                field=OVERLAP_RATE_FIELD,
                limit=OVERLAP_RATE_UPPER_BOUND,
            )
        tokenizer = parse_string_parameter(parameters, TOKENIZER_FIELD, DEFAULT_TOKENIZER)
        if tokenizer not in WORD_TOKENIZERS:
            raise ConfigValidationError(
                f"Tokenizer [{tokenizer}] is not supported for [{cls.ALGORITHM_NAME}] algorithm. "
                f"Supported tokenizers are {sorted(WORD_TOKENIZERS)}",
                field=TOKENIZER_FIELD,
            )
        return FixedTokenLengthParameters(
            tokenizer=tokenizer,
            token_limit=token_limit,
            overlap_rate=overlap_rate,
            max_chunk_limit=parse_integer_parameter(parameters, MAX_CHUNK_LIMIT_FIELD, DISABLED_MAX_CHUNK_LIMIT),
        )

    def chunk(
        self,
        content: str,
        governor: ChunkGovernor | None = None,
        runtime: dict[str, Any] | None = None,
    ) -> list[str]:
        if not content:
            return []
        governor = self._governor(governor)
        runtime = runtime or {}
        max_token_count = parse_positive_integer_parameter(
            runtime, MAX_TOKEN_COUNT_FIELD, get_settings().index_analyze_max_token_count
        )
        token_limit = self.parameters.token_limit
        step = token_limit - overlap_token_count(token_limit, self.parameters.overlap_rate)

        tokens = tokenize(content, self.parameters.tokenizer, max_token_count)
        chunks: list[str] = []
        start_token = 0
        while start_token < len(tokens):
            # the first chunk also keeps any characters before the first token
            start = 0 if start_token == 0 else tokens[start_token].start_offset
            if governor.would_exceed(len(chunks)):
                chunks.append(content[start:])
                break
            if start_token + token_limit >= len(tokens):
                chunks.append(content[start:])
                break
            end = tokens[start_token + token_limit].start_offset
            chunks.append(content[start:end])
            start_token += step
        governor.record(len(chunks))
        return chunks
