"""Tests for the word tokenizers."""

import pytest

from neural_ingest.services.chunking.tokenizer import WORD_TOKENIZERS, Token, tokenize
from neural_ingest.services.errors import TokenizationError


def terms(text: str, name: str) -> list[str]:
    return [t.term for t in tokenize(text, name, 1000)]


def test_supported_tokenizers() -> None:
    assert WORD_TOKENIZERS == {
        "standard", "letter", "lowercase", "whitespace", "uax_url_email", "classic", "thai",
    }


def test_standard_offsets() -> None:
    assert tokenize("Hello, world.", "standard", 10) == [Token("Hello", 0, 5), Token("world", 7, 12)]


def test_standard_keeps_apostrophes_and_numbers() -> None:
    assert terms("It's 42.", "standard") == ["It's", "42"]


def test_letter_splits_on_digits() -> None:
    assert terms("Abc1Def", "letter") == ["Abc", "Def"]


def test_lowercase() -> None:
    assert terms("Hello World", "lowercase") == ["hello", "world"]


def test_whitespace_keeps_punctuation() -> None:
    assert tokenize("a, b!", "whitespace", 10) == [Token("a,", 0, 2), Token("b!", 3, 5)]


def test_uax_url_email() -> None:
    text = "see https://example.com/a?b=1 or mail a.b@example.org"
    assert terms(text, "uax_url_email") == ["see", "https://example.com/a?b=1", "or", "mail", "a.b@example.org"]


def test_unknown_tokenizer() -> None:
    with pytest.raises(TokenizationError, match=r"Unknown tokenizer \[ngram\]"):
        tokenize("text", "ngram", 10)


def test_max_token_count_reached_exactly() -> None:
    assert len(tokenize("one two three", "standard", 3)) == 3


def test_max_token_count_exceeded() -> None:
    with pytest.raises(TokenizationError, match=r"allowed maximum of \[2\]") as exc_info:
        tokenize("one two three", "standard", 2)
    assert exc_info.value.limit == 2
