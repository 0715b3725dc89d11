"""Word tokenizers with character offsets, used by the fixed token length chunker."""

import re
from dataclasses import dataclass

from neural_ingest.services.errors import TokenizationError

_STANDARD = r"\w+(?:['’.]\w+)*"
_URL = r"[a-zA-Z][a-zA-Z0-9+.-]*://[^\s<>\"']+"
_EMAIL = r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+"

# name -> (pattern, lowercase terms)
_TOKENIZERS: dict[str, tuple[re.Pattern[str], bool]] = {
    "standard": (re.compile(_STANDARD), False),
    "classic": (re.compile(r"\w+(?:[-'’.@]\w+)*"), False),
    "letter": (re.compile(r"[^\W\d_]+"), False),
    "lowercase": (re.compile(r"[^\W\d_]+"), True),
    "whitespace": (re.compile(r"\S+"), False),
    "uax_url_email": (re.compile(f"{_URL}|{_EMAIL}|{_STANDARD}"), False),
    "thai": (re.compile(r"\w+"), False),
}

WORD_TOKENIZERS: frozenset[str] = frozenset(_TOKENIZERS)


@dataclass(frozen=True)
class Token:
    """A term and its character span [start_offset, end_offset) in the source text."""

    term: str
    start_offset: int
    end_offset: int


def tokenize(text: str, tokenizer_name: str, max_token_count: int) -> list[Token]:
    """
    Tokenize text with the named word tokenizer.
    Raises TokenizationError if the tokenizer is unknown or produces more than max_token_count tokens.
    """
    entry = _TOKENIZERS.get(tokenizer_name)
    if entry is None:
        raise TokenizationError(f"Unknown tokenizer [{tokenizer_name}]", field=tokenizer_name)
    pattern, lowercase = entry
    tokens: list[Token] = []
    for m in pattern.finditer(text):
        if len(tokens) >= max_token_count:
            raise TokenizationError(
                "The number of tokens produced by calling _analyze has exceeded the allowed maximum of "
                f"[{max_token_count}]. This limit can be set by changing the "
                "[index.analyze.max_token_count] index level setting.",
                limit=max_token_count,
            )
        term = m.group().lower() if lowercase else m.group()
        tokens.append(Token(term, m.start(), m.end()))
    return tokens
