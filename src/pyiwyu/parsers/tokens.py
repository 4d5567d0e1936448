# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""C-family token grammars used to recover the span of a reported use site."""

from __future__ import annotations

import re
from typing import Final

_DIGITS: Final[str] = r"\d(?:'?\d)*"
_HEX_DIGITS: Final[str] = r"[0-9a-fA-F](?:'?[0-9a-fA-F])*"
_EXPONENT: Final[str] = rf"[eE][+-]?{_DIGITS}"
_INTEGER_SUFFIX: Final[str] = r"(?:[uU](?:ll|LL|[lLzZ])?|(?:ll|LL|[lLzZ])[uU]?)?"
_FLOAT_SUFFIX: Final[str] = r"(?:[fF](?:16|32|64|128)?|[lL]|bf16|BF16)?"
_UDL_SUFFIX: Final[str] = r"(?:_[A-Za-z_]\w*)?"
_ENCODING_PREFIX: Final[str] = r"(?:u8|u|U|L)?"

HEX_FLOAT_LITERAL: Final[re.Pattern[str]] = re.compile(
    rf"0[xX](?:{_HEX_DIGITS})?\.?(?:{_HEX_DIGITS})?[pP][+-]?{_DIGITS}{_FLOAT_SUFFIX}{_UDL_SUFFIX}",
    re.ASCII,
)
HEX_LITERAL: Final[re.Pattern[str]] = re.compile(rf"0[xX]{_HEX_DIGITS}{_INTEGER_SUFFIX}{_UDL_SUFFIX}", re.ASCII)
BINARY_LITERAL: Final[re.Pattern[str]] = re.compile(rf"0[bB][01](?:'?[01])*{_INTEGER_SUFFIX}{_UDL_SUFFIX}", re.ASCII)
FLOAT_LITERAL: Final[re.Pattern[str]] = re.compile(
    rf"(?:{_DIGITS}\.(?:{_DIGITS})?(?:{_EXPONENT})?|\.{_DIGITS}(?:{_EXPONENT})?|{_DIGITS}{_EXPONENT})"
    rf"{_FLOAT_SUFFIX}{_UDL_SUFFIX}",
    re.ASCII,
)
DECIMAL_LITERAL: Final[re.Pattern[str]] = re.compile(rf"{_DIGITS}{_INTEGER_SUFFIX}{_UDL_SUFFIX}", re.ASCII)
CHARACTER_LITERAL: Final[re.Pattern[str]] = re.compile(
    rf"{_ENCODING_PREFIX}'(?:[^'\\\n]|\\.)+'{_UDL_SUFFIX}",
    re.ASCII,
)
STRING_LITERAL: Final[re.Pattern[str]] = re.compile(
    rf"{_ENCODING_PREFIX}\"(?:[^\"\\\n]|\\.)*\"{_UDL_SUFFIX}",
    re.ASCII,
)
RAW_STRING_LITERAL: Final[re.Pattern[str]] = re.compile(
    rf"{_ENCODING_PREFIX}R\"(?P<delimiter>[^()\\\s\"]{{0,16}})\(.*?\)(?P=delimiter)\"{_UDL_SUFFIX}",
    re.ASCII | re.DOTALL,
)
IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_]\w*", re.ASCII)

# Order matters: the first grammar that matches at the offset wins.
NUMERIC_GRAMMARS: Final[tuple[re.Pattern[str], ...]] = (
    HEX_FLOAT_LITERAL,
    HEX_LITERAL,
    BINARY_LITERAL,
    FLOAT_LITERAL,
    DECIMAL_LITERAL,
)
TOKEN_GRAMMARS: Final[tuple[re.Pattern[str], ...]] = (
    *NUMERIC_GRAMMARS,
    CHARACTER_LITERAL,
    STRING_LITERAL,
    RAW_STRING_LITERAL,
    IDENTIFIER,
)


def match_token(text: str, offset: int) -> int | None:
    """Return the length of the token starting at ``offset`` in ``text``.

    Args:
        text: Full source text.
        offset: Character offset where the token is expected to begin.

    Returns:
        int | None: Length of the first grammar match, or ``None`` when no
        grammar matches (including an offset outside ``text``).
    """

    if offset < 0 or offset >= len(text):
        return None
    for grammar in TOKEN_GRAMMARS:
        match = grammar.match(text, offset)
        if match is not None and match.end() > offset:
            return match.end() - offset
    return None


__all__ = [
    "CHARACTER_LITERAL",
    "IDENTIFIER",
    "NUMERIC_GRAMMARS",
    "RAW_STRING_LITERAL",
    "STRING_LITERAL",
    "TOKEN_GRAMMARS",
    "match_token",
]
