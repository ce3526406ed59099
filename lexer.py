# lexer.py
# Tokenizer stage: JSON text in, flat list of Token records out
#
# =============================================================================
#  SCANNER IMPLEMENTATION: ONE REGEX, MATCHED AT THE CURSOR
# =============================================================================
#
# The scanner applies a single compiled regex with named groups at the
# current position and dispatches on whichever group matched. Each group is
# keyed to the leading character of a token, so the alternation behaves like
# a one-character lookahead switch:
#
#   whitespace        skipped
#   { } [ ] : ,       structural token
#   "                 string run, then escape decoding
#   digit or -        greedy number run, then float() validation
#   t f n             word run, compared against true / false / null
#
# Number runs are collected greedily from [0-9 . e E + -] without checking
# where each character sits; the run is handed to float() afterwards and a
# malformed run (1.2.3, 1e, -) fails there as INVALID_NUMBER.
#
# Literals must end at whitespace, a structural character or end of input,
# so "truex" and "null1" are rejected here rather than split into a literal
# plus stray characters.
#
# Unicode escapes are not decoded: a backslash-u sequence is reported as an
# invalid escape.
# =============================================================================

import logging
import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Union

from json_errors import ErrorKind, JSONParseError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = r"\s+"
_STRING     = r'"(?:[^"\\]|\\.)*"'
_NUMBER     = r"[-0-9][-0-9.eE+]*"    # greedy; float() decides validity
_LITERAL    = r"[tfn]\w*"

_TOKEN_RE = re.compile(
    rf"(?P<WHITESPACE>{_WHITESPACE})|"
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    rf"(?P<LITERAL>{_LITERAL})|"
    r"(?P<STRUCT>[{}\[\]:,])",
    re.DOTALL,
)

# What may legally follow a literal keyword.
_BOUNDARY_RE = re.compile(r"[\s{}\[\]:,]")


# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class TokenKind(Enum):
    LBRACE   = "{"
    RBRACE   = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON    = ":"
    COMMA    = ","
    STRING   = "string"
    NUMBER   = "number"
    BOOLEAN  = "boolean"
    NULL     = "null"


class Token(NamedTuple):
    """
    Immutable token record: (kind, value, offset, end).

    ``value`` is the decoded payload for STRING / NUMBER / BOOLEAN / NULL and
    the source character for structural kinds. ``offset`` and ``end`` bound
    the token's source span, ``text[offset:end]``.
    """

    kind: TokenKind
    value: Union[str, float, bool, None]
    offset: int
    end: int


_STRUCTURAL = {kind.value: kind for kind in (
    TokenKind.LBRACE, TokenKind.RBRACE,
    TokenKind.LBRACKET, TokenKind.RBRACKET,
    TokenKind.COLON, TokenKind.COMMA,
)}

_LITERALS = {
    "t": ("true",  TokenKind.BOOLEAN, True),
    "f": ("false", TokenKind.BOOLEAN, False),
    "n": ("null",  TokenKind.NULL,    None),
}

_ESCAPES = {
    '"':  '"',
    "\\": "\\",
    "/":  "/",
    "b":  "\b",
    "f":  "\f",
    "n":  "\n",
    "r":  "\r",
    "t":  "\t",
}


# ---------------------------------------------------------------------------
# SUB-SCANNERS
# ---------------------------------------------------------------------------
def _unescape(raw: str, token_start: int) -> str:
    """
    Strip the quotes from a matched string run and decode its escapes.

    Raises INVALID_ESCAPE at the offending backslash for anything outside
    the eight single-character escapes, ``\\u`` included.
    """
    inner = raw[1:-1]
    if "\\" not in inner:
        return inner

    out: List[str] = []
    i = 0
    while True:
        j = inner.find("\\", i)
        if j < 0:
            out.append(inner[i:])
            break
        out.append(inner[i:j])
        # _STRING guarantees a character after every backslash
        esc = inner[j + 1]
        decoded = _ESCAPES.get(esc)
        if decoded is None:
            raise JSONParseError(
                ErrorKind.INVALID_ESCAPE,
                token_start + 1 + j,
                f"invalid escape sequence \\{esc}",
            )
        out.append(decoded)
        i = j + 2
    return "".join(out)


def _to_float(run: str, token_start: int) -> float:
    try:
        return float(run)
    except ValueError:
        raise JSONParseError(ErrorKind.INVALID_NUMBER, token_start, f"invalid number {run!r}") from None


def _literal(text: str, word: str, start: int, end: int) -> Token:
    expected, kind, value = _LITERALS[word[0]]
    if word != expected:
        raise JSONParseError(ErrorKind.INVALID_LITERAL, start, f"expected '{expected}'")
    if end < len(text) and not _BOUNDARY_RE.match(text, end):
        raise JSONParseError(
            ErrorKind.INVALID_LITERAL,
            start,
            f"expected '{expected}' followed by a delimiter, got {text[end]!r}",
        )
    return Token(kind, value, start, end)


def _scan_failure(text: str, pos: int) -> JSONParseError:
    ch = text[pos]
    if ch == '"':
        return JSONParseError(ErrorKind.UNTERMINATED_STRING, pos, "unterminated string")
    return JSONParseError(ErrorKind.UNEXPECTED_CHARACTER, pos, f"unexpected character {ch!r}")


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def lex(text: str) -> Iterator[Token]:
    """
    Single-pass generator producing tokens in source order.

    Stops at the first failure by raising JSONParseError; tokens already
    yielded are not retracted, so use tokenize() for all-or-nothing output.
    """
    pos = 0
    n = len(text)
    while pos < n:
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise _scan_failure(text, pos)

        group = m.lastgroup
        value = m.group()
        start = pos
        pos = m.end()

        if group == "WHITESPACE":
            continue
        if group == "STRUCT":
            yield Token(_STRUCTURAL[value], value, start, pos)
        elif group == "STRING":
            yield Token(TokenKind.STRING, _unescape(value, start), start, pos)
        elif group == "NUMBER":
            yield Token(TokenKind.NUMBER, _to_float(value, start), start, pos)
        else:
            yield _literal(text, value, start, pos)


def tokenize(text: str) -> List[Token]:
    """Scan the whole input; either every token or a JSONParseError."""
    tokens = list(lex(text))
    logger.debug("tokenized %d characters into %d tokens", len(text), len(tokens))
    return tokens


__all__ = ["Token", "TokenKind", "lex", "tokenize"]
