# json_parser.py
# Recursive-descent JSON parser over the lexer's token list, plus a small
# command-line validator
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT FOR STRUCTURE
# =============================================================================
#
# One method per grammar rule: _parse_value dispatches on the token under the
# cursor, _parse_object and _parse_array recurse back into it for members and
# elements. JSON is LL(1), so a single token of lookahead decides every branch.
#
# The cursor is an index into the token list produced by lexer.tokenize().
# It only moves forward and never copies or slices the list.
#
# Values come out as native Python types:
#
#   null -> None      true/false -> bool      number -> float (always)
#   string -> str     array -> list           object -> dict
#
# Object keys are last-write-wins unless the caller asks for duplicates to be
# rejected. A comma directly before a closing token is reported as
# TRAILING_COMMA. Nesting is capped at max_depth containers (root = depth 1).
# Anything after the root value is EXTRA_DATA.
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] RFC 8259 - The JavaScript Object Notation (JSON) Data Interchange Format
# [2] JSON_checker - depth-limited reference validator
# =============================================================================

import argparse
import logging
import pprint
import sys
from typing import Dict, List, Optional, Sequence, Union

from json_errors import ErrorKind, JSONParseError
from lexer import Token, TokenKind, lex, tokenize

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 256    # nested containers; two frames each, well under the recursion limit

JSONValue = Union[None, bool, float, str, List["JSONValue"], Dict[str, "JSONValue"]]

_SCALAR_KINDS = frozenset({TokenKind.STRING, TokenKind.NUMBER, TokenKind.BOOLEAN, TokenKind.NULL})


# ---------------------------------------------------------------------------
# TOKEN CURSOR
# ---------------------------------------------------------------------------
class TokenCursor:
    """
    Forward-only cursor over a token list.

    peek() returns the token under the cursor (None at end of input) without
    moving; advance() returns it and steps past it.
    """

    def __init__(self, tokens: Sequence[Token]):
        self._tokens = tokens
        self._pos = 0

    def peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def advance(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise JSONParseError(ErrorKind.UNEXPECTED_END, self.end_offset)
        self._pos += 1
        return tok

    @property
    def end_offset(self) -> int:
        """Source offset just past the last token, where end-of-input errors point."""
        return self._tokens[-1].end if self._tokens else 0


# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------
class Parser:
    """
    Builds one value tree from a token list.

    A Parser consumes its tokens; call parse() once per instance.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        *,
        max_depth: int = DEPTH_LIMIT_DEFAULT,
        allow_dup: bool = True,
    ):
        self._cursor = TokenCursor(tokens)
        self._innermost = 0
        self.max_depth = max_depth
        self.allow_dup = allow_dup

    def parse(self) -> JSONValue:
        """Parse exactly one root value and require the token list to end there."""
        logger.debug("parsing (max_depth=%d, allow_dup=%s)", self.max_depth, self.allow_dup)
        try:
            value = self._parse_value(0)
        except RecursionError:
            # max_depth set above what the interpreter stack can hold
            raise JSONParseError(
                ErrorKind.DEPTH_EXCEEDED,
                self._innermost,
                "nesting exceeds the interpreter recursion limit",
            ) from None
        extra = self._cursor.peek()
        if extra is not None:
            raise JSONParseError(
                ErrorKind.EXTRA_DATA,
                extra.offset,
                f"extra data after root value: {extra.kind.name}",
            )
        logger.debug("parsed %s root value", type(value).__name__)
        return value

    # -- dispatch -----------------------------------------------------------

    def _parse_value(self, depth: int) -> JSONValue:
        tok = self._cursor.peek()
        if tok is None:
            raise JSONParseError(ErrorKind.UNEXPECTED_END, self._cursor.end_offset)
        if tok.kind in _SCALAR_KINDS:
            self._cursor.advance()
            return tok.value
        if tok.kind is TokenKind.LBRACE:
            return self._parse_object(depth + 1)
        if tok.kind is TokenKind.LBRACKET:
            return self._parse_array(depth + 1)
        raise JSONParseError(
            ErrorKind.UNEXPECTED_TOKEN,
            tok.offset,
            f"unexpected token {tok.kind.name} '{tok.value}' - value expected",
        )

    def _open(self, depth: int) -> Token:
        opener = self._cursor.advance()
        self._innermost = opener.offset
        if depth > self.max_depth:
            raise JSONParseError(
                ErrorKind.DEPTH_EXCEEDED,
                opener.offset,
                f"depth limit of {self.max_depth} exceeded",
            )
        return opener

    def _unclosed(self, kind: ErrorKind, what: str, opener: Token) -> JSONParseError:
        return JSONParseError(kind, self._cursor.end_offset, f"{what} opened at offset {opener.offset} not closed")

    # -- containers ---------------------------------------------------------

    def _parse_object(self, depth: int) -> Dict[str, JSONValue]:
        """
        Parse ``{ "key": value, ... }``.

        The empty object is handled before the member loop, so a closing
        brace met where a key belongs can only follow a comma.
        """
        opener = self._open(depth)
        obj: Dict[str, JSONValue] = {}

        tok = self._cursor.peek()
        if tok is not None and tok.kind is TokenKind.RBRACE:
            self._cursor.advance()
            return obj

        while True:
            key_tok = self._cursor.peek()
            if key_tok is None:
                raise self._unclosed(ErrorKind.UNCLOSED_OBJECT, "object", opener)
            if key_tok.kind is TokenKind.RBRACE:
                raise JSONParseError(ErrorKind.TRAILING_COMMA, key_tok.offset, "trailing comma before '}'")
            if key_tok.kind is not TokenKind.STRING:
                raise JSONParseError(
                    ErrorKind.KEY_NOT_STRING,
                    key_tok.offset,
                    f"key must be string, got {key_tok.kind.name}",
                )
            self._cursor.advance()
            key = key_tok.value

            colon = self._cursor.peek()
            if colon is None:
                raise self._unclosed(ErrorKind.UNCLOSED_OBJECT, "object", opener)
            if colon.kind is not TokenKind.COLON:
                raise JSONParseError(ErrorKind.MISSING_COLON, colon.offset, f"expected ':' after key {key!r}")
            self._cursor.advance()

            if not self.allow_dup and key in obj:
                raise JSONParseError(ErrorKind.DUPLICATE_KEY, key_tok.offset, f"duplicate key {key!r}")
            obj[key] = self._parse_value(depth)

            sep = self._cursor.peek()
            if sep is None:
                raise self._unclosed(ErrorKind.UNCLOSED_OBJECT, "object", opener)
            if sep.kind is TokenKind.RBRACE:
                self._cursor.advance()
                return obj
            if sep.kind is not TokenKind.COMMA:
                raise JSONParseError(
                    ErrorKind.EXPECTED_COMMA_OR_BRACE,
                    sep.offset,
                    f"expected ',' or '}}', got {sep.kind.name}",
                )
            self._cursor.advance()

    def _parse_array(self, depth: int) -> List[JSONValue]:
        opener = self._open(depth)
        items: List[JSONValue] = []

        tok = self._cursor.peek()
        if tok is not None and tok.kind is TokenKind.RBRACKET:
            self._cursor.advance()
            return items

        while True:
            tok = self._cursor.peek()
            if tok is None:
                raise self._unclosed(ErrorKind.UNCLOSED_ARRAY, "array", opener)
            if tok.kind is TokenKind.RBRACKET:
                raise JSONParseError(ErrorKind.TRAILING_COMMA, tok.offset, "trailing comma before ']'")
            items.append(self._parse_value(depth))

            sep = self._cursor.peek()
            if sep is None:
                raise self._unclosed(ErrorKind.UNCLOSED_ARRAY, "array", opener)
            if sep.kind is TokenKind.RBRACKET:
                self._cursor.advance()
                return items
            if sep.kind is not TokenKind.COMMA:
                raise JSONParseError(
                    ErrorKind.EXPECTED_COMMA_OR_BRACKET,
                    sep.offset,
                    f"expected ',' or ']', got {sep.kind.name}",
                )
            self._cursor.advance()


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT, allow_dup: bool = True) -> JSONValue:
    """
    Parse JSON text into Python structures.

    Any JSON value may be the root. Raises JSONParseError (a SyntaxError)
    on the first problem found by either stage.
    """
    return Parser(tokenize(text), max_depth=max_depth, allow_dup=allow_dup).parse()


# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _cli(argv: List[str]) -> int:
    """
    Command-line validator.

    Exit status: 0 on success, 1 on a parse error, 2 when the input cannot
    be read.
    """
    ap = argparse.ArgumentParser(description="JSON validator")
    ap.add_argument("file", help="JSON file to verify, or '-' for stdin")
    ap.add_argument("--debug", action="store_true", help="dump token stream and exit")
    ap.add_argument("--show", action="store_true", help="pretty-print the parsed value instead of OK")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT)
    ap.add_argument("--reject-dup-keys", action="store_true")
    ap.add_argument("--verbose", action="store_true", help="log parser activity to stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 2

    try:
        if args.debug:
            for tok in lex(data):
                print(tok)
            return 0
        value = parse(data, max_depth=args.max_depth, allow_dup=not args.reject_dup_keys)
    except SyntaxError as exc:
        print(f"SyntaxError: {exc}", file=sys.stderr)
        return 1

    if args.show:
        pprint.pprint(value)
    else:
        print("OK")
    return 0


def main() -> int:
    return _cli(sys.argv[1:])


# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
