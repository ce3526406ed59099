# json_errors.py
# Error taxonomy shared by the JSON tokenizer and the recursive-descent parser
#
# =============================================================================
#  ERROR MODEL
# =============================================================================
#
# Every failure in either stage raises JSONParseError. It derives from
# SyntaxError so callers that catch SyntaxError around parse() keep working,
# and it carries a closed ErrorKind plus the absolute character offset (``pos``)
# where the problem was detected.
#
# Propagation is first-failure-aborts: nothing is recovered, nothing partial
# is returned.
# =============================================================================

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure categories, one per distinct diagnostic."""

    # tokenizer
    INVALID_ESCAPE            = "invalid escape sequence"
    INVALID_NUMBER            = "invalid number"
    UNEXPECTED_CHARACTER      = "unexpected character"
    INVALID_LITERAL           = "invalid literal"
    UNTERMINATED_STRING       = "unterminated string"

    # parser
    UNEXPECTED_END            = "unexpected end of input"
    UNEXPECTED_TOKEN          = "unexpected token"
    KEY_NOT_STRING            = "key must be string"
    MISSING_COLON             = "expected ':'"
    EXPECTED_COMMA_OR_BRACE   = "expected ',' or '}'"
    EXPECTED_COMMA_OR_BRACKET = "expected ',' or ']'"
    UNCLOSED_OBJECT           = "object not closed"
    UNCLOSED_ARRAY            = "array not closed"
    TRAILING_COMMA            = "trailing comma"
    DEPTH_EXCEEDED            = "depth limit exceeded"
    DUPLICATE_KEY             = "duplicate key"
    EXTRA_DATA                = "extra data after root value"


class JSONParseError(SyntaxError):
    """
    Raised for any tokenizer or parser failure.

    ``str(exc)`` reads ``"<detail> at offset <n>"``; ``detail`` defaults to
    the kind's own description when no more specific text is supplied.
    """

    def __init__(self, kind: ErrorKind, pos: int, detail: str = ""):
        detail = detail or kind.value
        super().__init__(f"{detail} at offset {pos}")
        self.kind = kind
        self.pos = pos
        self.detail = detail

    def __reduce__(self):
        return (type(self), (self.kind, self.pos, self.detail))
