"""
Lexical grammar constants and binding-power tables for the Ember language.

Everything the lexer and the parser need to agree on lives here, so the two
stay in lockstep:

Constants:
    KEYWORDS: Reserved words. They lex as operator tokens, never as identifiers.
    PUNCTUATION: Characters that start an operator token.
    MULTI_CHAR_OPERATORS: Operators tried before falling back to one character.
    COMMENT_MARKER: Starts a line comment.
    BOOL_WORDS, UNIT_WORD: Words that lex as literal atoms.
    ATOM_KINDS: The closed set of atom kinds.
    INFIX_POWER: Operator -> (left power, right power) for infix use.
    PREFIX_POWER: Operator -> right power for prefix use.

Associativity is encoded in the pairs: the infix loop continues while the
upcoming operator's left power is at least the current minimum, so a pair with
``left < right`` associates to the left and ``left > right`` to the right.
"""

import re

KEYWORDS: frozenset[str] = frozenset(
    {
        "var",
        "and",
        "or",
        "not",
        "xor",
        "to",
        "do",
        "end",
        "if",
        "then",
        "else",
        "match",
        "with",
        "loop",
        "break",
        "function",
        "type",
        "record",
        "trait",
    }
)

PUNCTUATION: frozenset[str] = frozenset("+-*/%^<>=,.:!?()[]{}")

MULTI_CHAR_OPERATORS: tuple[str, ...] = ("==", ">=", "<=")

COMMENT_MARKER = "#"

BOOL_WORDS: frozenset[str] = frozenset({"true", "false"})
UNIT_WORD = "unit"

ATOM_KINDS: tuple[str, ...] = ("number", "bool", "unit", "text", "id")
OPERATOR_KIND = "op"

NUMBER_PATTERN = re.compile(r"\d+(\.\d+)?")
TEXT_PATTERN = re.compile(r'"([^"\\]|\\[\s\S])*"')

INFIX_POWER: dict[str, tuple[int, int]] = {
    "=": (4, 3),
    ":": (5, 6),
    "to": (7, 8),
    "or": (9, 10),
    "xor": (11, 12),
    "and": (13, 14),
    "==": (15, 16),
    ">": (17, 18),
    "<": (17, 18),
    ">=": (17, 18),
    "<=": (17, 18),
    "+": (19, 20),
    "-": (19, 20),
    "*": (21, 22),
    "/": (21, 22),
    "(": (25, 26),
    ".": (28, 29),
}

PREFIX_POWER: dict[str, int] = {
    "-": 23,
    "not": 23,
    "var": 2,
}

# Tags of the compound nodes the parser builds for composite forms.
DO_TAG = "do"
SEQ_TAG = "seq"
LIST_TAG = "list"
TABLE_TAG = "table"
PARAMS_TAG = "params"


def infix_power(op: str) -> tuple[int, int] | None:
    """Returns the (left, right) binding power of an infix operator, if any."""
    return INFIX_POWER.get(op)


def prefix_power(op: str) -> int | None:
    """Returns the right binding power of a prefix operator, if any."""
    return PREFIX_POWER.get(op)


__all__ = [
    "ATOM_KINDS",
    "BOOL_WORDS",
    "COMMENT_MARKER",
    "DO_TAG",
    "INFIX_POWER",
    "KEYWORDS",
    "LIST_TAG",
    "MULTI_CHAR_OPERATORS",
    "NUMBER_PATTERN",
    "OPERATOR_KIND",
    "PARAMS_TAG",
    "PREFIX_POWER",
    "PUNCTUATION",
    "SEQ_TAG",
    "TABLE_TAG",
    "TEXT_PATTERN",
    "UNIT_WORD",
    "infix_power",
    "prefix_power",
]
