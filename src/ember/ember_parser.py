"""
Ember Language Parser

Parses Ember source into the uniform `Atom` / `Cons` / `Call` tree.

The parser is a recursive-descent, precedence-climbing ("Pratt") expression
parser. It pulls tokens from a `Lexer` one at a time through `peek`/`next`,
never rewinds, and never holds more than one token of lookahead. Composite
forms are built by small production methods that interleave calls to
`parse_expr` with the consumption of expected separator keywords.

Supported Constructs
--------------------
- Literals and identifiers: `42`, `1.5`, `true`, `unit`, `"text"`, `name`
- Prefix operators: `-x`, `not x`, `var x = 1`
- Infix operators: `=`, `:`, `to`, `or`, `xor`, `and`, `==`, `<`, `>`, `<=`,
  `>=`, `+`, `-`, `*`, `/`, `.` and calls `f(a, b)`
- Grouping and sequences: `(a)`, `(a, b)`
- Collections: `[a, b]`, `{a, b}`
- Blocks: `do ... end`
- Conditionals: `if c then ... else ... end`
- Pattern matching: `match x with if p then e ... end`
- Loops: `loop ... end`, `break`
- Function literals: `function (a, b) ... end`

Entry Points
------------
- `parse()`: Parse a whole program and report success explicitly (`ParseResult`).
- `parse_expression()`: Parse exactly one expression or raise.
- `Parser.parse_program()` / `Parser.parse_expr()`: The raising building blocks.

Raises
------
ParseError
    Recoverable syntactic failure: a token where no production expects one, or
    a required separator missing at end of input, or nesting deeper than the
    interpreter stack allows.
LexError
    Fatal lexical failure, propagated unchanged from the lexer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from ember.ember_ast import Atom, Call, Cons, Expr
from ember.ember_constants import (
    DO_TAG,
    LIST_TAG,
    PARAMS_TAG,
    SEQ_TAG,
    TABLE_TAG,
    infix_power,
    prefix_power,
)
from ember.ember_lexer import CharacterStream, Lexer, Token

logger = logging.getLogger(__name__)


class ParseError(SyntaxError):
    """Recoverable syntactic failure.

    Attributes
    ----------
    token : Token | None
        The offending token, or None when input ran out.
    expected : tuple[str, ...]
        Lexemes that would have been accepted, when known.
    at_eof : bool
        True when the failure is caused by running out of input. The REPL uses
        this to ask for a continuation line.
    """

    def __init__(
        self,
        message: str,
        token: Token | None = None,
        expected: Iterable[str] = (),
    ) -> None:
        if token is not None:
            message = f"{message} at line {token.line}, col {token.col}"
        super().__init__(message)
        self.token = token
        self.expected = tuple(expected)
        self.at_eof = token is None


class ParseResult:
    """Outcome of `parse()`.

    `tree` is always the `do` node of the top-level expressions recognized so
    far. It is only a complete program when `ok` is True; after a failure it
    is the partial tree preceding the offending token and `error` says why.
    """

    def __init__(self, tree: Cons, error: ParseError | None = None) -> None:
        self.tree = tree
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        status = "ok" if self.ok else f"error={str(self.error)!r}"
        return f"ParseResult({self.tree}, {status})"


class Parser:
    """
    Ember Parser Class

    Consumes tokens from a `Lexer` and builds the syntax tree.

    Attributes
    ----------
    lexer : Lexer
        The token source. The parser owns it for the duration of one parse.
    primary_handlers : dict[str, Callable[[], Expr]]
        Productions for keywords and brackets that open a primary expression.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.primary_handlers: dict[str, Callable[[], Expr]] = {
            "(": self.parse_group,
            "[": self.parse_list,
            "{": self.parse_table,
            "do": self.parse_do,
            "if": self.parse_if,
            "match": self.parse_match,
            "loop": self.parse_loop,
            "break": self.parse_break,
            "function": self.parse_function,
        }

    @classmethod
    def from_source(cls, source: str) -> Parser:
        return cls(Lexer(CharacterStream(source)))

    # Token helpers

    def check(self, *texts: str) -> bool:
        """True if the upcoming token is an operator whose text is one of `texts`."""
        tok = self.lexer.peek()
        return tok is not None and tok.is_operator and tok.text in texts

    def expect(self, *texts: str) -> Token:
        """Consumes a required separator or terminator keyword."""
        tok = self.lexer.peek()
        if tok is None or not self.check(*texts):
            wanted = " or ".join(repr(t) for t in texts)
            found = "end of input" if tok is None else repr(tok.text)
            raise ParseError(f"Expected {wanted}, found {found}", tok, texts)
        self.lexer.next()
        return tok

    def at_end(self) -> bool:
        return self.lexer.peek() is None

    # Program

    def iter_program(self) -> Iterator[Expr]:
        """Yields top-level expressions until the input is exhausted."""
        while not self.at_end():
            yield self.parse_expr()

    def parse_program(self) -> Cons:
        """Parse a whole program into a top-level `do` node."""
        return Cons(DO_TAG, self.iter_program())

    # Expression engine

    def parse_expr(self, min_power: int = 0) -> Expr:
        """Parse one expression whose infix operators bind at least `min_power`."""
        left = self.parse_primary()

        while True:
            tok = self.lexer.peek()
            if tok is None or not tok.is_operator:
                break
            power = infix_power(tok.text)
            if power is None:
                break
            left_power, right_power = power
            if left_power < min_power:
                break
            self.lexer.next()

            if tok.text == "(":
                left = self.parse_call(left)
            else:
                left = Cons(tok.text, [left, self.parse_expr(right_power)])

        return left

    def parse_primary(self) -> Expr:
        """Consume one token and build the initial left-hand subtree."""
        tok = self.lexer.next()
        if tok is None:
            raise ParseError("Unexpected end of input")

        if tok.is_atom:
            return Atom(tok.text, tok.kind)

        power = prefix_power(tok.text)
        if power is not None:
            return Cons(tok.text, [self.parse_expr(power)])

        handler = self.primary_handlers.get(tok.text)
        if handler is None:
            raise ParseError(f"Unexpected token {tok.text!r}", tok)
        logger.debug("parsing %r at line %d, col %d", tok.text, tok.line, tok.col)
        return handler()

    def parse_call(self, callee: Expr) -> Call:
        """Parse call arguments after an already consumed `(`."""
        args = self.parse_comma_list(PARAMS_TAG, ")")
        self.expect(")")
        return Call(callee, args.children)

    # Productions

    def parse_block(self, terminators: Iterable[str]) -> Cons:
        """Parse expressions until a terminator is upcoming or input runs out.

        The terminator itself is left for the caller to consume.
        """
        terminators = tuple(terminators)
        items: list[Expr] = []
        while not self.at_end() and not self.check(*terminators):
            items.append(self.parse_expr())
        return Cons(DO_TAG, items)

    def parse_comma_list(self, tag: str, close: str) -> Cons:
        """Parse `expr (, expr)*`, or nothing when `close` is upcoming.

        The closing delimiter is left for the caller to consume.
        """
        items: list[Expr] = []
        if not self.check(close):
            items.append(self.parse_expr())
            while self.check(","):
                self.lexer.next()
                items.append(self.parse_expr())
        return Cons(tag, items)

    def parse_group(self) -> Expr:
        """`( ... )`: a grouped expression, or a `seq` of several."""
        seq = self.parse_comma_list(SEQ_TAG, ")")
        self.expect(")")
        if len(seq.children) == 1:
            return seq.children[0]
        return seq

    def parse_list(self) -> Cons:
        items = self.parse_comma_list(LIST_TAG, "]")
        self.expect("]")
        return items

    def parse_table(self) -> Cons:
        items = self.parse_comma_list(TABLE_TAG, "}")
        self.expect("}")
        return items

    def parse_do(self) -> Cons:
        body = self.parse_block(["end"])
        self.expect("end")
        return body

    def parse_if(self) -> Cons:
        """`if cond then ... [else ...] end` -> `(if cond (do ...) [(do ...)])`."""
        cond = self.parse_expr()
        self.expect("then")
        children = [cond, self.parse_block(["else", "end"])]
        if self.check("else"):
            self.lexer.next()
            children.append(self.parse_block(["end"]))
        self.expect("end")
        return Cons("if", children)

    def parse_match(self) -> Cons:
        """`match x with (if p then e)* end` -> `(match x (with (case p e) ...))`."""
        scrutinee = self.parse_expr()
        self.expect("with")
        arms: list[Expr] = []
        while not self.at_end() and not self.check("end"):
            arms.append(self.parse_match_arm())
        self.expect("end")
        return Cons("match", [scrutinee, Cons("with", arms)])

    def parse_match_arm(self) -> Cons:
        self.expect("if")
        pattern = self.parse_expr()
        self.expect("then")
        body = self.parse_expr()
        return Cons("case", [pattern, body])

    def parse_loop(self) -> Cons:
        body = self.parse_block(["end"])
        self.expect("end")
        return Cons("loop", [body])

    def parse_break(self) -> Cons:
        return Cons("break")

    def parse_function(self) -> Cons:
        """`function (a, b) ... end` -> `(function (params a b) (do ...))`.

        A parameter part not wrapped in parentheses is an ordinary expression.
        """
        if self.check("("):
            self.lexer.next()
            params: Expr = self.parse_comma_list(PARAMS_TAG, ")")
            self.expect(")")
        else:
            params = self.parse_expr()
        body = self.parse_block(["end"])
        self.expect("end")
        return Cons("function", [params, body])


def nesting_error(parser: Parser) -> ParseError:
    """The failure reported when input nests deeper than the interpreter stack.

    `at_eof` is always False: more input cannot fix it.
    """
    error = ParseError("Expression nested too deeply", parser.lexer.peek())
    error.at_eof = False
    return error


def parse(source: str) -> ParseResult:
    """Parse a whole program, reporting syntactic failure as a value.

    Raises:
        LexError: On a character the lexer cannot classify. Lexical failure is
            fatal and is not turned into a `ParseResult`.
    """
    parser = Parser.from_source(source)
    items: list[Expr] = []
    try:
        for expr in parser.iter_program():
            items.append(expr)
    except ParseError as e:
        error = e
    except RecursionError:
        error = nesting_error(parser)
    else:
        return ParseResult(Cons(DO_TAG, items))
    logger.warning("unexpected token: %s", error)
    return ParseResult(Cons(DO_TAG, items), error)


def parse_expression(source: str) -> Expr:
    """Parse exactly one expression.

    Raises:
        ParseError: If the expression is malformed, nests too deeply, or
            tokens remain after it.
    """
    parser = Parser.from_source(source)
    try:
        expr = parser.parse_expr()
    except RecursionError:
        raise nesting_error(parser) from None
    trailing = parser.lexer.peek()
    if trailing is not None:
        raise ParseError(f"Unexpected trailing token {trailing.text!r}", trailing)
    return expr


__all__ = [
    "ParseError",
    "ParseResult",
    "Parser",
    "nesting_error",
    "parse",
    "parse_expression",
]
