"""
Renders Ember trees as fully parenthesized prefix text (S-expressions).

This is the display format of the parser's output: an atom renders as its
lexeme, a compound node as `(tag child1 child2 ... childN)` with single spaces
and no trailing space before the closing parenthesis. A call renders under its
rendered callee with its arguments in a `params` node, so `f(1, 2)` prints
`(f (params 1 2))`.

With `indent=True` compound nodes that contain compound children are spread
over several lines, one child per line, indented two spaces per level:

    (do
      (= x 1)
      (if
        c
        (do t)))

The text is lossy and is not meant to be parsed back.
"""

from ember.ember_ast import Atom, Call, Cons, Expr


class SExprEmitter:
    """Emits S-expression text from Ember trees.

    Attributes:
        lines (list[str]): Accumulated output, one entry per emitted tree.
        indent (bool): Whether nested compound nodes are laid out on separate lines.
    """

    def __init__(self, indent: bool = False) -> None:
        self.lines: list[str] = []
        self.indent = indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def emit_atom(self, node: Atom) -> None:
        self.lines.append(self.emit_expr(node))

    def emit_cons(self, node: Cons) -> None:
        self.lines.append(self.emit_expr(node))

    def emit_call(self, node: Call) -> None:
        self.lines.append(self.emit_expr(node))

    def emit_expr(self, node: Expr, depth: int = 0) -> str:
        """Returns the text of one node; nested nodes are rendered recursively."""
        if isinstance(node, Atom):
            return node.text
        if isinstance(node, Call):
            head = self.emit_expr(node.callee, depth)
            children: tuple[Expr, ...] = (node.params,)
        else:
            head = node.tag
            children = node.children

        if not self.indent or all(isinstance(c, Atom) for c in children):
            parts = [head, *(self.emit_expr(c) for c in children)]
            return f"({' '.join(parts)})"

        pad = "  " * (depth + 1)
        body = "".join(f"\n{pad}{self.emit_expr(c, depth + 1)}" for c in children)
        return f"({head}{body})"
