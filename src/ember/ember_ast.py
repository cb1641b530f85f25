"""
Defines the syntax tree produced by the Ember parser.

Classes:
    Atom:
        A leaf: a literal or an identifier, carrying the lexeme and its kind
        (``number``, ``bool``, ``unit``, ``text`` or ``id``).

    Cons:
        A compound node: a tag (an operator lexeme or a construct name such as
        ``do``, ``if``, ``match``, ``case``, ``list``, ``table``, ``params``)
        and an ordered tuple of children.

    Call:
        Function application. Keeps the callee subtree and the argument tuple;
        the arguments render wrapped in a ``params`` node.

    ExprDict:
        TypedDict shape of `to_dict()` output, suitable for JSON.

Nodes are built bottom-up by the parser and never change afterwards: children
are stored as tuples and attribute assignment after construction raises
`AttributeError`.

Every node renders as a fully parenthesized prefix form through `str()`:

    >>> str(Cons("+", [Atom("1", "number"), Atom("2", "number")]))
    '(+ 1 2)'
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypedDict, Union

from ember.ember_constants import PARAMS_TAG


class ExprDict(TypedDict, total=False):
    """
    TypedDict representation of a tree node used for serialization.

    Fields:
        node (str): ``atom``, ``cons`` or ``call``.
        text (str): Lexeme of an atom.
        kind (str): Atom kind.
        tag (str): Tag of a compound node.
        children (list[ExprDict]): Children of a compound node.
        callee (ExprDict): Callee of a call.
        args (list[ExprDict]): Arguments of a call.
    """

    node: str
    text: str
    kind: str
    tag: str
    children: list["ExprDict"]
    callee: "ExprDict"
    args: list["ExprDict"]


class _Frozen:
    """Rejects attribute assignment once `__init__` has finished."""

    __slots__ = ("_sealed",)

    def _seal(self) -> None:
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{type(self).__name__} nodes are immutable")
        object.__setattr__(self, name, value)


class Atom(_Frozen):
    """A literal or identifier leaf."""

    __slots__ = ("text", "kind")

    def __init__(self, text: str, kind: str) -> None:
        self.text = text
        self.kind = kind
        self._seal()

    def __repr__(self) -> str:
        return f"Atom({self.text!r}, {self.kind!r})"

    def __str__(self) -> str:
        return self.text

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Atom)
            and self.text == other.text
            and self.kind == other.kind
        )

    def __hash__(self) -> int:
        return hash(("atom", self.text, self.kind))

    def to_dict(self) -> ExprDict:
        return {"node": "atom", "text": self.text, "kind": self.kind}


class Cons(_Frozen):
    """A tagged compound node with ordered children."""

    __slots__ = ("tag", "children")

    def __init__(self, tag: str, children: Iterable["Expr"] = ()) -> None:
        self.tag = tag
        self.children: tuple[Expr, ...] = tuple(children)
        self._seal()

    def __repr__(self) -> str:
        if not self.children:
            return f"Cons({self.tag!r})"
        preview = ", ".join(repr(c) for c in self.children[:3])
        if len(self.children) > 3:
            preview += ", ..."
        return f"Cons({self.tag!r}, [{preview}])"

    def __str__(self) -> str:
        return "".join(["(", self.tag, *(f" {c}" for c in self.children), ")"])

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Cons)
            and self.tag == other.tag
            and self.children == other.children
        )

    def __hash__(self) -> int:
        return hash(("cons", self.tag, self.children))

    def to_dict(self) -> ExprDict:
        return {
            "node": "cons",
            "tag": self.tag,
            "children": [c.to_dict() for c in self.children],
        }


class Call(_Frozen):
    """Function application: `callee(args...)`.

    Renders as ``(<callee> (params arg ...))``, the callee in its own rendered
    form, so ``f(1)`` prints ``(f (params 1))`` and ``a.b(1)`` prints
    ``((. a b) (params 1))``.
    """

    __slots__ = ("callee", "args")

    def __init__(self, callee: "Expr", args: Iterable["Expr"] = ()) -> None:
        self.callee = callee
        self.args: tuple[Expr, ...] = tuple(args)
        self._seal()

    @property
    def tag(self) -> str:
        """The rendered callee, the label this node prints under."""
        return str(self.callee)

    @property
    def params(self) -> Cons:
        """The argument list as the ``params`` node it renders as."""
        return Cons(PARAMS_TAG, self.args)

    def __repr__(self) -> str:
        return f"Call({self.callee!r}, {list(self.args)!r})"

    def __str__(self) -> str:
        return f"({self.tag} {self.params})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Call)
            and self.callee == other.callee
            and self.args == other.args
        )

    def __hash__(self) -> int:
        return hash(("call", self.callee, self.args))

    def to_dict(self) -> ExprDict:
        return {
            "node": "call",
            "callee": self.callee.to_dict(),
            "args": [a.to_dict() for a in self.args],
        }


Expr = Union[Atom, Cons, Call]
"""Any syntax tree node."""


__all__ = ["Atom", "Call", "Cons", "Expr", "ExprDict"]
