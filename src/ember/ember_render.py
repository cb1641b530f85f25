"""
Provides the `Renderer` class and emitter interface for displaying Ember trees.

Classes and Features:
    - Emitter (Protocol): Interface for all output emitters. Requires `get_output`.
    - SExprEmitter: Canonical prefix (S-expression) text, one line per tree.
    - JsonEmitter: JSON produced from `to_dict()`.
    - Renderer: Picks the emitter for a target name (e.g. "sexpr", "json") and
      dispatches tree nodes to its `emit_*` methods.

Usage:
    The Renderer takes a list of trees and returns their rendered text.

Example:
    >>> renderer = Renderer("sexpr")
    >>> renderer.render([Cons("+", [Atom("1", "number"), Atom("2", "number")])])
    '(+ 1 2)'

Raises:
    ValueError: If the target is not supported.
    TypeError: If the input contains something that is not a tree node.
    NotImplementedError: If the emitter lacks an `emit_*` method for a node type.
"""

from typing import Protocol

from ember.ember_ast import Atom, Call, Cons, Expr
from ember.emitters.json_emitter import JsonEmitter
from ember.emitters.sexpr_emitter import SExprEmitter


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all Ember output emitters.

    Emitters receive whole trees through `emit_atom`, `emit_cons` or
    `emit_call` and accumulate their output until `get_output` is called.
    """

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[SExprEmitter] | type[JsonEmitter]
"""Alias for a concrete emitter class."""

EMITTERS: dict[str, EmitterType] = {
    "sexpr": SExprEmitter,
    "sexp": SExprEmitter,
    "json": JsonEmitter,
}


class Renderer:
    """Dispatches Ember trees to the emitter for an output target.

    Attributes:
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str = "sexpr", indent: bool = False) -> None:
        """Initializes the renderer with the desired output target.

        Args:
            target: The output format name ("sexpr", "sexp", "json").
            indent: Ask the emitter for its multi-line layout.

        Raises:
            ValueError: If the target is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown render target: {target!r}")
        self.emitter: Emitter = EMITTERS[target](indent=indent)

    def render(self, trees: list[Expr]) -> str:
        """Renders a list of trees with the selected emitter.

        Raises:
            TypeError: If any element is not an Atom, Cons or Call.
        """
        if not all(isinstance(tree, (Atom, Cons, Call)) for tree in trees):
            raise TypeError("All items to render must be Atom, Cons or Call nodes.")
        for tree in trees:
            self._visit(tree)
        return self.emitter.get_output()

    def _visit(self, node: Expr) -> None:
        """Invokes the emitter method matching the node's type.

        Raises:
            NotImplementedError: If the emitter does not support the node type.
        """
        method_name = f"emit_{type(node).__name__.lower()}"
        if hasattr(self.emitter, method_name):
            getattr(self.emitter, method_name)(node)
        else:
            raise NotImplementedError(
                f"No emitter method for node type '{type(node).__name__}'"
            )


def render(tree: Expr, target: str = "sexpr", indent: bool = False) -> str:
    """Renders a single tree."""
    return Renderer(target, indent=indent).render([tree])


__all__ = ["EMITTERS", "Emitter", "Renderer", "render"]
