"""
Renders Ember trees as JSON built from each node's `to_dict()`.

A single emitted tree becomes one JSON object; several become a JSON array.
"""

import json

from ember.ember_ast import Atom, Call, Cons, ExprDict


class JsonEmitter:
    """Emits JSON text from Ember trees.

    Attributes:
        trees (list[ExprDict]): Serialized form of every emitted tree.
        indent (bool): Pretty-print with two-space indentation.
    """

    def __init__(self, indent: bool = False) -> None:
        self.trees: list[ExprDict] = []
        self.indent = indent

    def get_output(self) -> str:
        payload = self.trees[0] if len(self.trees) == 1 else self.trees
        return json.dumps(payload, indent=2 if self.indent else None, ensure_ascii=False)

    def emit_atom(self, node: Atom) -> None:
        self.trees.append(node.to_dict())

    def emit_cons(self, node: Cons) -> None:
        self.trees.append(node.to_dict())

    def emit_call(self, node: Call) -> None:
        self.trees.append(node.to_dict())
