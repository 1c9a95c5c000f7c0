"""Lexical scopes for the wthr interpreter.

An Environment maps names to values and links to an optional `outer`
environment. Lookup walks the chain from innermost to outermost; definition
always binds in the environment it is called on, so an inner binding shadows
an outer one without touching it.
"""

from typing import Dict, Iterator, Optional

from .errors import UndefinedVariable


class Environment:
    """Hierarchical mapping from names to runtime values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional["Environment"] = None):
        self.vars: Dict[str, object] = {}
        self.outer: Optional[Environment] = outer

    def define(self, name: str, value) -> None:
        """Bind (or rebind) `name` in this environment only."""
        self.vars[name] = value

    def find(self, name: str) -> Optional["Environment"]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: str):
        """
        Return the value bound to `name` in the nearest enclosing scope.

        Raises UndefinedVariable if no scope binds it.
        """
        env = self.find(name)
        if env is None:
            raise UndefinedVariable(f"Undefined variable '{name}'")
        return env.vars[name]

    def child(self) -> "Environment":
        """Create a new scope whose parent is this one."""
        return Environment(outer=self)

    def depth(self) -> int:
        n = 0
        env = self.outer
        while env is not None:
            n += 1
            env = env.outer
        return n

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def __repr__(self) -> str:
        return f"Environment(names={sorted(self.vars)}, depth={self.depth()})"
