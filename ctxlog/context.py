from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class _NoKey:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<no key>"


_NO_KEY = _NoKey()


@dataclass(frozen=True, eq=False)
class Context:
    """Immutable request-scoped carrier of key/value pairs.

    Every ``with_value`` returns a new child node pointing at its parent; no node
    is ever changed after creation, so any number of threads or tasks can derive
    from the same node without coordination.
    """

    parent: Context | None = None
    _key: Any = _NO_KEY
    _value: Any = None

    @staticmethod
    def background() -> Context:
        return _BACKGROUND

    def with_value(self, key: Any, value: Any) -> Context:
        if key is None:
            raise TypeError("context key must not be None")
        return Context(parent=self, _key=key, _value=value)

    def value(self, key: Any, default: Any = None) -> Any:
        node: Context | None = self
        while node is not None:
            if node._key is not _NO_KEY and node._key == key:
                return node._value
            node = node.parent
        return default

    def __repr__(self) -> str:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return f"Context(depth={depth})"


_BACKGROUND = Context()
