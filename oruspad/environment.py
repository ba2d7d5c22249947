from typing import Any, Dict, Optional

from oruspad.errors import OrusNameError, RedeclarationError
from oruspad.lexer import Position


class Environment:
    """Represents a scope environment mapping identifiers to values.

    Reads fall through to the parent chain. Writes go to the innermost
    scope that declared the name; nothing is ever created implicitly.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def child_scope(self) -> 'Environment':
        return Environment(parent=self)

    def declare(self, name: str, value: Any, position: Optional[Position] = None):
        # Shadowing an outer scope is legal; redeclaring in this one is not.
        if name in self.values:
            raise RedeclarationError(f"'{name}' is already declared in this scope", position)
        self.values[name] = value

    def get(self, name: str, position: Optional[Position] = None) -> Any:
        env = self._owner(name)
        if env is None:
            raise OrusNameError(f"undefined variable '{name}'", position)
        return env.values[name]

    def set(self, name: str, value: Any, position: Optional[Position] = None):
        env = self._owner(name)
        if env is None:
            raise OrusNameError(f"cannot assign to undeclared variable '{name}'", position)
        env.values[name] = value

    def lookup(self, name: str) -> Optional[Any]:
        env = self._owner(name)
        return env.values[name] if env is not None else None

    def bindings(self) -> Dict[str, Any]:
        """This scope's own bindings, in declaration order."""
        return dict(self.values)

    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth() + 1

    def _owner(self, name: str) -> Optional['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None
