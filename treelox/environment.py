from typing import Any, Dict, Optional

from treelox.errors import UndefinedVariable
from treelox.tokens import Token


class Environment:
    """A scope mapping variable names to values, linked to its enclosing scope."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        # Redeclaring in the same scope simply replaces the old binding
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.parent is not None:
            return self.parent.get(name)
        raise UndefinedVariable(name)

    def assign(self, name: Token, value: Any) -> Any:
        # Assignment never declares: the name must already be bound somewhere up the chain
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return value
        if self.parent is not None:
            return self.parent.assign(name, value)
        raise UndefinedVariable(name)

    def depth(self) -> int:
        """Number of enclosing scopes above this one."""
        return 0 if self.parent is None else self.parent.depth() + 1

    def __contains__(self, name: str) -> bool:
        return name in self.values or (self.parent is not None and name in self.parent)
