from dataclasses import dataclass
from typing import Any, Callable, List, Optional


@dataclass(frozen=True)
class BuiltinFunction:
    name: str
    arity: Optional[int]
    fn: Callable[[List[Any]], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
