from typing import Any, Optional

from oruspad.lexer import Position


class OrusError(Exception):
    """Base class for every error the simulator reports to the editor."""
    kind = 'Error'

    def __init__(self, message: str, position: Optional[Position] = None):
        super().__init__(f"{self.kind}: {message}")
        self.message = message
        self.position = position


class OrusSyntaxError(OrusError):
    kind = 'SyntaxError'

    def __init__(self, expected: str, found: str, position: Optional[Position] = None,
                 message: Optional[str] = None):
        super().__init__(message or f"expected {expected}, found {found}", position)
        self.expected = expected
        self.found = found


class MissingMainError(OrusError):
    kind = 'MissingMainError'


class OrusNameError(OrusError):
    kind = 'NameError'


class RedeclarationError(OrusError):
    kind = 'RedeclarationError'


class TypeMismatch(OrusError):
    kind = 'TypeMismatch'


class DivisionByZero(OrusError):
    kind = 'DivisionByZero'


class IndexOutOfRange(OrusError):
    kind = 'IndexError'


class ResourceExhausted(OrusError):
    kind = 'ResourceExhausted'


class Cancelled(OrusError):
    kind = 'Cancelled'


class ReturnSignal(Exception):
    """Internal exception to handle return statements in functions."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value


class BreakSignal(Exception):
    """Internal exception unwinding to the innermost loop on `break`."""


class ContinueSignal(Exception):
    """Internal exception skipping to the next loop iteration on `continue`."""
