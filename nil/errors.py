from typing import Any, Optional, Sequence, Tuple


class NilError(Exception):
    """Base class for every error raised while lexing, parsing or evaluating nil."""
    name = 'NilError'

    def __init__(self, message: str, span: Optional[Tuple[int, int]] = None):
        super().__init__(f"{self.name}: {message}")
        self.message = message
        self.span = span


class LexError(NilError):
    """Raised when the input contains a character no token starts with."""
    name = 'LexError'

    def __init__(self, position: int, char: str, message: Optional[str] = None):
        if message is None:
            message = f"unexpected character {char!r} at offset {position}"
        super().__init__(message, (position, position + 1))
        self.position = position
        self.char = char


class ParseError(NilError):
    name = 'ParseError'

    def __init__(self, position: int, expected: Sequence[str], found: str):
        wanted = ', '.join(sorted(expected)) if expected else 'nothing'
        super().__init__(f"expected {wanted} at offset {position}, found {found}", (position, position))
        self.position = position
        self.expected = tuple(sorted(expected))
        self.found = found


class UnresolvedIdentifier(NilError):
    name = 'UnresolvedIdentifier'

    def __init__(self, ident: str, span: Optional[Tuple[int, int]] = None):
        super().__init__(f"undefined name {ident}", span)
        self.ident = ident


class NilTypeError(NilError):
    """A value or binding of the wrong kind was used.

    `expected` and `actual` are kind names such as 'Integer', 'Boolean' or
    'Type'.
    """
    name = 'TypeError'

    def __init__(self, context: str, expected: str, actual: str,
                 span: Optional[Tuple[int, int]] = None):
        super().__init__(f"{context}: expected {expected}, got {actual}", span)
        self.context = context
        self.expected = expected
        self.actual = actual


class DivisionByZero(NilError):
    name = 'DivisionByZero'

    def __init__(self, operator: str, span: Optional[Tuple[int, int]] = None):
        verb = 'modulo' if operator == '%' else 'division'
        super().__init__(f"{verb} by zero", span)
        self.operator = operator


class NilOverflowError(NilError):
    name = 'OverflowError'

    def __init__(self, operation: str, operands: Tuple[Any, ...],
                 span: Optional[Tuple[int, int]] = None):
        shown = f" {operation} ".join(str(o) for o in operands)
        super().__init__(f"integer overflow in {shown}", span)
        self.operation = operation
        self.operands = operands


class UnsizedTypeError(NilError):
    """Raised when size, align or len is requested for a type with no fixed layout."""
    name = 'UnsizedTypeError'

    def __init__(self, ty: Any, request: str, span: Optional[Tuple[int, int]] = None):
        super().__init__(f"{request} of unsized type {ty}", span)
        self.ty = ty
        self.request = request
