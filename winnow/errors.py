from typing import Optional


class WinnowError(Exception):
    pass

class ParseError(WinnowError):
    """Raised when script text does not match the record grammar."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column

class SemanticError(WinnowError):
    """Raised when a well-formed script describes an unusable node graph."""
    pass

class RuntimeFlowError(WinnowError):
    pass

class InputExhaustedError(RuntimeFlowError):
    """Raised when the input source closes while a node is waiting for an answer."""
    pass

class InvalidChoice(WinnowError):
    """Raised for a branching answer that does not select an option.

    Never escapes the runtime step loop.
    """
    pass
