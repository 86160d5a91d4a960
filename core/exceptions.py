"""
Error types raised while compiling a call sequence.

Every error aborts the whole compilation; no partial document is returned.
"""

from typing import Optional


class Step2CodeError(Exception):
    """Base class for all compilation errors."""


class MalformedSignature(Step2CodeError):
    """A function signature string could not be tokenized."""

    def __init__(self, signature: str, reason: str = "invalid function string"):
        self.signature = signature
        self.reason = reason
        super().__init__(f"Malformed signature {signature!r}: {reason}")


class UnknownVariable(Step2CodeError, KeyError):
    """A variable was referenced before being defined."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Variable {self.name} does not exist."


class InvalidOutputMapping(Step2CodeError):
    """More output captures were requested than the function returns."""

    def __init__(self, signature: str, requested: int, declared: int):
        self.signature = signature
        self.requested = requested
        self.declared = declared
        super().__init__(
            f"Invalid output mappings for {signature!r}: "
            f"{requested} requested but only {declared} return type(s) declared"
        )


class SequenceFormatError(Step2CodeError):
    """The sequence document does not have the expected structure."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
