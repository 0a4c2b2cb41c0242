"""Error classes and helpers"""

__all__ = [
    "EvalError",
    "UnhandledNodeKind",
    "UnresolvedConstant",
    "NoMethodError",
    "ArityMismatch",
    "TypeMismatch",
    "ParseError",
]

from . import _value


class EvalError(Exception):
    """Error raised while evaluating a program. Always fatal to the run."""


class UnhandledNodeKind(EvalError):
    """Evaluator reached a node tag it does not support.

    Args:
        node: The offending node
    """

    def __init__(self, node):
        self.node = node
        kind = node[0] if node else None
        super().__init__(f"Unhandled node kind: {kind!r}")


class UnresolvedConstant(EvalError):
    """Constant lookup missed.

    Args:
        name: (str) Qualified constant name, like "A::B"
    """

    def __init__(self, name):
        self.name = name
        super().__init__(f"uninitialized constant {name}")


class NoMethodError(EvalError):
    """Method lookup exhausted the superclass chain.

    Args:
        name: (str) Method name that was sent
        receiver: (Value) Receiver of the send
    """

    def __init__(self, name, receiver):
        self.name = name
        self.receiver = receiver
        super().__init__(f"undefined method '{name}' for {_value.describe(receiver)}")


class ArityMismatch(EvalError):
    """Argument count disagrees with a method's parameters."""


class TypeMismatch(EvalError):
    """Value has the wrong kind for the operation."""


class ParseError(Exception):
    """Exception raised for parsing errors.

    Args:
        message: (str) Error description
        position: (tuple | None) Optional (line, column) where error occurred

    Attributes:
        message: (str) Error description
        position: (tuple | None) (line, column) where error occurred
    """

    def __init__(self, message, position=None):
        self.message = message
        self.position = position
        if position:
            message = f"{message} (line {position[0]}, column {position[1]})"
        super().__init__(message)
