"""Interpreter state for one program run.

The interpreter holds everything a run mutates: the class graph with its
constant tables, the binding stack, and the output sink. It is passed
explicitly to the evaluator, to dispatch, and to native methods. Create one
per program run and discard it afterwards.
"""

__all__ = ["Interp", "run"]

import sys

import tinyrb
from . import ast, _classes, _eval, _frame, _method, _value


class Interp:
    """Interpreter and state for tinyrb.

    Args:
        output: Text sink with a `write(str)` method, defaults to sys.stdout

    Attributes:
        classes: (ClassGraph) Bootstrap classes and constant tables
        main: (Object) Receiver of the top-level frame
        stack: (BindingStack) Active frames
    """

    def __init__(self, output=None):
        self.output = output if output is not None else sys.stdout
        self.classes = _classes.ClassGraph()
        self.main = _value.Object(self.classes.root)
        self.stack = _frame.BindingStack(self.main)

    def evaluate(self, node) -> _value.Value:
        """Evaluate a node in the current frame."""
        return _eval.evaluate(node, self)

    def send(self, receiver: _value.Value, name: str, args=()) -> _value.Value:
        """Dispatch a message to a receiver.

        Args:
            receiver: Value receiving the message
            name: Method name
            args: Sequence of argument Values

        Returns:
            Value result of the method

        Raises:
            NoMethodError: Nothing in the receiver's class chain answers `name`
        """
        method = _method.find_method(receiver, name)
        return _method.call_method(self, receiver, method, list(args))

    def execute(self, source: str) -> _value.Value:
        """Parse source text and evaluate it."""
        return self.evaluate(tinyrb.parse(source))

    def lookup_constant(self, *path) -> _value.Value:
        """Resolve a constant path from Python, like lookup_constant("A", "B")."""
        return _eval.resolve_constant(ast.const(*path), self)

    def __repr__(self):
        return f"Interp<depth={self.stack.depth}>"


def run(source: str, output=None) -> Interp:
    """Parse and run a program in a new interpreter.

    Args:
        source: Program source text
        output: Text sink, defaults to sys.stdout

    Returns:
        The Interp after the run, for inspecting classes and state
    """
    interp = Interp(output)
    interp.execute(source)
    return interp
