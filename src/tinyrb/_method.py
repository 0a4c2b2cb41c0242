"""Method tables and dispatch.

Each class holds a plain dict from method name to `Method`. A method is either
interpreted (a parameter spec plus a body node evaluated by the evaluator) or
native (a Python callable). Lookup walks the superclass chain explicitly and
stops at the first, most specific, match.
"""

__all__ = [
    "Fixed",
    "Rest",
    "ParamSpec",
    "Method",
    "InterpretedMethod",
    "NativeMethod",
    "find_method",
    "call_method",
]

import logging
from dataclasses import dataclass

import tinyrb
from . import _error, _value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fixed:
    """Parameter binding exactly one positional argument."""
    name: str


@dataclass(frozen=True)
class Rest:
    """Trailing parameter collecting all remaining positional arguments."""
    name: str


class ParamSpec:
    """Ordered parameter specification for a method.

    At most one `Rest` entry is allowed, and only in the last position.
    Parameter names must be unique.

    Args:
        entries: Sequence of Fixed and Rest entries

    Raises:
        ValueError: If a Rest entry is misplaced or repeated, or a name repeats
    """

    __slots__ = ("entries", "fixed", "rest")

    def __init__(self, entries=()):
        entries = tuple(entries)
        seen = set()
        for i, entry in enumerate(entries):
            if not isinstance(entry, (Fixed, Rest)):
                raise TypeError(f"Parameter entries must be Fixed or Rest, got {entry!r}")
            if isinstance(entry, Rest) and i != len(entries) - 1:
                raise ValueError(f"Rest parameter *{entry.name} must be last")
            if entry.name in seen:
                raise ValueError(f"Duplicated parameter name {entry.name!r}")
            seen.add(entry.name)
        self.entries = entries
        self.fixed = [e for e in entries if isinstance(e, Fixed)]
        self.rest = entries[-1] if entries and isinstance(entries[-1], Rest) else None

    @classmethod
    def from_node(cls, node) -> "ParamSpec":
        """Build from a `params` node of `fixed`/`rest` entries.

        Args:
            node: ("params", ("fixed", "a"), ("rest", "b")) or None

        Returns:
            ParamSpec instance
        """
        if node is None:
            return cls()
        if not node or node[0] != "params":
            raise ValueError(f"Expected params node, got {node!r}")
        entries = []
        for entry in node[1:]:
            match entry[0]:
                case "fixed":
                    entries.append(Fixed(entry[1]))
                case "rest":
                    entries.append(Rest(entry[1]))
                case _:
                    raise ValueError(f"Unknown parameter kind {entry[0]!r}")
        return cls(entries)

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def bind(self, args, method_name="method") -> dict:
        """Bind positional arguments to parameter names.

        Fixed entries take one argument each in order. A trailing Rest entry
        takes all the remaining arguments as a list, possibly empty.

        Args:
            args: Sequence of argument Values
            method_name: Name used in the error message

        Returns:
            Dict of parameter name to Value (list of Values for Rest)

        Raises:
            ArityMismatch: Too few arguments, or too many without a Rest entry
        """
        count = len(self.fixed)
        if len(args) < count or (self.rest is None and len(args) > count):
            expected = f"{count}+" if self.rest else str(count)
            raise _error.ArityMismatch(
                f"wrong number of arguments for '{method_name}' "
                f"(given {len(args)}, expected {expected})")

        bound = {entry.name: arg for entry, arg in zip(self.fixed, args)}
        if self.rest is not None:
            bound[self.rest.name] = list(args[count:])
        return bound

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        parts = [e.name if isinstance(e, Fixed) else f"*{e.name}" for e in self.entries]
        return f"ParamSpec({', '.join(parts)})"


class Method:
    """Base class for entries in a method table.

    Args:
        name: (str) Method name
        params: (ParamSpec) Parameter specification
    """

    def __init__(self, name: str, params: ParamSpec):
        self.name = name
        self.params = params

    def invoke(self, interp, frame):
        """Run the method body with `frame` already active.

        Args:
            interp: The running Interp
            frame: Frame holding self and the bound parameters

        Returns:
            Value result
        """
        raise NotImplementedError(f"Method {self.name} must implement invoke")

    def __repr__(self):
        return f"Method({self.name})"


class InterpretedMethod(Method):
    """Method defined in the program, with a body node to evaluate."""

    def __init__(self, name: str, params: ParamSpec, body):
        super().__init__(name, params)
        self.body = body

    def invoke(self, interp, frame):
        return tinyrb.evaluate(self.body, interp)

    def __repr__(self):
        return f"InterpretedMethod({self.name}, {self.params!r})"


class NativeMethod(Method):
    """Method implemented in Python.

    The handler receives `(interp, receiver, *args)` where args follow the
    parameter spec order, a Rest parameter arriving as a single host list
    taken from the bound Array.
    """

    def __init__(self, name: str, params: ParamSpec, handler):
        super().__init__(name, params)
        self.handler = handler

    def invoke(self, interp, frame):
        args = [frame.locals[entry.name] for entry in self.params.fixed]
        if self.params.rest is not None:
            args.append(frame.locals[self.params.rest.name].payload)
        return self.handler(interp, frame.self_value, *args)

    def __repr__(self):
        return f"NativeMethod({self.name})"


def find_method(receiver: _value.Value, name: str) -> Method:
    """Find the most specific method for a receiver.

    Args:
        receiver: Value receiving the message
        name: Method name

    Returns:
        The Method found on the receiver's class or nearest ancestor

    Raises:
        NoMethodError: No class in the chain defines the name, or the
            receiver is host data rather than a Value
    """
    if not isinstance(receiver, _value.Value):
        raise _error.NoMethodError(name, receiver)
    cls = receiver.cls
    while cls is not None:
        method = cls.methods.get(name)
        if method is not None:
            logger.debug("resolved %s#%s for %r", cls.name, name, receiver)
            return method
        cls = cls.superclass
    raise _error.NoMethodError(name, receiver)


def call_method(interp, receiver: _value.Value, method: Method, args) -> _value.Value:
    """Invoke a method on a receiver inside a fresh frame.

    A Rest parameter is bound as an Array value holding the extra arguments.

    Args:
        interp: The running Interp
        receiver: Value that becomes self
        method: Method to run
        args: Sequence of argument Values

    Returns:
        Value result of the body or handler
    """
    bound = method.params.bind(args, method.name)
    rest = method.params.rest
    if rest is not None:
        bound[rest.name] = interp.classes.new_array(bound[rest.name])
    with interp.stack.frame(receiver, bound) as frame:
        return method.invoke(interp, frame)
