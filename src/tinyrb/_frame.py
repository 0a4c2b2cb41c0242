"""Binding stack for call frames.

Each frame is the active execution context: the receiver ("self") and the
local variables. Frames are pushed when entering a class body or a method
call and popped when leaving it. Only the top frame is visible to evaluation,
there is no dynamic scoping across frames.
"""

__all__ = ["Frame", "BindingStack"]

import logging
from contextlib import contextmanager

from . import _value

logger = logging.getLogger(__name__)


class Frame:
    """One entry on the binding stack.

    Args:
        self_value: (Value) Receiver for this frame
        locals: (dict | None) Initial local bindings
    """

    __slots__ = ("self_value", "locals")

    def __init__(self, self_value: _value.Value, locals: dict | None = None):
        self.self_value = self_value
        self.locals = locals if locals is not None else {}

    def get_local(self, name: str) -> _value.Value:
        """Read a local, nil when unbound."""
        return self.locals.get(name, _value.NIL)

    def set_local(self, name: str, value: _value.Value) -> _value.Value:
        self.locals[name] = value
        return value

    def __repr__(self):
        return f"Frame(self={self.self_value!r}, locals={list(self.locals)})"


class BindingStack:
    """Stack of frames, never empty once created.

    Args:
        main: (Value) Receiver of the top-level frame
    """

    def __init__(self, main: _value.Value):
        self._frames = [Frame(main)]

    @property
    def top(self) -> Frame:
        return self._frames[-1]

    @property
    def depth(self) -> int:
        return len(self._frames)

    @contextmanager
    def frame(self, self_value: _value.Value, locals: dict | None = None):
        """Push a frame for the duration of the block.

        Examples:
            with stack.frame(cls):
                result = evaluate(body, interp)

        Args:
            self_value: Receiver for the new frame
            locals: Initial local bindings (usually bound method arguments)

        Yields:
            The new Frame
        """
        frame = Frame(self_value, locals)
        self._frames.append(frame)
        logger.debug("push frame depth=%d self=%r", len(self._frames), self_value)
        try:
            yield frame
        finally:
            # Pop even when evaluation fails part way through
            self._frames.pop()
            logger.debug("pop frame depth=%d", len(self._frames))

    def __len__(self):
        return len(self._frames)

    def __repr__(self):
        return f"BindingStack(depth={len(self._frames)})"
