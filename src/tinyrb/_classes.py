"""Class graph and bootstrap.

The graph starts from three fixed points:
- `Class`, the metaclass, whose own class is itself
- `Object`, the root class, whose class is `Class` and which has no superclass
- `String`, `Integer` and `Array`, primitive classes under `Object`

`Class` also inherits from `Object`, so class objects answer the same basic
messages as any other object. Every class chain ends at `Object`.

Built-in methods are attached by `tinyrb._builtin.install`.
"""

__all__ = ["ClassGraph"]

import logging

from . import _builtin, _error, _value

logger = logging.getLogger(__name__)


class ClassGraph:
    """All classes of one interpreter, built exactly once.

    Attributes:
        metaclass: (RClass) `Class`
        root: (RClass) `Object`, also the root namespace for constants
        string: (RClass) `String`
        integer: (RClass) `Integer`
        array: (RClass) `Array`, the value bound to rest parameters
    """

    def __init__(self):
        metaclass = _value.RClass("Class", None)
        metaclass.cls = metaclass
        root = _value.RClass("Object", metaclass)
        metaclass.superclass = root

        self.metaclass = metaclass
        self.root = root
        root.constants["Object"] = root
        root.constants["Class"] = metaclass

        self.string = self.open_class(root, "String")
        self.integer = self.open_class(root, "Integer")
        self.array = self.open_class(root, "Array")

        _builtin.install(self)

    def open_class(self, namespace: _value.RClass, name: str,
                   superclass: _value.RClass | None = None) -> _value.RClass:
        """Find or create a class in a namespace.

        Reopening an existing class returns it unchanged, so methods defined
        in a later body merge into the same method table. The superclass is
        only used when the class is created.

        Args:
            namespace: Class whose constant table holds the name
            name: Bare class name
            superclass: Parent class, defaults to `Object`

        Returns:
            The existing or new RClass

        Raises:
            TypeMismatch: The name is bound to something that is not a class
        """
        existing = namespace.constants.get(name)
        if existing is not None:
            if not isinstance(existing, _value.RClass):
                raise _error.TypeMismatch(f"{name} is not a class")
            logger.debug("reopen class %s", existing.name)
            return existing

        if namespace is self.root:
            qualified = name
        else:
            qualified = f"{namespace.name}::{name}"
        cls = _value.RClass(qualified, self.metaclass, superclass or self.root)
        namespace.constants[name] = cls
        logger.debug("create class %s < %s", qualified, cls.superclass.name)
        return cls

    def new_object(self, cls: _value.RClass) -> _value.Object:
        """Allocate an uninitialized instance of a class.

        Instances of `Class` (or a subclass of it) are new anonymous classes
        under `Object`.
        """
        if cls.is_subclass(self.metaclass):
            anonymous = _value.RClass(None, cls, self.root)
            logger.debug("create class %s < %s", anonymous.name, self.root.name)
            return anonymous
        if cls.is_subclass(self.string):
            return _value.Primitive(cls, "")
        if cls.is_subclass(self.integer):
            return _value.Primitive(cls, 0)
        if cls.is_subclass(self.array):
            return _value.Primitive(cls, [])
        return _value.Object(cls)

    def new_string(self, text: str) -> _value.Primitive:
        return _value.Primitive(self.string, text)

    def new_integer(self, number: int) -> _value.Primitive:
        return _value.Primitive(self.integer, number)

    def new_array(self, items) -> _value.Primitive:
        return _value.Primitive(self.array, list(items))

    def is_string(self, value: _value.Value) -> bool:
        return isinstance(value, _value.Primitive) and isinstance(value.payload, str)

    def is_integer(self, value: _value.Value) -> bool:
        return isinstance(value, _value.Primitive) and isinstance(value.payload, int)

    def is_array(self, value: _value.Value) -> bool:
        return isinstance(value, _value.Primitive) and isinstance(value.payload, list)

    def __repr__(self):
        return f"ClassGraph({sorted(self.root.constants)})"
