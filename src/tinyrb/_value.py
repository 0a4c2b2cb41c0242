"""Runtime values for the object model.

Every value the evaluator produces is a `Value`:
- `NIL`: the unique nil sentinel, which has no class
- `Object`: a class reference plus a mapping of instance variables
- `Primitive`: an Object that also carries one opaque host payload
  (str, int, or a list of Values for Array)
- `RClass`: an Object that describes a class, with method and constant tables

Values compare by identity. Two objects are only the same value when they
come from the same allocation.
"""

__all__ = ["Value", "NIL", "Object", "Primitive", "RClass", "describe"]


def describe(value) -> str:
    """Short description of any value for error messages, Value or not."""
    if isinstance(value, Value):
        return value.describe()
    return f"host {type(value).__name__} {value!r}"


class Value:
    """Base class for all runtime values.

    This is a marker base class, it establishes a common type for anything
    that can be stored in a local, an ivar, or a constant table.
    """

    __slots__ = ()

    def describe(self) -> str:
        """Short description used in error messages."""
        raise NotImplementedError(f"{self.__class__.__name__}.describe() not implemented")


class _Nil(Value):
    """The nil sentinel. There is only ever one instance."""

    __slots__ = ()

    cls = None

    def describe(self):
        return "nil"

    def __repr__(self):
        return "NIL"

    def __bool__(self):
        return False


NIL = _Nil()


class Object(Value):
    """Plain object with a class and instance variables.

    Args:
        cls: (RClass) Class of this object

    Attributes:
        cls: (RClass) Class of this object
        ivars: (dict) Instance variable name (with `@`) to Value
    """

    __slots__ = ("cls", "ivars")

    def __init__(self, cls: "RClass | None"):
        self.cls = cls
        self.ivars = {}

    def get_ivar(self, name: str) -> Value:
        """Read an instance variable, nil when unset."""
        return self.ivars.get(name, NIL)

    def set_ivar(self, name: str, value: Value) -> Value:
        self.ivars[name] = value
        return value

    def describe(self):
        return f"an instance of {self.cls.name}"

    def __repr__(self):
        return f"<{self.cls.name} {id(self):#x}>"


class Primitive(Object):
    """Object backed by a host payload, used by String and Integer.

    Args:
        cls: (RClass) Class of this object
        payload: (str | int | list) The wrapped host value
    """

    __slots__ = ("payload",)

    def __init__(self, cls: "RClass", payload):
        super().__init__(cls)
        self.payload = payload

    def __repr__(self):
        return f"{self.cls.name}({self.payload!r})"


class RClass(Object):
    """A class object.

    A class is itself an object whose class is a class. The metaclass is
    built with `cls=None` and then pointed at itself by the bootstrap.

    Classes made by `Class.new` have no constant binding. They are built with
    `name=None` and get a display name like "#<Class:0x7f...>".

    Args:
        name: (str | None) Qualified display name of the class, like "A::B"
        cls: (RClass | None) Class of this class (the metaclass)
        superclass: (RClass | None) Parent class, None only for the root

    Attributes:
        methods: (dict) Method name to Method
        constants: (dict) Constant name to Value
        anonymous: (bool) True when built without a name
    """

    __slots__ = ("name", "superclass", "methods", "constants", "anonymous")

    def __init__(self, name: str | None, cls: "RClass | None",
                 superclass: "RClass | None" = None):
        super().__init__(cls)
        self.anonymous = name is None
        self.name = f"#<Class:{id(self):#x}>" if name is None else name
        self.superclass = superclass
        self.methods = {}
        self.constants = {}

    def ancestors(self):
        """Iterate this class and every superclass, most specific first."""
        cls = self
        while cls is not None:
            yield cls
            cls = cls.superclass

    def is_subclass(self, other: "RClass") -> bool:
        return any(cls is other for cls in self.ancestors())

    def describe(self):
        return f"class {self.name}"

    def __repr__(self):
        return f"RClass({self.name})"
