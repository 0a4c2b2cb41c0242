"""Native methods attached to the bootstrap classes.

Every handler receives `(interp, receiver, *args)` with the arguments already
bound and checked against the method's parameter spec. Handlers return Values.

- Object: puts, initialize, to_s, class
- Class: new, name, to_s, superclass
- String: to_s
- Integer: +, -, *, to_s
- Array: to_s, size
"""

__all__ = ["install", "to_str", "create_builtin_methods"]

import operator

from . import _error, _method, _value


def to_str(interp, value: _value.Value) -> str:
    """Convert a value to its host string representation.

    Primitives use their payload directly, with Array items converted one by
    one. Nil is empty, any other object is asked for `to_s` by normal dispatch.
    """
    if value is _value.NIL:
        return ""
    if isinstance(value, _value.Primitive):
        if isinstance(value.payload, list):
            return "[" + ", ".join(to_str(interp, item) for item in value.payload) + "]"
        return str(value.payload)
    if isinstance(value, (str, int)):
        # Raw literal data passed through the evaluator unchanged
        return str(value)
    method = _method.find_method(value, "to_s")
    result = _method.call_method(interp, value, method, [])
    if not interp.classes.is_string(result):
        raise _error.TypeMismatch(f"to_s for {value.describe()} did not return a String")
    return result.payload


# ============================================================================
# Object
# ============================================================================

def builtin_puts(interp, receiver, values):
    """Write each value on its own line: puts "hi" → hi"""
    if not values:
        interp.output.write("\n")
    for value in values:
        text = to_str(interp, value)
        if not text.endswith("\n"):
            text += "\n"
        interp.output.write(text)
    return _value.NIL


def builtin_initialize(interp, receiver):
    """Default initializer, accepts no arguments."""
    return _value.NIL


def builtin_object_to_s(interp, receiver):
    """Default string form: User.new.to_s → #<User>"""
    return interp.classes.new_string(f"#<{receiver.cls.name}>")


def builtin_class(interp, receiver):
    """Class of the receiver: 1.class → Integer"""
    return receiver.cls


# ============================================================================
# Class
# ============================================================================

def builtin_new(interp, receiver, args):
    """Allocate and initialize: User.new "Sally", 73 → the new User

    The new object is returned, not the result of `initialize`.
    """
    instance = interp.classes.new_object(receiver)
    initialize = _method.find_method(instance, "initialize")
    _method.call_method(interp, instance, initialize, args)
    return instance


def builtin_name(interp, receiver):
    """Qualified name of a class: A::B.name → "A::B", nil when anonymous"""
    if receiver.anonymous:
        return _value.NIL
    return interp.classes.new_string(receiver.name)


def builtin_class_to_s(interp, receiver):
    """Display name of a class: Class.new.to_s → #<Class:0x...>"""
    return interp.classes.new_string(receiver.name)


def builtin_superclass(interp, receiver):
    """Parent class, nil for the root class."""
    if receiver.superclass is None:
        return _value.NIL
    return receiver.superclass


# ============================================================================
# String, Integer and Array
# ============================================================================

def builtin_self_to_s(interp, receiver):
    """Primitive string form: 42.to_s → "42" """
    if interp.classes.is_string(receiver):
        return receiver
    return interp.classes.new_string(to_str(interp, receiver))


def builtin_size(interp, receiver):
    """Number of items: [1, 2].size → 2"""
    return interp.classes.new_integer(len(receiver.payload))


def _integer_op(name, op):
    """Build a handler for a binary operation on two integers."""

    def handler(interp, receiver, other):
        if not interp.classes.is_integer(other):
            raise _error.TypeMismatch(
                f"{_value.describe(other)} can't be coerced into Integer for '{name}'")
        return interp.classes.new_integer(op(receiver.payload, other.payload))

    handler.__name__ = f"builtin_integer_{op.__name__}"
    handler.__doc__ = f"Integer {name}: new Integer wrapping the host result."
    return handler


# ============================================================================
# Method Registry
# ============================================================================

def _native(name, handler, *params):
    """Wrap a handler as a NativeMethod, `*name` marking a rest parameter."""
    entries = []
    for param in params:
        if param.startswith("*"):
            entries.append(_method.Rest(param[1:]))
        else:
            entries.append(_method.Fixed(param))
    return _method.NativeMethod(name, _method.ParamSpec(entries), handler)


def create_builtin_methods():
    """Create all native methods.

    Returns:
        Dict mapping class name to a list of NativeMethod objects
    """
    return {
        "Object": [
            _native("puts", builtin_puts, "*values"),
            _native("initialize", builtin_initialize),
            _native("to_s", builtin_object_to_s),
            _native("class", builtin_class),
        ],
        "Class": [
            _native("new", builtin_new, "*args"),
            _native("name", builtin_name),
            _native("to_s", builtin_class_to_s),
            _native("superclass", builtin_superclass),
        ],
        "String": [
            _native("to_s", builtin_self_to_s),
        ],
        "Integer": [
            _native("+", _integer_op("+", operator.add), "other"),
            _native("-", _integer_op("-", operator.sub), "other"),
            _native("*", _integer_op("*", operator.mul), "other"),
            _native("to_s", builtin_self_to_s),
        ],
        "Array": [
            _native("to_s", builtin_self_to_s),
            _native("size", builtin_size),
        ],
    }


def install(classes):
    """Attach the native methods to a freshly built class graph."""
    for class_name, methods in create_builtin_methods().items():
        cls = classes.root.constants[class_name]
        for method in methods:
            cls.methods[method.name] = method
