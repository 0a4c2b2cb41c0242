"""Tagged AST nodes.

A node is a tuple whose first item is the kind tag and whose remaining items
are children, either nested nodes or raw literal data (names, strings, ints).
Absent children are None. This is the structure produced by `tinyrb.parse`
and consumed by `tinyrb.evaluate`; any other producer can build the same
tuples directly or with the helpers below.
"""

__all__ = [
    "NODE_KINDS",
    "is_node",
    "node_kind",
    "seq",
    "class_def",
    "method_def",
    "params",
    "fixed",
    "rest",
    "lasgn",
    "iasgn",
    "ivar",
    "lvar",
    "send",
    "const",
    "string",
    "integer",
    "dstr",
]

NODE_KINDS = frozenset([
    "sequence",
    "class-def",
    "method-def",
    "local-assign",
    "ivar-assign",
    "ivar-read",
    "local-read",
    "send",
    "const-ref",
    "string-literal",
    "integer-literal",
    "interpolated-string",
])


def is_node(value) -> bool:
    """Check whether raw data looks like a tagged node."""
    return (
        isinstance(value, (tuple, list))
        and len(value) > 0
        and isinstance(value[0], str)
    )


def node_kind(node) -> str:
    return node[0]


def seq(*statements):
    return ("sequence", *statements)


def class_def(target, superclass, body):
    """Class definition, `target` and `superclass` are const-ref nodes."""
    return ("class-def", target, superclass, body)


def method_def(name, parameters, body):
    return ("method-def", name, parameters, body)


def params(*entries):
    return ("params", *entries)


def fixed(name):
    return ("fixed", name)


def rest(name):
    return ("rest", name)


def lasgn(name, value):
    return ("local-assign", name, value)


def iasgn(name, value):
    return ("ivar-assign", name, value)


def ivar(name):
    return ("ivar-read", name)


def lvar(name):
    return ("local-read", name)


def send(receiver, name, *args):
    """Message send, a None receiver means implicit self."""
    return ("send", receiver, name, *args)


def const(*path):
    """Constant reference from a path: const("A", "B") is A::B."""
    node = None
    for name in path:
        node = ("const-ref", node, name)
    return node


def string(text):
    return ("string-literal", text)


def integer(number):
    return ("integer-literal", number)


def dstr(*parts):
    return ("interpolated-string", *parts)
