"""Expression evaluation for tagged AST nodes."""

__all__ = ["evaluate", "resolve_constant", "constant_name"]

import logging

from . import ast, _builtin, _error, _method, _value

logger = logging.getLogger(__name__)


def evaluate(node, interp):
    """Evaluate an AST node to a runtime Value.

    Args:
        node: Tagged node tuple, None for an absent node, or raw literal data
        interp: The running Interp holding classes and the binding stack

    Returns:
        Evaluated Value (raw literal data is returned unchanged)

    Raises:
        UnhandledNodeKind: The node tag is not a supported kind
    """
    if node is None:
        return _value.NIL
    if not ast.is_node(node):
        return node

    kids = node[1:]
    match node[0]:
        case "sequence":
            result = _value.NIL
            for statement in kids:
                result = evaluate(statement, interp)
            return result

        case "class-def":
            target, superclass_node, body = kids
            namespace, name = _class_target(target, interp)
            superclass = None
            if superclass_node is not None:
                superclass = evaluate(superclass_node, interp)
                if not isinstance(superclass, _value.RClass):
                    raise _error.TypeMismatch(
                        f"superclass must be a class, got {_value.describe(superclass)}")
            cls = interp.classes.open_class(namespace, name, superclass)
            with interp.stack.frame(cls):
                return evaluate(body, interp)

        case "method-def":
            name, params, body = kids
            owner = interp.stack.top.self_value
            if not isinstance(owner, _value.RClass):
                # A def outside a class body lands on the receiver's class
                owner = owner.cls
            spec = _method.ParamSpec.from_node(params)
            owner.methods[name] = _method.InterpretedMethod(name, spec, body)
            logger.debug("define %s#%s%r", owner.name, name, spec)
            return interp.classes.new_string(name)

        case "local-assign":
            name, value_node = kids
            value = evaluate(value_node, interp)
            return interp.stack.top.set_local(name, value)

        case "ivar-assign":
            name, value_node = kids
            value = evaluate(value_node, interp)
            return _self_object(interp, name).set_ivar(name, value)

        case "ivar-read":
            return _self_object(interp, kids[0]).get_ivar(kids[0])

        case "local-read":
            return interp.stack.top.get_local(kids[0])

        case "send":
            receiver_node, name, *arg_nodes = kids
            if receiver_node is None:
                receiver = interp.stack.top.self_value
            else:
                receiver = evaluate(receiver_node, interp)
            args = [evaluate(arg, interp) for arg in arg_nodes]
            return interp.send(receiver, name, args)

        case "const-ref":
            return resolve_constant(node, interp)

        case "string-literal":
            return interp.classes.new_string(kids[0])

        case "integer-literal":
            return interp.classes.new_integer(kids[0])

        case "interpolated-string":
            text = "".join(
                _builtin.to_str(interp, evaluate(part, interp)) for part in kids
            )
            return interp.classes.new_string(text)

        case _:
            raise _error.UnhandledNodeKind(node)


def resolve_constant(node, interp):
    """Resolve a const-ref node to its bound value.

    An unqualified name is looked up in the root namespace (`Object`).
    A qualified `A::B` resolves `A` first, by the same rule, then looks `B`
    up in that class's constant table.

    Raises:
        UnresolvedConstant: Any name along the path is unbound
        TypeMismatch: A namespace along the path is not a class
    """
    namespace_node, name = node[1], node[2]
    namespace = _namespace(namespace_node, interp)
    try:
        return namespace.constants[name]
    except KeyError:
        raise _error.UnresolvedConstant(constant_name(node)) from None


def constant_name(node) -> str:
    """Source form of a const-ref node, like "A::B"."""
    if not ast.is_node(node) or node[0] != "const-ref":
        return "?"
    if node[1] is None:
        return node[2]
    return f"{constant_name(node[1])}::{node[2]}"


def _namespace(node, interp) -> _value.RClass:
    """Evaluate the namespace part of a constant, root when absent."""
    if node is None:
        return interp.classes.root
    namespace = evaluate(node, interp)
    if not isinstance(namespace, _value.RClass):
        raise _error.TypeMismatch(
            f"{constant_name(node)} is not a class/module")
    return namespace


def _class_target(target, interp):
    """Split a class-def target into (namespace, bare name)."""
    if not ast.is_node(target) or target[0] != "const-ref":
        raise _error.UnhandledNodeKind(target)
    return _namespace(target[1], interp), target[2]


def _self_object(interp, name) -> _value.Object:
    """Current self as an object able to hold ivars."""
    self_value = interp.stack.top.self_value
    if not isinstance(self_value, _value.Object):
        raise _error.TypeMismatch(f"can't access {name} on {_value.describe(self_value)}")
    return self_value
