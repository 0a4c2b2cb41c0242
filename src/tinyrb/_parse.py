"""Parse source text into tagged AST nodes.

The lark parse tree is converted into the tuple nodes described in
`tinyrb.ast`. The intermediate lark tree is not exposed to the api.

Bare identifiers follow Ruby's rule: a name already assigned earlier in the
same scope is a local variable read, anything else is a method call on the
implicit self. Class bodies and method bodies each start a fresh scope.
"""

__all__ = ["parse", "lark_parser"]

import lark

import tinyrb
from . import ast

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "s": " ",
    "0": "\0",
    "e": "\x1b",
}


def parse(source):
    """Parse source text into a `sequence` node.

    Args:
        source: (str) Program source

    Returns:
        Tagged AST node

    Raises:
        tinyrb.ParseError: If the text contains invalid syntax
    """
    return _Converter().program(source)


def lark_parser():
    """Get the globally shared lark parser.

    Returns:
        (lark.Lark) Parser instance
    """
    parser = _parsers.get("tinyrb")
    if parser is not None:
        return parser

    parser = lark.Lark.open(
        "lark/tinyrb.lark", rel_to=__file__, start="program",
        parser="lalr", propagate_positions=True,
    )
    _parsers["tinyrb"] = parser
    return parser


_parsers: dict[str, lark.Lark] = {}


class _Converter:
    """Convert lark trees to AST nodes, tracking local variable scopes."""

    def __init__(self):
        self.scopes = [set()]

    def program(self, source):
        try:
            tree = lark_parser().parse(source)
        except lark.exceptions.UnexpectedInput as e:
            raise tinyrb.ParseError(_describe(e), (e.line, e.column)) from e
        except lark.exceptions.LarkError as e:
            raise tinyrb.ParseError(str(e)) from e
        return self.convert(tree.children[0])

    def convert(self, tree):
        """Convert a single lark tree to an AST node.

        Args:
            tree: (lark.Tree) Tree to convert

        Returns:
            Tagged AST node
        """
        if isinstance(tree, lark.Token):
            raise ValueError(f"Unhandled grammar token: {tree}")

        kids = tree.children
        match tree.data:
            case "body":
                return ast.seq(*(self.convert(kid) for kid in kids))

            case "class_def":
                target = self.convert(kids[0])
                superclass = None
                if len(kids) == 3:
                    superclass = self.convert(kids[1].children[0])
                body = self._scoped(kids[-1])
                return ast.class_def(target, superclass, body)

            case "method_def":
                name = str(kids[0])
                params = []
                if len(kids) == 3:
                    params = [self._param(p) for p in kids[1].children]
                _check_params(params, kids[0])
                names = {entry[1] for entry in params}
                body = self._scoped(kids[-1], names)
                return ast.method_def(name, ast.params(*params), body)

            case "lasgn":
                name = str(kids[0])
                self.scopes[-1].add(name)
                return ast.lasgn(name, self.convert(kids[1]))

            case "iasgn":
                return ast.iasgn(str(kids[0]), self.convert(kids[1]))

            case "fcommand" | "fcall":
                args = self._args(kids[1]) if len(kids) > 1 else []
                return ast.send(None, str(kids[0]), *args)

            case "command_call" | "call":
                receiver = self.convert(kids[0])
                args = self._args(kids[2]) if len(kids) > 2 else []
                return ast.send(receiver, str(kids[1]), *args)

            case "add" | "sub" | "mul":
                op = {"add": "+", "sub": "-", "mul": "*"}[tree.data]
                return ast.send(self.convert(kids[0]), op, self.convert(kids[1]))

            case "integer":
                return ast.integer(int(kids[0].replace("_", "")))

            case "sstring":
                text = kids[0][1:-1].replace("\\\\", "\\").replace("\\'", "'")
                return ast.string(text)

            case "dstring":
                return self._dstring(kids[0])

            case "ivar":
                return ast.ivar(str(kids[0]))

            case "ident":
                name = str(kids[0])
                if name in self.scopes[-1]:
                    return ast.lvar(name)
                return ast.send(None, name)

            case "const":
                return ("const-ref", None, str(kids[0]))

            case "scoped_const":
                return ("const-ref", self.convert(kids[0]), str(kids[1]))

            case _:
                raise ValueError(f"Unhandled grammar rule: {tree.data}")

    def _scoped(self, body, names=()):
        """Convert a body in a fresh local scope."""
        self.scopes.append(set(names))
        try:
            return self.convert(body)
        finally:
            self.scopes.pop()

    def _param(self, tree):
        if tree.data == "rest_param":
            return ast.rest(str(tree.children[0]))
        return ast.fixed(str(tree.children[0]))

    def _args(self, tree):
        return [self.convert(kid) for kid in tree.children]

    def _dstring(self, token):
        """Split a double quoted string into literal and interpolated parts."""
        text = token[1:-1]
        parts = []
        chunk = []
        pos = 0
        while pos < len(text):
            char = text[pos]
            if char == "\\" and pos + 1 < len(text):
                escaped = text[pos + 1]
                chunk.append(_ESCAPES.get(escaped, escaped))
                pos += 2
            elif text.startswith("#{", pos):
                end = _matching_brace(text, pos + 2)
                if end < 0:
                    raise tinyrb.ParseError(
                        "Unterminated string interpolation",
                        (token.line, token.column + pos + 1))
                if chunk:
                    parts.append(ast.string("".join(chunk)))
                    chunk = []
                parts.append(self._interpolation(text[pos + 2:end], token))
                pos = end + 1
            else:
                chunk.append(char)
                pos += 1

        if not parts:
            return ast.string("".join(chunk))
        if chunk:
            parts.append(ast.string("".join(chunk)))
        return ast.dstr(*parts)

    def _interpolation(self, code, token):
        """Parse the code inside #{...} in the current scope."""
        try:
            tree = lark_parser().parse(code)
        except lark.exceptions.UnexpectedInput as e:
            raise tinyrb.ParseError(
                f"In string interpolation: {_describe(e)}",
                (token.line, token.column)) from e
        node = self.convert(tree.children[0])
        if len(node) == 2:
            return node[1]
        return node


def _check_params(params, name_token):
    """Reject repeated parameter names and a rest parameter that is not last."""
    position = (name_token.line, name_token.column)
    seen = set()
    for i, (kind, name) in enumerate(params):
        if name in seen:
            raise tinyrb.ParseError(f"Duplicated argument name {name!r}", position)
        if kind == "rest" and i != len(params) - 1:
            raise tinyrb.ParseError(f"Rest parameter *{name} must be last", position)
        seen.add(name)


def _matching_brace(text, start):
    """Index of the brace closing an interpolation, -1 when missing.

    Braces inside quoted strings within the interpolated code are skipped.
    """
    depth = 1
    quote = None
    pos = start
    while pos < len(text):
        char = text[pos]
        if quote:
            if char == "\\":
                pos += 1
            elif char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def _describe(error):
    """Short message for a lark input error."""
    if isinstance(error, lark.exceptions.UnexpectedCharacters):
        return f"Unexpected character {error.char!r}"
    if isinstance(error, lark.exceptions.UnexpectedEOF):
        return "Unexpected end of input"
    if isinstance(error, lark.exceptions.UnexpectedToken):
        if error.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected {error.token.type} {error.token.value!r}"
    return str(error)
