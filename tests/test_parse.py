"""Test parsing source text into tagged AST nodes."""

import pytest

import rbtest
import tinyrb
from tinyrb import ast


def parse_one(code):
    """Parse code holding a single statement and return that statement."""
    node = tinyrb.parse(code)
    assert node[0] == "sequence"
    assert len(node) == 2, f"Expected one statement, got {node!r}"
    return node[1]


@rbtest.params(
    "code expected",
    integer=("42", ast.integer(42)),
    underscored=("1_000", ast.integer(1000)),
    single=("'hi there'", ast.string("hi there")),
    single_escape=(r"'it\'s'", ast.string("it's")),
    double=('"hi"', ast.string("hi")),
    double_escape=(r'"a\tb\n"', ast.string("a\tb\n")),
    ivar=("@name", ast.ivar("@name")),
    const=("User", ast.const("User")),
    scoped=("A::B::C", ast.const("A", "B", "C")),
)
def test_parse_primary(key, code, expected):
    assert parse_one(code) == expected


def test_parse_empty():
    assert tinyrb.parse("") == ("sequence",)
    assert tinyrb.parse("\n\n  # only a comment\n") == ("sequence",)


def test_parse_statement_separators():
    node = tinyrb.parse("1; 2\n\n3 # trailing comment\n")
    assert node == ast.seq(ast.integer(1), ast.integer(2), ast.integer(3))


def test_parse_local_assignment_and_read():
    node = tinyrb.parse("x = 1\nx")
    assert node == ast.seq(ast.lasgn("x", ast.integer(1)), ast.lvar("x"))


def test_parse_unknown_name_is_send():
    assert parse_one("foo") == ast.send(None, "foo")


def test_parse_ivar_assignment():
    assert parse_one("@age = @age + 1") == ast.iasgn(
        "@age", ast.send(ast.ivar("@age"), "+", ast.integer(1)))


def test_parse_arithmetic_precedence():
    assert parse_one("1 + 2 * 3 - 4") == ast.send(
        ast.send(ast.integer(1), "+", ast.send(ast.integer(2), "*", ast.integer(3))),
        "-", ast.integer(4))


def test_parse_command_call():
    assert parse_one("User.new 'Sally', 73") == ast.send(
        ast.const("User"), "new", ast.string("Sally"), ast.integer(73))


def test_parse_paren_call():
    assert parse_one("puts(1, 2)") == ast.send(
        None, "puts", ast.integer(1), ast.integer(2))
    assert parse_one("user.greet()") == ast.send(ast.send(None, "user"), "greet")


def test_parse_spaced_paren_is_grouping():
    assert parse_one("puts (1 + 2)") == ast.send(
        None, "puts", ast.send(ast.integer(1), "+", ast.integer(2)))


def test_parse_chained_calls():
    assert parse_one("a.b.c") == ast.send(
        ast.send(ast.send(None, "a"), "b"), "c")


def test_parse_command_with_expression_args():
    code = "x = 2\nputs x + 1, x"
    node = tinyrb.parse(code)
    assert node[2] == ast.send(
        None, "puts", ast.send(ast.lvar("x"), "+", ast.integer(1)), ast.lvar("x"))


def test_parse_interpolation():
    code = 'user = 1\n"#{user.name} was #{user.age}!"'
    node = tinyrb.parse(code)
    user = ast.lvar("user")
    assert node[2] == ast.dstr(
        ast.send(user, "name"), ast.string(" was "), ast.send(user, "age"), ast.string("!"))


def test_parse_escaped_interpolation():
    assert parse_one(r'"\#{x}"') == ast.string("#{x}")


@rbtest.params(
    "code expected",
    close_brace=("\"#{'}'}\"", ast.dstr(ast.string("}"))),
    open_brace=("\"a#{'{'}b\"", ast.dstr(ast.string("a"), ast.string("{"), ast.string("b"))),
    escaped_quote=("\"#{'\\'}'}\"", ast.dstr(ast.string("'}"))),
)
def test_parse_interpolation_with_quoted_braces(key, code, expected):
    assert parse_one(code) == expected


def test_parse_method_def():
    code = """
def initialize(name, age, *rest)
  @name = name
end
"""
    assert parse_one(code) == ast.method_def(
        "initialize",
        ast.params(ast.fixed("name"), ast.fixed("age"), ast.rest("rest")),
        ast.seq(ast.iasgn("@name", ast.lvar("name"))),
    )


def test_parse_method_def_variants():
    assert parse_one("def name; @name; end") == ast.method_def(
        "name", ast.params(), ast.seq(ast.ivar("@name")))
    assert parse_one("def pair a, b\nend") == ast.method_def(
        "pair", ast.params(ast.fixed("a"), ast.fixed("b")), ast.seq())
    assert parse_one("def none()\nend") == ast.method_def(
        "none", ast.params(), ast.seq())


def test_parse_method_scope_is_fresh():
    code = "x = 1\ndef peek\n  x\nend"
    node = tinyrb.parse(code)
    assert node[2] == ast.method_def("peek", ast.params(), ast.seq(ast.send(None, "x")))


def test_parse_class_def():
    code = """
class Admin < User
  def admin?
    1
  end
end
"""
    assert parse_one(code) == ast.class_def(
        ast.const("Admin"),
        ast.const("User"),
        ast.seq(ast.method_def("admin?", ast.params(), ast.seq(ast.integer(1)))),
    )


def test_parse_nested_class_target():
    assert parse_one("class A::B; end") == ast.class_def(
        ast.const("A", "B"), None, ast.seq())


@rbtest.params(
    "code",
    unclosed_class="class Foo\n",
    dangling_op="1 +",
    bad_char="puts 1 $ 2",
    unclosed_interp='"#{x"',
    bad_interp='"#{1 +}"',
    duplicate_param="def f(a, a)\nend",
    duplicate_rest="def f(a, *a)\nend",
    rest_not_last="def f(*a, b)\nend",
)
def test_parse_errors(key, code):
    with pytest.raises(tinyrb.ParseError):
        tinyrb.parse(code)


def test_parse_error_position():
    with pytest.raises(tinyrb.ParseError) as info:
        tinyrb.parse("x = 1\nputs 1 $ 2")
    assert info.value.position[0] == 2
