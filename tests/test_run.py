"""Test running complete programs from source text."""

from pathlib import Path

import pytest

import rbtest
import tinyrb

EXAMPLES = Path(__file__).parent.parent / "examples"


def test_birthday_example():
    code = (EXAMPLES / "birthday.rb").read_text()
    assert rbtest.run_source(code) == (
        "Sally was 73\n"
        "But, it's their birthday!\n"
        "So now Sally is 74\n"
        "Happy birthday, Sally!\n"
    )


@rbtest.params(
    "code expected",
    string=("puts 'hello'", "hello\n"),
    integer=("puts 42", "42\n"),
    math=("puts 2 + 3 * 4 - 1", "13\n"),
    grouped=("puts (2 + 3) * 4", "20\n"),
    multiple=("puts 1, 'two'", "1\ntwo\n"),
    empty=("puts", "\n"),
    trailing_newline=('puts "line\\n"', "line\n"),
    local=("x = 5\nputs x + x", "10\n"),
    interpolated=('x = 2\nputs "#{x} + #{x} = #{x + x}"', "2 + 2 = 4\n"),
    nil_ivar=('puts "[#{@missing}]"', "[]\n"),
    class_name=("puts 1.class", "Integer\n"),
    superclass=("puts String.superclass", "Object\n"),
    quoted_brace=("puts \"#{'}'}\"", "}\n"),
)
def test_run_output(key, code, expected):
    assert rbtest.run_source(code) == expected


def test_reopened_class_keeps_methods():
    code = """
class Counter
  def initialize
    @count = 0
  end

  def count
    @count
  end
end

class Counter
  def bump
    @count = @count + 1
  end
end

c = Counter.new
c.bump
c.bump
puts c.count
"""
    assert rbtest.run_source(code) == "2\n"


def test_inheritance_and_override():
    code = """
class Animal
  def initialize(name)
    @name = name
  end

  def speak
    "#{@name} makes a sound"
  end

  def intro
    puts speak
  end
end

class Dog < Animal
  def speak
    "#{@name} barks"
  end
end

Animal.new('Generic').intro
Dog.new('Rex').intro
"""
    assert rbtest.run_source(code) == "Generic makes a sound\nRex barks\n"


def test_custom_to_s_used_by_puts():
    code = """
class Point
  def initialize(x, y)
    @x = x
    @y = y
  end

  def to_s
    "(#{@x}, #{@y})"
  end
end

p = Point.new 1, 2
puts p
puts "at #{p}"
"""
    assert rbtest.run_source(code) == "(1, 2)\nat (1, 2)\n"


def test_rest_arguments():
    code = """
def show(first, *others)
  puts "#{first} #{others}"
end

show 1
show 1, 2, 3
"""
    assert rbtest.run_source(code) == "1 []\n1 [2, 3]\n"


def test_nested_class_constant():
    code = """
class Outer
end

class Outer::Inner
  def where
    'inside'
  end
end

puts Outer::Inner.new.where
puts Outer::Inner
"""
    assert rbtest.run_source(code) == "inside\nOuter::Inner\n"


def test_unqualified_class_def_lands_in_root():
    code = """
class Outer
  class Inner
  end
end

puts Inner
"""
    assert rbtest.run_source(code) == "Inner\n"


def test_locals_are_per_method_call():
    code = """
def count_down(n)
  left = n - 1
  left
end

puts count_down(3)
puts count_down(10)
"""
    assert rbtest.run_source(code) == "2\n9\n"


def test_error_keeps_earlier_output():
    interp = rbtest.make_interp()
    code = "puts 'before'\nnope\nputs 'after'"
    with pytest.raises(tinyrb.NoMethodError):
        interp.execute(code)
    assert interp.output.getvalue() == "before\n"


def test_arity_error_from_source():
    code = "def one(a)\nend\none 1, 2"
    with pytest.raises(tinyrb.ArityMismatch):
        rbtest.run_source(code)


def test_unresolved_constant_from_source():
    with pytest.raises(tinyrb.UnresolvedConstant):
        rbtest.run_source("Missing.new")


def test_run_function():
    output = rbtest.make_interp().output
    interp = tinyrb.run("puts 'ran'", output)
    assert interp.output is output
    assert output.getvalue() == "ran\n"


@rbtest.params(
    "code expected",
    class_of_rest=("def f(*a)\n  a.class\nend\nputs f(1, 2)", "Array\n"),
    size=("def f(*a)\n  a.size\nend\nputs f\nputs f(1, 2)", "0\n2\n"),
    to_s=("def f(*a)\n  a.to_s\nend\nputs f('x', 3)", "[x, 3]\n"),
    forward=("def f(*a)\n  puts a\nend\nf 1", "[1]\n"),
)
def test_rest_parameter_is_array(key, code, expected):
    assert rbtest.run_source(code) == expected


def test_rest_parameter_in_arithmetic():
    code = "def f(*a)\n  1 + a\nend\nf 1"
    with pytest.raises(tinyrb.TypeMismatch) as info:
        rbtest.run_source(code)
    assert "Array" in str(info.value)


def test_class_new_makes_anonymous_class():
    code = """
k = Class.new
puts k.name
puts k.superclass
puts k
obj = k.new
puts obj.class
"""
    interp = rbtest.make_interp()
    interp.execute(code)
    k = interp.stack.top.locals["k"]
    obj = interp.stack.top.locals["obj"]
    assert isinstance(k, tinyrb.RClass)
    assert obj.cls is k
    assert interp.output.getvalue() == f"\nObject\n{k.name}\n{k.name}\n"


def test_instance_of_anonymous_class():
    output = rbtest.run_source("puts Class.new.new")
    assert output.startswith("#<#<Class:0x")
    assert output.endswith(">>\n")
