"""
tinyrb: a tree-walking evaluator for a small Ruby subset

Programs are parsed into tagged AST tuples and evaluated against a class graph
of plain Python objects: a self-referential metaclass, a root class, and
primitive String and Integer classes. Output goes to a write-only text sink.
"""

__version__ = "0.1.0"

import logging

from ._error import *
from ._value import *
from ._method import *
from ._frame import *
from ._builtin import *
from ._classes import *
from ._eval import *
from ._interp import *
from ._parse import *
from . import ast

logging.getLogger(__name__).addHandler(logging.NullHandler())
