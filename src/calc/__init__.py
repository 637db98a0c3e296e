'''
Arithmetic expression calculator.

Evaluates infix expressions with exact integers and 100 digit reals, binary,
octal and hexadecimal literals, bitwise, logical and comparison operators,
variables, and a catalog of math functions. Statements are separated by ;
and evaluated one after another, sharing variables.

Not a programming language: no loops, conditionals, or user-defined
functions.

Text goes through a Lexer, a PrimitiveTokenizer, to_rpn, and finally
evaluate_rpn; Machine strings these together.
'''

from .cli import CLI
from .functions import FunctionMap
from .lexer import Lexer
from .machine import Machine, evaluate_rpn
from .number import Number
from .rpn import to_rpn
from .settings import Settings
from .tokenizer import PrimitiveTokenizer
from .variables import VarMap


__all__ = ('CLI', 'FunctionMap', 'Lexer', 'Machine', 'Number',
           'PrimitiveTokenizer', 'Settings', 'VarMap', 'evaluate_rpn',
           'to_rpn')
