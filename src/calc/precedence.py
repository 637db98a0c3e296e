'''
Operator precedence. Higher binds tighter; everything is left-associative.
'''

from .tokens import PrimitiveTokenType as T
from .util import CalcSyntaxError


PRECEDENCE = {
    # Functions
    T.FACTORIAL: 6,
    T.FUNCTION_NAME: 6,
    # Exponents
    T.EXPONENT: 5,
    T.NEGATE: 4,
    # Multiplication, division, shifts
    T.MULTIPLY: 3,
    T.DIVIDE: 3,
    T.MODULO: 3,
    T.SHIFT_LEFT: 3,
    T.SHIFT_RIGHT: 3,
    # Addition, subtraction, unary NOTs
    T.ADD: 2,
    T.SUBTRACT: 2,
    T.BIT_NOT: 2,
    T.LOGICAL_NOT: 2,
    # Bitwise AND/OR/XOR, comparisons
    T.BIT_AND: 1,
    T.BIT_OR: 1,
    T.BIT_XOR: 1,
    T.EQUAL: 1,
    T.NOT_EQUAL: 1,
    T.LESS_THAN: 1,
    T.LESS_OR_EQUAL: 1,
    T.GREATER_THAN: 1,
    T.GREATER_OR_EQUAL: 1,
    # Boolean
    T.LOGICAL_OR: 0,
    T.LOGICAL_AND: 0,
}
# Prefix operators never pop what's already on the operator stack.
PREFIX = frozenset({T.NEGATE, T.BIT_NOT, T.LOGICAL_NOT})
# Operators taking a single operand
UNARY = PREFIX | {T.FACTORIAL}


def precedence(primitive, source=None):
    '''
    Return the precedence of primitive's operator type.

    Raises CalcSyntaxError for anything that isn't an operator.
    '''
    try:
        return PRECEDENCE[primitive.type]
    except KeyError:
        raise CalcSyntaxError('Unexpected "{}" ({})!'
                              .format(primitive.text, primitive.type.value),
                              source=source,
                              span=(primitive.offset, primitive.end)) \
            from None
