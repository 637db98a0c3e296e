'''
Infix to Reverse Polish Notation, by way of Dijkstra's shunting-yard.
'''

import logging

from .precedence import PREFIX, precedence
from .tokens import OPERANDS, PrimitiveTokenType
from .util import ArityError, CalcSyntaxError


log = logging.getLogger(__name__)


def count_arguments(primitives, index):
    '''
    Count top-level, comma-delimited arguments of the call at index.

    index is the FunctionName, immediately followed by its ExpressionOpen.
    '''
    depth = 0
    commas = 0
    empty = True
    for primitive in primitives[index + 2:]:
        if primitive.type is PrimitiveTokenType.EXPRESSION_OPEN:
            depth += 1
        elif primitive.type is PrimitiveTokenType.EXPRESSION_CLOSE:
            if depth == 0:
                break
            depth -= 1
        elif primitive.type is PrimitiveTokenType.TERM_SEPARATOR \
                and depth == 0:
            commas += 1
        empty = False
    return 0 if empty else commas + 1


def _span(primitive):
    return primitive.offset, primitive.end


def to_rpn(primitives, function_map=None, source=None):
    '''
    Reorder primitives into RPN.

    :param function_map: Declares function arities, checked as calls are
                         encountered.
    :param source: Expression text, for error pointers.
    '''
    output = []
    operators = []
    for index, primitive in enumerate(primitives):
        type_ = primitive.type
        if type_ in OPERANDS:
            output.append(primitive)
        elif type_ is PrimitiveTokenType.EXPRESSION_OPEN:
            operators.append(primitive)
        elif type_ is PrimitiveTokenType.EXPRESSION_CLOSE:
            while operators \
                    and operators[-1].type \
                    is not PrimitiveTokenType.EXPRESSION_OPEN:
                output.append(operators.pop())
            if not operators:
                raise CalcSyntaxError('Unmatched close bracket!',
                                      source=source, span=_span(primitive))
            operators.pop()
            if operators \
               and operators[-1].type is PrimitiveTokenType.FUNCTION_NAME:
                output.append(operators.pop())
        elif type_ is PrimitiveTokenType.TERM_SEPARATOR:
            while operators \
                    and operators[-1].type \
                    is not PrimitiveTokenType.EXPRESSION_OPEN:
                output.append(operators.pop())
            if not operators:
                raise CalcSyntaxError('Found a comma outside of an argument '
                                      'list!',
                                      source=source, span=_span(primitive))
        else:
            incoming = precedence(primitive, source)
            if type_ is PrimitiveTokenType.FUNCTION_NAME \
               and function_map is not None:
                expected = function_map.get_params_count(primitive.text)
                actual = count_arguments(primitives, index)
                if expected != actual:
                    raise ArityError(primitive.text, expected, actual,
                                     source=source, span=_span(primitive))
            if type_ not in PREFIX:
                while operators \
                        and operators[-1].type \
                        is not PrimitiveTokenType.EXPRESSION_OPEN \
                        and precedence(operators[-1]) >= incoming:
                    output.append(operators.pop())
            operators.append(primitive)

    while operators:
        primitive = operators.pop()
        if primitive.type is PrimitiveTokenType.EXPRESSION_OPEN:
            raise CalcSyntaxError('Unmatched open bracket!',
                                  source=source, span=_span(primitive))
        output.append(primitive)
    log.debug('RPN: %s', ' '.join(primitive.text for primitive in output))
    return output
