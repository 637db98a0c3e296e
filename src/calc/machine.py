from collections import namedtuple
import logging
import math
import operator

import regex

from .functions import FunctionMap
from .lexer import Lexer
from .number import (MAX_INTEGER_BITS, Number, PREFIXES, check_width,
                     from_base)
from .rpn import to_rpn
from .settings import DEFAULT_SETTINGS
from .tokenizer import PrimitiveTokenizer
from .tokens import BASES, LexemeType, PrimitiveTokenType as T, is_number
from .util import (CalcError, CalcSyntaxError, EvaluationError,
                   wrap_user_errors)
from .variables import VarMap


log = logging.getLogger(__name__)

Outcome = namedtuple('Outcome', ['expression', 'result', 'error'])


def _divide(left, right, settings):
    if right.is_zero():
        raise EvaluationError('Cannot divide by zero!')
    return left / right


def _modulo(left, right, settings):
    if right.is_zero():
        raise EvaluationError('Cannot divide by zero!')
    return left % right


def _factorial(operand, settings):
    if not operand.has_integral_value() \
       or not (operand.is_positive() or operand.is_zero()):
        raise EvaluationError('Operator ! (Factorial) requires a positive '
                              'integer!')
    n = operand.cast_to(int)
    # n! > 2 ** n for n >= 4
    if n > 3:
        check_width(n if n > MAX_INTEGER_BITS
                    else math.lgamma(n + 1) / math.log(2), '!', 'Factorial')
    return Number(math.factorial(n))


def _binary(f):
    '''
    Adapt a plain binary operator to the (left, right, settings) protocol.
    '''
    def wrapped(left, right, settings):
        return f(left, right)
    return wrapped


def _unary(f):
    def wrapped(operand, settings):
        return f(operand)
    return wrapped


def _boolean(f):
    '''
    Make a Number predicate yield 0 or 1.
    '''
    def wrapped(*args):
        return Number(bool(f(*args)))
    return wrapped


BINARY_OPERATORS = {
    # Arithmetic
    T.ADD: _binary(operator.__add__),
    T.SUBTRACT: _binary(operator.__sub__),
    T.MULTIPLY: _binary(operator.__mul__),
    T.DIVIDE: _divide,
    T.MODULO: _modulo,

    # Bitwise
    T.BIT_OR: _binary(operator.__or__),
    T.BIT_AND: _binary(operator.__and__),
    T.BIT_XOR: _binary(operator.__xor__),
    T.SHIFT_LEFT: lambda left, right, settings:
        left.shift_left(right, settings.unsafe_cast),
    T.SHIFT_RIGHT: lambda left, right, settings:
        left.shift_right(right, settings.unsafe_cast),

    # Comparison
    T.EQUAL: _binary(_boolean(operator.__eq__)),
    T.NOT_EQUAL: _binary(_boolean(operator.__ne__)),
    T.LESS_THAN: _binary(_boolean(operator.__lt__)),
    T.LESS_OR_EQUAL: _binary(_boolean(operator.__le__)),
    T.GREATER_THAN: _binary(_boolean(operator.__gt__)),
    T.GREATER_OR_EQUAL: _binary(_boolean(operator.__ge__)),

    # Logical
    T.LOGICAL_OR: _binary(_boolean(lambda left, right: left or right)),
    T.LOGICAL_AND: _binary(_boolean(lambda left, right: left and right)),
}
UNARY_OPERATORS = {
    T.NEGATE: _unary(operator.__neg__),
    T.BIT_NOT: _unary(operator.__invert__),
    T.LOGICAL_NOT: _unary(_boolean(operator.__not__)),
    T.FACTORIAL: _factorial,
}


@wrap_user_errors('Cannot convert "{0.text}" to a number!')
def primitive_to_number(primitive):
    '''
    Parse a numeric or boolean literal primitive.
    '''
    if primitive.type is T.BOOLEAN:
        return Number(primitive.text == 'true')
    base = BASES[primitive.type]
    digits = regex.sub(r'[,_\s]', '', primitive.text)
    if base in (2, 16):
        digits = digits[len(PREFIXES[base]):]
    return from_base(digits, base)


def _span(primitive):
    return primitive.offset, primitive.end


def _pop(operands, n):
    '''
    Pop n operands, returned in the order they were pushed.
    '''
    popped = operands[len(operands) - n:]
    del operands[len(operands) - n:]
    return popped


def evaluate_rpn(rpn, function_map, variables, settings=DEFAULT_SETTINGS,
                 source=None):
    '''
    Run RPN primitives on a stack and return the single resulting Number.
    '''
    operands = []
    operators = 0
    for primitive in rpn:
        type_ = primitive.type
        if is_number(primitive) or type_ is T.BOOLEAN:
            operands.append(primitive_to_number(primitive))
            continue
        elif type_ is T.VARIABLE:
            if not variables.is_defined(primitive.text):
                raise EvaluationError('Variable "{}" is undefined!'
                                      .format(primitive.text),
                                      source=source, span=_span(primitive))
            operands.append(variables[primitive.text])
            continue

        operators += 1
        if type_ is T.FUNCTION_NAME:
            arity = function_map.get_params_count(primitive.text)
            if len(operands) < arity:
                raise EvaluationError('Not enough operands for function "{}"'
                                      .format(primitive.text),
                                      source=source, span=_span(primitive))
            operands.append(function_map.invoke(primitive.text,
                                                *_pop(operands, arity)))
        elif type_ is T.EXPONENT:
            if len(operands) < 2:
                raise EvaluationError('Not enough operands for binary '
                                      'operator {} ({})'
                                      .format(primitive.text, type_.value),
                                      source=source, span=_span(primitive))
            operands.append(function_map.invoke('pow', *_pop(operands, 2)))
        elif type_ in UNARY_OPERATORS:
            if not operands:
                raise EvaluationError('Not enough operands for unary '
                                      'operator {} ({})'
                                      .format(primitive.text, type_.value),
                                      source=source, span=_span(primitive))
            operands.append(_apply(UNARY_OPERATORS[type_], primitive,
                                   operands.pop(), settings))
        elif type_ in BINARY_OPERATORS:
            if len(operands) < 2:
                raise EvaluationError('Not enough operands for binary '
                                      'operator {} ({})'
                                      .format(primitive.text, type_.value),
                                      source=source, span=_span(primitive))
            operands.append(_apply(BINARY_OPERATORS[type_], primitive,
                                   *_pop(operands, 2), settings))
        else:
            raise CalcSyntaxError('Unexpected "{}" ({})!'
                                  .format(primitive.text, type_.value),
                                  source=source, span=_span(primitive))

    if not operands:
        raise EvaluationError('Invalid expression! (No operands)')
    elif len(operands) > 1:
        if operators:
            raise EvaluationError('Expression evaluated to "{}", but there '
                                  'were {} unmatched operands: {}'
                                  .format(operands[-1], len(operands) - 1,
                                          ', '.join(map(str, operands[:-1]))))
        raise EvaluationError('No operators were specified, but the '
                              'expression contained {} operands'
                              .format(len(operands)))
    return operands[0]


def _apply(f, primitive, *args):
    try:
        return f(*args)
    except ArithmeticError as e:
        raise EvaluationError('Operator {} ({}) failed with {}'
                              .format(primitive.text, primitive.type.value,
                                      type(e).__name__)) from e


class Machine:
    '''
    Evaluation session: owns the variables that persist across statements.

    Each ; separated statement is tokenized and evaluated on its own, so one
    failing statement doesn't prevent the next from running.
    '''

    def __init__(self, settings=None, function_map=None, variables=None):
        self.settings = settings or DEFAULT_SETTINGS
        self.function_map = FunctionMap() if function_map is None \
            else function_map
        self.variables = VarMap() if variables is None else variables

    def lex(self, text):
        return Lexer(text).all()

    def statements(self, text):
        '''
        Return lexemes of text grouped per statement, separators and EOF
        excluded. Empty statements are dropped.
        '''
        statements = [[]]
        for lexeme in self.lex(text):
            if lexeme.type is LexemeType.SEMICOLON:
                statements.append([])
            elif lexeme.type is not LexemeType.EOF:
                statements[-1].append(lexeme)
        return [statement for statement in statements if statement]

    def tokenize(self, lexemes, source):
        if self.settings.strict:
            for lexeme in lexemes:
                if lexeme.type is LexemeType.UNKNOWN:
                    raise Lexer.unrecognized(source, lexeme.offset)
        return PrimitiveTokenizer(lexemes, self.function_map, self.settings,
                                  source).tokenize()

    def compile(self, primitives, source):
        return to_rpn(primitives, self.function_map, source)

    @staticmethod
    def split_assignment(primitives, source=None):
        '''
        Return (variable name or None, expression primitives).

        A Setter is only valid directly after a leading variable name.
        '''
        name = None
        if len(primitives) >= 2 and primitives[0].type is T.VARIABLE \
           and primitives[1].type is T.SETTER:
            name = primitives[0].text
            primitives = primitives[2:]
        for primitive in primitives:
            if primitive.type is T.SETTER:
                raise CalcSyntaxError('Assignment "{}" must directly follow '
                                      'a variable name at the start of the '
                                      'statement!'.format(primitive.text),
                                      source=source,
                                      span=_span(primitive))
        return name, primitives

    def execute(self, primitives, source):
        '''
        Evaluate one statement's primitives, handling assignment.

        Returns None when the statement erased a variable.
        '''
        name, expression = self.split_assignment(primitives, source)
        if name is None:
            return self._evaluate(expression, source)
        elif not expression:
            log.debug('Erasing %s', name)
            self.variables.erase(name)
            return None
        value = self._evaluate(expression, source)
        log.debug('Assigning %s = %s', name, value)
        self.variables[name] = value
        return value

    def _evaluate(self, primitives, source):
        return evaluate_rpn(self.compile(primitives, source),
                            self.function_map,
                            self.variables,
                            self.settings,
                            source)

    def run(self, text):
        '''
        Yield an Outcome for every statement in text.
        '''
        for lexemes in self.statements(text):
            expression = text[lexemes[0].offset:lexemes[-1].end]
            try:
                result = self.execute(self.tokenize(lexemes, text), text)
            except CalcError as e:
                log.debug('%s failed', expression, exc_info=True)
                yield Outcome(expression, None, e)
            else:
                log.debug('%s => %s', expression, result)
                yield Outcome(expression, result, None)

    def evaluate(self, text):
        '''
        Run every statement, returning the last result.

        Raises the first statement's error, if any.
        '''
        outcomes = 0
        result = None
        for outcome in self.run(text):
            if outcome.error is not None:
                raise outcome.error
            outcomes += 1
            result = outcome.result
        if not outcomes:
            raise EvaluationError('Nothing to do!')
        return result
