'''
Built-in math function registry.

Every bound callable takes and returns Numbers; its arity is read off its
signature. Functions stay exact on integers wherever the operation allows,
and otherwise go through Decimal or, failing that, float.
'''

from collections import namedtuple
from decimal import (Decimal, ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR,
                     ROUND_HALF_EVEN, ROUND_HALF_UP)
from inspect import signature as getsignature, Parameter
import math

from .number import MAX_INTEGER_BITS, Number, REAL_CONTEXT
from .util import DomainError, EvaluationError, SuggestedFix


Function = namedtuple('Function', ['callable', 'description'])


def _arity(f):
    '''
    Return number of non-default positional arguments.
    '''
    parameters = getsignature(f).parameters.values()
    return len([parameter
                for parameter
                in parameters
                if parameter.kind == Parameter.POSITIONAL_OR_KEYWORD and
                   parameter.default == Parameter.empty])


def _unary(f):
    '''
    Lift a float -> float function to Numbers.
    '''
    def wrapped(x):
        return Number(f(float(x)))
    wrapped.__name__ = f.__name__
    return wrapped


def _binary(f):
    '''
    Lift a (float, float) -> float function to Numbers.
    '''
    def wrapped(x, y):
        return Number(f(float(x), float(y)))
    wrapped.__name__ = f.__name__
    return wrapped


def _rounding(mode):
    '''
    Round reals to an integral value in mode. Integers pass through.
    '''
    def wrapped(x):
        if x.is_integer() or not x.value.is_finite():
            return x
        return Number(x.value.to_integral_value(rounding=mode,
                                                context=REAL_CONTEXT))
    return wrapped


def power(base, exponent):
    '''
    Raise base to exponent, exactly when both are integers.
    '''
    if base.is_integer() and exponent.can_fit_value('int64'):
        n = exponent.cast_to(int)
        if n >= 0 and abs(base.value).bit_length() * n <= MAX_INTEGER_BITS:
            return Number(base.value ** n)
    return Number(REAL_CONTEXT.power(base.cast_to(Decimal),
                                     exponent.cast_to(Decimal)))


def sqrt(x):
    return Number(REAL_CONTEXT.sqrt(x.cast_to(Decimal)))


def cbrt(x):
    value = float(x)
    root = math.copysign(abs(value) ** (1 / 3), value)
    if x.is_integer() and round(root) ** 3 == x.value:
        return Number(round(root))
    return Number(root)


def exp(x):
    return Number(REAL_CONTEXT.exp(x.cast_to(Decimal)))


def exp2(x):
    return power(Number(2), x)


def log(x):
    return Number(REAL_CONTEXT.ln(x.cast_to(Decimal)))


def log10(x):
    return Number(REAL_CONTEXT.log10(x.cast_to(Decimal)))


def ldexp(x, exponent):
    return Number(math.ldexp(float(x), exponent.cast_to('int32')))


def ilogb(x):
    if x.is_zero():
        raise DomainError('ilogb(0) is undefined!')
    return Number(math.frexp(float(x))[1] - 1)


def logb(x):
    if x.is_zero():
        return Number(-math.inf)
    return ilogb(x)


def tgamma(x):
    return Number(math.gamma(float(x)))


def fmod(x, y):
    if y.is_zero():
        raise DomainError('fmod() by zero is undefined!')
    return x % y


def remainder(x, y):
    if y.is_zero():
        raise DomainError('remainder() by zero is undefined!')
    return Number(REAL_CONTEXT.remainder_near(x.cast_to(Decimal),
                                              y.cast_to(Decimal)))


def nextafter(x, y):
    return Number(math.nextafter(float(x), float(y)))


def fdim(x, y):
    return x - y if x > y else Number(0)


def maximum(x, y):
    return x if x >= y else y


def minimum(x, y):
    return x if x <= y else y


def absolute(x):
    return abs(x)


def fma(x, y, z):
    return Number(REAL_CONTEXT.fma(x.cast_to(Decimal), y.cast_to(Decimal),
                                   z.cast_to(Decimal)))


CATALOG = {
    # Trigonometric
    'cos': Function(_unary(math.cos), 'Compute cosine'),
    'sin': Function(_unary(math.sin), 'Compute sine'),
    'tan': Function(_unary(math.tan), 'Compute tangent'),
    'acos': Function(_unary(math.acos), 'Compute arc cosine'),
    'asin': Function(_unary(math.asin), 'Compute arc sine'),
    'atan': Function(_unary(math.atan), 'Compute arc tangent'),
    'atan2': Function(_binary(math.atan2),
                      'Compute arc tangent with two parameters'),
    # Hyperbolic
    'cosh': Function(_unary(math.cosh), 'Compute hyperbolic cosine'),
    'sinh': Function(_unary(math.sinh), 'Compute hyperbolic sine'),
    'tanh': Function(_unary(math.tanh), 'Compute hyperbolic tangent'),
    'acosh': Function(_unary(math.acosh), 'Compute area hyperbolic cosine'),
    'asinh': Function(_unary(math.asinh), 'Compute area hyperbolic sine'),
    'atanh': Function(_unary(math.atanh), 'Compute area hyperbolic tangent'),
    # Exponential and logarithmic
    'exp': Function(exp, 'Compute exponential function'),
    'ldexp': Function(ldexp,
                      'Generate value from significand and exponent'),
    'log': Function(log, 'Compute natural logarithm'),
    'log10': Function(log10, 'Compute common logarithm'),
    'exp2': Function(exp2, 'Compute binary exponential function'),
    'expm1': Function(_unary(math.expm1), 'Compute exponential minus one'),
    'ilogb': Function(ilogb, 'Integer binary logarithm'),
    'log1p': Function(_unary(math.log1p), 'Compute logarithm plus one'),
    'log2': Function(_unary(math.log2), 'Compute binary logarithm'),
    'logb': Function(logb, 'Compute floating-point base logarithm'),
    'scalbn': Function(ldexp,
                       'Scale significand using floating-point base '
                       'exponent'),
    # Power
    'pow': Function(power, 'Raise to power'),
    'sqrt': Function(sqrt, 'Compute square root'),
    'cbrt': Function(cbrt, 'Compute cubic root'),
    'hypot': Function(_binary(math.hypot), 'Compute hypotenuse'),
    # Error and gamma
    'erf': Function(_unary(math.erf), 'Compute error function'),
    'erfc': Function(_unary(math.erfc),
                     'Compute complementary error function'),
    'tgamma': Function(tgamma, 'Compute gamma function'),
    'lgamma': Function(_unary(math.lgamma), 'Compute log-gamma function'),
    # Rounding and remainder
    'ceil': Function(_rounding(ROUND_CEILING), 'Round up value'),
    'floor': Function(_rounding(ROUND_FLOOR), 'Round down value'),
    'fmod': Function(fmod, 'Compute remainder of division'),
    'trunc': Function(_rounding(ROUND_DOWN), 'Truncate value'),
    'round': Function(_rounding(ROUND_HALF_UP), 'Round to nearest'),
    'nearbyint': Function(_rounding(ROUND_HALF_EVEN),
                          'Round to nearby integral value'),
    'remainder': Function(remainder, 'Compute remainder of division'),
    # Floating-point manipulation
    'copysign': Function(_binary(math.copysign), 'Copy sign'),
    'nextafter': Function(nextafter, 'Next representable value'),
    # Minimum, maximum, difference
    'fdim': Function(fdim, 'Positive difference'),
    'max': Function(maximum, 'Get larger value'),
    'min': Function(minimum, 'Get smaller value'),
    # Other
    'abs': Function(absolute, 'Get Absolute Value'),
    'fma': Function(fma, 'Multiply-add'),
}


class FunctionMap:
    '''
    Read-only name -> Function lookup consulted by the tokenizer and
    evaluator.
    '''

    def __init__(self, functions=None):
        self.functions = dict(CATALOG if functions is None else functions)

    def get(self, name):
        try:
            return self.functions[name]
        except KeyError:
            raise EvaluationError('Function "{}" is undefined!'
                                  .format(name)) from None

    def is_function(self, name):
        return name in self.functions

    def get_params_count(self, name):
        return _arity(self.get(name).callable)

    def invoke(self, name, *args):
        '''
        Call name with args, re-raising anything it throws as
        EvaluationError.
        '''
        function = self.get(name)
        try:
            return function.callable(*args)
        except Exception as e:
            message = 'An exception was thrown by function "{}" with params ' \
                      '{}: {}'.format(name, ', '.join(map(str, args)),
                                      getattr(e, 'message', e))
            raise EvaluationError(message,
                                  fixes=getattr(e, 'fixes',
                                                SuggestedFix.NONE)) from e

    def __iter__(self):
        return iter(sorted(self.functions))

    def __len__(self):
        return len(self.functions)

    def table(self):
        '''
        Return a printable Function/Param#/Description table.
        '''
        rows = [('Function', 'Param#', 'Description')]
        rows.extend((name,
                     str(self.get_params_count(name)),
                     self.functions[name].description)
                    for name in self)
        widths = [max(len(row[column]) for row in rows)
                  for column in range(2)]
        return '\n'.join(row[0].ljust(widths[0]) + '  '
                         + row[1].center(widths[1]) + '  ' + row[2]
                         for row in rows)
