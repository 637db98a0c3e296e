'''
Numeric value model.

A Number is either an exact integer (``int``) or an arbitrary precision real
(``Decimal``). Whole reals collapse to the integer representation, so
``Number(4.0)`` and ``Number(4)`` are indistinguishable.
'''

from decimal import Context, Decimal, MAX_EMAX, MIN_EMIN
import operator
import struct
import sys

from .util import DomainError, EvaluationError, PrecisionError, SuggestedFix


# 100 significant digits, exponent range as wide as the platform allows.
REAL_CONTEXT = Context(prec=100, Emax=MAX_EMAX, Emin=MIN_EMIN)
# Widest integer, in bits, that arithmetic may produce.
MAX_INTEGER_BITS = 1 << 20

# Integral cast targets: name -> (minimum, maximum)
FIXED_WIDTHS = {
    'int8': (-2 ** 7, 2 ** 7 - 1),
    'int16': (-2 ** 15, 2 ** 15 - 1),
    'int32': (-2 ** 31, 2 ** 31 - 1),
    'int64': (-2 ** 63, 2 ** 63 - 1),
    'uint8': (0, 2 ** 8 - 1),
    'uint16': (0, 2 ** 16 - 1),
    'uint32': (0, 2 ** 32 - 1),
    'uint64': (0, 2 ** 64 - 1),
}
# Floating-point cast targets: name -> largest finite magnitude
FLOAT_LIMITS = {
    'float32': 3.4028234663852886e+38,
    'float64': sys.float_info.max,
}

PREFIXES = {
    2: '0b',
    8: '0',
    16: '0x',
}
_DIGIT_FORMATS = {
    2: 'b',
    8: 'o',
    16: 'X',
}


def _normalize(real):
    '''
    Collapse whole reals to int.
    '''
    if not real.is_finite() or real != real.to_integral_value():
        return real
    # log10(2) ~ 0.301
    if real.adjusted() > MAX_INTEGER_BITS * 3 // 10:
        raise EvaluationError('{:E} is too large to hold as an integer!'
                              .format(real),
                              fixes=SuggestedFix.SMALLER_NUMBERS)
    return int(real)


def check_width(bits, symbol, name):
    '''
    Raise EvaluationError if an operator result would need more than
    MAX_INTEGER_BITS.
    '''
    if bits > MAX_INTEGER_BITS:
        raise EvaluationError('Operator {} ({}) would produce a result wider '
                              'than {} bits!'.format(symbol, name,
                                                    MAX_INTEGER_BITS),
                              fixes=SuggestedFix.SMALLER_NUMBERS)


def _real(value):
    return value if isinstance(value, Decimal) else Decimal(value)


def _truncating_div(left, right):
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def _truncating_mod(left, right):
    return left - right * _truncating_div(left, right)


def _coerce(value):
    if isinstance(value, Number):
        return value
    if isinstance(value, (int, float, Decimal)):
        return Number(value)
    return None


def _target_name(target):
    if target is int:
        return 'int'
    elif target is float:
        return 'float64'
    elif target is Decimal:
        return 'Decimal'
    elif target in FIXED_WIDTHS or target in FLOAT_LIMITS:
        return target
    raise ValueError('Unknown cast target {!r}'.format(target))


def _arithmetic(int_op, real_op):
    def method(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        left, right = self.value, other.value
        if isinstance(left, int) and isinstance(right, int):
            return Number(int_op(left, right))
        return Number(real_op(_real(left), _real(right)))
    return method


def _reflected(name):
    def method(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return getattr(other, name)(self)
    return method


def _bitwise(symbol, name, op):
    def method(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._require_integral(symbol, name, 'left', other)
        return Number(op(self.cast_to(int), other.cast_to(int)))
    return method


def _comparison(op):
    def method(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self.is_nan() or other.is_nan():
            return op is operator.ne
        return op(self.value, other.value)
    return method


class Number:
    '''
    Exact integer or arbitrary precision real.

    Same-kind arithmetic stays in that kind (integer division truncates
    toward zero); mixed arithmetic is carried out on reals and the result
    normalized back to an integer when whole.
    '''

    __slots__ = ('value',)

    def __init__(self, value=0):
        if isinstance(value, Number):
            value = value.value
        if isinstance(value, bool):
            value = int(value)
        if isinstance(value, int):
            self.value = value
        elif isinstance(value, float):
            self.value = _normalize(Decimal(repr(value)))
        elif isinstance(value, Decimal):
            self.value = _normalize(value)
        else:
            raise TypeError('Cannot make a Number from {!r}'.format(value))

    @property
    def kind(self):
        return 'integer' if self.is_integer() else 'real'

    def is_integer(self):
        return isinstance(self.value, int)

    def is_real(self):
        return not self.is_integer()

    def is_nan(self):
        return self.is_real() and self.value.is_nan()

    def has_integral_value(self):
        '''
        True for integers and for finite reals with no fractional part.
        '''
        if self.is_integer():
            return True
        return self.value.is_finite() \
            and self.value == self.value.to_integral_value()

    def is_zero(self):
        return self.value == 0

    def is_positive(self):
        return not self.is_nan() and self.value > 0

    def can_fit_value(self, target):
        '''
        Return True if casting to target keeps the value intact.

        :param target: int, float, Decimal, or a FIXED_WIDTHS/FLOAT_LIMITS
                       name.
        '''
        name = _target_name(target)
        if name == 'int':
            return self.has_integral_value()
        elif name == 'Decimal':
            return True
        elif name in FIXED_WIDTHS:
            minimum, maximum = FIXED_WIDTHS[name]
            return self.has_integral_value() \
                and minimum <= self.value <= maximum
        if self.is_real() and not self.value.is_finite():
            return True
        limit = FLOAT_LIMITS[name]
        return -limit <= self.value <= limit

    def cast_to(self, target, unsafe=False):
        '''
        Convert to target, raising PrecisionError if the value won't survive.

        :param unsafe: Wrap integers and saturate floats instead of raising.
        '''
        name = _target_name(target)
        if not unsafe and not self.can_fit_value(target):
            if name in FLOAT_LIMITS or self.has_integral_value():
                fixes = SuggestedFix.SMALLER_NUMBERS
            else:
                fixes = SuggestedFix.ROUND_FLOAT
            raise PrecisionError('Cannot convert from "{}" to type "{}" '
                                 'because the conversion would lose '
                                 'precision!'.format(self.kind, name),
                                 fixes)
        if name == 'Decimal':
            return _real(self.value)
        elif name in FLOAT_LIMITS:
            return self._to_float(name)
        if self.is_real() and not self.value.is_finite():
            raise PrecisionError('Cannot convert {} to type "{}"!'
                                 .format(self, name))
        value = int(self.value)
        if name in FIXED_WIDTHS:
            minimum, maximum = FIXED_WIDTHS[name]
            value = (value - minimum) % (maximum - minimum + 1) + minimum
        return value

    def _to_float(self, name):
        try:
            value = float(self.value)
        except OverflowError:
            value = float('inf') if self.value > 0 else float('-inf')
        if name == 'float32':
            try:
                value = struct.unpack('f', struct.pack('f', value))[0]
            except OverflowError:
                value = float('inf') if value > 0 else float('-inf')
        return value

    def _require_integral(self, symbol, name, side, other=None):
        for operand_side, operand in ((side, self), ('right', other)):
            if operand is not None and not operand.has_integral_value():
                raise DomainError('Operator {} ({}) requires integral types, '
                                  'but the {}-side operand was {}!'
                                  .format(symbol, name, operand_side,
                                          operand))

    def rounded(self, places):
        '''
        Round a real to a number of decimal places. Integers are unchanged.
        '''
        if self.is_integer() or not self.value.is_finite():
            return self
        exponent = Decimal(1).scaleb(-places)
        if self.value.adjusted() + places >= REAL_CONTEXT.prec:
            return self
        return Number(self.value.quantize(exponent, context=REAL_CONTEXT))

    __add__ = _arithmetic(operator.add, REAL_CONTEXT.add)
    __sub__ = _arithmetic(operator.sub, REAL_CONTEXT.subtract)
    __mul__ = _arithmetic(operator.mul, REAL_CONTEXT.multiply)
    __truediv__ = _arithmetic(_truncating_div, REAL_CONTEXT.divide)
    __mod__ = _arithmetic(_truncating_mod, REAL_CONTEXT.remainder)

    __radd__ = _reflected('__add__')
    __rsub__ = _reflected('__sub__')
    __rmul__ = _reflected('__mul__')
    __rtruediv__ = _reflected('__truediv__')
    __rmod__ = _reflected('__mod__')

    __or__ = _bitwise('|', 'BitwiseOR', operator.or_)
    __and__ = _bitwise('&', 'BitwiseAND', operator.and_)
    __xor__ = _bitwise('^', 'BitwiseXOR', operator.xor)

    def __neg__(self):
        if self.is_integer():
            return Number(-self.value)
        return Number(REAL_CONTEXT.minus(self.value))

    def __abs__(self):
        if self.is_integer():
            return Number(abs(self.value))
        return Number(REAL_CONTEXT.abs(self.value))

    def __invert__(self):
        self._require_integral('~', 'BitwiseNOT', 'left')
        return Number(~self.cast_to(int))

    def shift_left(self, other, unsafe=False):
        return self._shift('<<', 'BitshiftLeft', operator.lshift, other,
                           unsafe)

    def shift_right(self, other, unsafe=False):
        return self._shift('>>', 'BitshiftRight', operator.rshift, other,
                           unsafe)

    def _shift(self, symbol, name, op, other, unsafe):
        other = _coerce(other)
        self._require_integral(symbol, name, 'left', other)
        count = other.cast_to('int32', unsafe=unsafe)
        if count < 0:
            raise DomainError('Operator {} ({}) requires a non-negative '
                              'shift count, but the right-side operand was '
                              '{}!'.format(symbol, name, other))
        value = self.cast_to(int)
        if value and op is operator.lshift:
            check_width(value.bit_length() + count, symbol, name)
        return Number(op(value, count))

    def __lshift__(self, other):
        return self.shift_left(other)

    def __rshift__(self, other):
        return self.shift_right(other)

    __eq__ = _comparison(operator.eq)
    __ne__ = _comparison(operator.ne)
    __lt__ = _comparison(operator.lt)
    __le__ = _comparison(operator.le)
    __gt__ = _comparison(operator.gt)
    __ge__ = _comparison(operator.ge)

    def __hash__(self):
        return hash(self.value)

    def __bool__(self):
        return not self.is_zero()

    def __int__(self):
        return self.cast_to(int)

    def __float__(self):
        return self.cast_to(float)

    def __str__(self):
        if self.is_integer():
            # Unlike str(), exact past sys.get_int_max_str_digits()
            return format(Decimal(self.value), 'f')
        return format(REAL_CONTEXT.normalize(self.value), 'f')

    def __repr__(self):
        return 'Number({})'.format(self)


def from_base(text, base):
    '''
    Parse digits (without prefix or separators) in base into a Number.
    '''
    if base == 10:
        if '.' in text:
            return Number(Decimal(text))
        if not text.isdigit():
            raise ValueError('Invalid decimal digits "{}"'.format(text))
        return Number(int(Decimal(text)))
    elif '.' in text:
        raise DomainError('Cannot convert floating-point {} from base {} '
                          "which doesn't support floating-point values!"
                          .format(text, base))
    return Number(int(text, base))


def to_base(number, base=10):
    '''
    Format number in base, with its 0b/0/0x prefix.

    Only base 10 can represent reals.
    '''
    if base == 10:
        return str(number)
    elif base not in PREFIXES:
        raise ValueError('Unsupported base {}'.format(base))
    if not number.has_integral_value():
        raise DomainError('Cannot convert floating-point value {} to base {} '
                          "(float to base conversions aren't supported)."
                          .format(number, base))
    value = number.cast_to(int)
    digits = format(abs(value), _DIGIT_FORMATS[base])
    if base == 8 and digits == '0':
        return digits
    return ('-' if value < 0 else '') + PREFIXES[base] + digits
