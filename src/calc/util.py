from enum import Flag, auto
from functools import wraps


class SuggestedFix(Flag):
    '''
    Remediation hints attached to errors.
    '''
    NONE = 0
    SMALLER_NUMBERS = auto()
    UNSAFE_CAST = auto()
    ROUND_FLOAT = auto()
    ENCLOSE_IN_QUOTES = auto()


SUGGESTED_FIXES = {
    SuggestedFix.SMALLER_NUMBERS:
        'Try using smaller numbers in your expression.',
    SuggestedFix.UNSAFE_CAST:
        "Disable unsafe cast exceptions by specifying the "
        "'-E|--unsafe-cast' option.",
    SuggestedFix.ROUND_FLOAT:
        'Convert the floating-point to an integer with round(), trunc(), '
        'ceil(), or floor().',
    SuggestedFix.ENCLOSE_IN_QUOTES:
        'Enclose the expression with double-quotes (").',
}

INDENT = 4


def pointer(source, start, stop, begin=None, end=None, indent=INDENT):
    '''
    Render source with a marker line underneath.

    The offending range [start, stop) is drawn with carets, the surrounding
    context [begin, end) with tildes.
    '''
    begin = start if begin is None else min(begin, start)
    stop = max(stop, start + 1)
    end = stop if end is None else max(end, stop)
    pad = ' ' * indent
    return '\n'.join([
        pad + source.rstrip('\n'),
        pad + ' ' * begin
            + '~' * (start - begin)
            + '^' * (stop - start)
            + '~' * (end - stop),
    ])


class CalcError(Exception):
    '''
    Base of every error raised while evaluating an expression.

    :param message: What went wrong.
    :param source: Expression text the span offsets refer to.
    :param span: (start, stop) offsets of the offending text.
    :param context: (begin, end) offsets of the surrounding statement.
    :param fixes: SuggestedFix flags to list under the message.
    '''

    def __init__(self, message, *, source=None, span=None, context=None,
                 fixes=SuggestedFix.NONE):
        self.message = message
        self.source = source
        self.span = span
        self.context = context
        self.fixes = fixes
        super().__init__(message)

    def __str__(self):
        return self.format()

    def format(self):
        lines = [self.message]
        if self.source is not None and self.span is not None:
            begin, end = self.context or (None, None)
            lines.append(pointer(self.source, *self.span, begin, end))
        if self.fixes:
            lines.append(' ' * INDENT + 'Suggested Fixes:')
            lines.extend(' ' * INDENT + '- ' + description
                         for fix, description in SUGGESTED_FIXES.items()
                         if fix in self.fixes)
        return '\n'.join(lines)


class LexicalError(CalcError):
    pass


class CalcSyntaxError(CalcError):
    pass


class ArityError(CalcError):
    def __init__(self, name, expected, actual, **kwargs):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__('Function "{}" expects {} argument(s), '
                         'but {} {} provided! (Expected: {}, Actual: {})'
                         .format(name, expected, actual,
                                 'was' if actual == 1 else 'were',
                                 expected, actual),
                         **kwargs)


class EvaluationError(CalcError):
    pass


class DomainError(EvaluationError):
    pass


class PrecisionError(CalcError):
    def __init__(self, message, fixes=SuggestedFix.NONE, **kwargs):
        super().__init__(message, fixes=SuggestedFix.UNSAFE_CAST | fixes,
                         **kwargs)


def wrap_user_errors(fmt, error=EvaluationError):
    '''
    Decorator that converts foreign exceptions to calculator errors.

    Passes through CalcErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
