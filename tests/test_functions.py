'''
Built-in function registry tests
'''

from decimal import Decimal

import regex

from calc.functions import CATALOG, Function, FunctionMap, power
from calc.number import Number
from calc.util import EvaluationError, SuggestedFix

from pytest import raises, mark


def call(function_map, name, *args):
    return function_map.invoke(name, *map(Number, args))


def test_catalog_is_default(function_map):
    assert len(function_map) == len(CATALOG)
    assert list(function_map) == sorted(CATALOG)
    assert function_map.is_function('pow')
    assert not function_map.is_function('pi')


@mark.parametrize('name,arity', [
    ('sin', 1),
    ('abs', 1),
    ('pow', 2),
    ('atan2', 2),
    ('hypot', 2),
    ('fma', 3),
])
def test_params_count(function_map, name, arity):
    assert function_map.get_params_count(name) == arity


def test_undefined(function_map):
    with raises(EvaluationError,
                match=regex.escape('Function "nope" is undefined!')):
        function_map.get('nope')
    with raises(EvaluationError):
        function_map.get_params_count('nope')


def test_power_stays_exact(function_map):
    result = call(function_map, 'pow', 2, 10)
    assert result.is_integer()
    assert result == 1024
    assert call(function_map, 'pow', 3, 100) == 3 ** 100
    assert call(function_map, 'pow', 2, -1) == Number(0.5)
    assert call(function_map, 'pow', Decimal('1.5'), 2) == \
        Number(Decimal('2.25'))


def test_power_of_real_exponent():
    root = power(Number(2), Number(0.5))
    assert root.is_real()
    assert str(root).startswith('1.41421356237309504880')


@mark.parametrize('name,argument,expected', [
    ('floor', Decimal('-2.5'), -3),
    ('ceil', Decimal('2.1'), 3),
    ('trunc', Decimal('-2.7'), -2),
    ('round', Decimal('2.5'), 3),
    ('round', Decimal('-2.5'), -3),
    ('nearbyint', Decimal('2.5'), 2),
    ('floor', 7, 7),
])
def test_rounding(function_map, name, argument, expected):
    result = call(function_map, name, argument)
    assert result.is_integer()
    assert result == expected


def test_roots(function_map):
    assert call(function_map, 'sqrt', 16) == 4
    assert call(function_map, 'sqrt', 16).is_integer()
    assert str(call(function_map, 'sqrt', 2)).startswith('1.414213562373')
    assert call(function_map, 'cbrt', 27) == 3
    assert call(function_map, 'cbrt', -8) == -2
    assert call(function_map, 'hypot', 3, 4) == 5


def test_exponential_and_logarithm(function_map):
    assert call(function_map, 'exp', 0) == 1
    assert call(function_map, 'log', 1) == 0
    assert call(function_map, 'log10', 1000) == 3
    assert call(function_map, 'exp2', 10) == 1024
    assert call(function_map, 'ilogb', 8) == 3
    assert call(function_map, 'ldexp', 1, 4) == 16


def test_remainders(function_map):
    assert call(function_map, 'fmod', 7, 3) == 1
    assert call(function_map, 'fmod', -7, 3) == -1
    assert call(function_map, 'remainder', 7, 2) == -1
    assert call(function_map, 'remainder', 5, 3) == -1


def test_differences(function_map):
    assert call(function_map, 'fdim', 5, 3) == 2
    assert call(function_map, 'fdim', 3, 5) == 0
    assert call(function_map, 'max', 1, 2) == 2
    assert call(function_map, 'min', 1, 2) == 1
    assert call(function_map, 'abs', -4) == 4
    assert call(function_map, 'fma', 2, 3, 4) == 10


def test_trigonometry(function_map):
    assert call(function_map, 'sin', 0) == 0
    assert call(function_map, 'cos', 0) == 1
    assert call(function_map, 'atan2', 0, 1) == 0


def test_failures_are_wrapped(function_map):
    with raises(EvaluationError,
                match=regex.escape('An exception was thrown by function '
                                   '"fmod" with params 1, 0: fmod() by zero '
                                   'is undefined!')):
        call(function_map, 'fmod', 1, 0)
    with raises(EvaluationError, match='function "acos"'):
        call(function_map, 'acos', 2)
    with raises(EvaluationError, match='function "sqrt"'):
        call(function_map, 'sqrt', -1)
    with raises(EvaluationError, match='function "ilogb"'):
        call(function_map, 'ilogb', 0)


def test_wrapped_failures_keep_fixes(function_map):
    with raises(EvaluationError) as e:
        call(function_map, 'ldexp', 1, 2 ** 40)
    assert SuggestedFix.UNSAFE_CAST in e.value.fixes


def test_custom_functions():
    function_map = FunctionMap({
        'double': Function(lambda x: x * Number(2), 'Double a value'),
    })
    assert len(function_map) == 1
    assert function_map.get_params_count('double') == 1
    assert function_map.invoke('double', Number(21)) == 42
    assert not function_map.is_function('pow')


def test_table(function_map):
    lines = function_map.table().splitlines()
    assert regex.match(r'Function\s+Param#\s+Description', lines[0])
    assert len(lines) == len(CATALOG) + 1
    assert any(regex.match(r'pow\s+2\s+Raise to power', line)
               for line in lines)
