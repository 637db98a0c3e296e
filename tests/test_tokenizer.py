'''
Primitive tokenizer tests
'''

import regex

from calc.functions import FunctionMap
from calc.lexer import Lexer
from calc.settings import Settings
from calc.tokenizer import PrimitiveTokenizer
from calc.tokens import PrimitiveTokenType as T, is_number, stringify
from calc.util import CalcSyntaxError

from pytest import raises, mark


def primitives(text, **settings):
    return PrimitiveTokenizer(Lexer(text).all(),
                              FunctionMap(),
                              Settings(**settings),
                              text).tokenize()


def tokenize(text, **settings):
    return [(primitive.type, primitive.text)
            for primitive in primitives(text, **settings)]


def types(text, **settings):
    return [primitive.type for primitive in primitives(text, **settings)]


def test_leading_minus_negates():
    assert tokenize('-3') == [(T.NEGATE, '-'), (T.INTEGER, '3')]


def test_minus_after_operand_subtracts():
    assert types('2 - 3') == [T.INTEGER, T.SUBTRACT, T.INTEGER]
    assert types('2-3') == [T.INTEGER, T.SUBTRACT, T.INTEGER]
    assert types('x - (3)') == [T.VARIABLE, T.SUBTRACT, T.EXPRESSION_OPEN,
                                T.INTEGER, T.EXPRESSION_CLOSE]


def test_minus_after_operator_negates():
    assert types('2 * -x') == [T.INTEGER, T.MULTIPLY, T.NEGATE, T.VARIABLE]
    assert types('2 ^ -3') == [T.INTEGER, T.EXPONENT, T.NEGATE, T.INTEGER]
    assert types('(-3)') == [T.EXPRESSION_OPEN, T.NEGATE, T.INTEGER,
                             T.EXPRESSION_CLOSE]


def test_minus_before_operator_subtracts():
    assert types('- ~1') == [T.SUBTRACT, T.BIT_NOT, T.INTEGER]


def test_factorial_needs_adjacent_operand():
    assert types('3!') == [T.INTEGER, T.FACTORIAL]
    assert types('(3)!') == [T.EXPRESSION_OPEN, T.INTEGER,
                             T.EXPRESSION_CLOSE, T.FACTORIAL]
    assert types('3 !') == [T.INTEGER, T.LOGICAL_NOT]
    assert types('!x') == [T.LOGICAL_NOT, T.VARIABLE]


@mark.parametrize('text,type_', [
    ('!=', T.NOT_EQUAL),
    ('==', T.EQUAL),
    ('||', T.LOGICAL_OR),
    ('|', T.BIT_OR),
    ('&&', T.LOGICAL_AND),
    ('&', T.BIT_AND),
    ('<<', T.SHIFT_LEFT),
    ('>>', T.SHIFT_RIGHT),
    ('<=', T.LESS_OR_EQUAL),
    ('>=', T.GREATER_OR_EQUAL),
    ('<', T.LESS_THAN),
    ('>', T.GREATER_THAN),
    ('%', T.MODULO),
    ('/', T.DIVIDE),
])
def test_binary_operators(text, type_):
    assert tokenize('1 {} 2'.format(text))[1] == (type_, text)


def test_spaced_doubles_stay_single():
    assert types('1 | | 2') == [T.INTEGER, T.BIT_OR, T.BIT_OR, T.INTEGER]
    assert types('1 < < 2') == [T.INTEGER, T.LESS_THAN, T.LESS_THAN,
                                T.INTEGER]


def test_setters():
    assert types('x = 1') == [T.VARIABLE, T.SETTER, T.INTEGER]
    assert types('x : 1') == [T.VARIABLE, T.SETTER, T.INTEGER]


def test_caret_setting():
    assert types('1 ^ 2')[1] is T.EXPONENT
    assert types('1 ^ 2', caret_is_exponent=False)[1] is T.BIT_XOR


def test_booleans():
    assert tokenize('true || false') == [(T.BOOLEAN, 'true'),
                                         (T.LOGICAL_OR, '||'),
                                         (T.BOOLEAN, 'false')]


def test_alpha_run_is_one_variable():
    assert tokenize('my_var') == [(T.VARIABLE, 'my_var')]
    assert tokenize('ab cd') == [(T.VARIABLE, 'ab'), (T.VARIABLE, 'cd')]


def test_function_call():
    assert tokenize('pow(2, 3)') == [
        (T.FUNCTION_NAME, 'pow'),
        (T.EXPRESSION_OPEN, '('),
        (T.INTEGER, '2'),
        (T.TERM_SEPARATOR, ','),
        (T.INTEGER, '3'),
        (T.EXPRESSION_CLOSE, ')'),
    ]


def test_function_name_needs_adjacent_bracket():
    assert tokenize('sin (1)')[0] == (T.VARIABLE, 'sin')


def test_unknown_name_is_variable():
    assert tokenize('foo(1)')[0] == (T.VARIABLE, 'foo')


def test_no_function_map_means_no_functions():
    lexemes = Lexer('sin(1)').all()
    assert PrimitiveTokenizer(lexemes).tokenize()[0].type is T.VARIABLE


def test_nested_brackets():
    assert types('max(1, (2 + min(3, 4)))') == [
        T.FUNCTION_NAME, T.EXPRESSION_OPEN,
        T.INTEGER, T.TERM_SEPARATOR,
        T.EXPRESSION_OPEN,
        T.INTEGER, T.ADD,
        T.FUNCTION_NAME, T.EXPRESSION_OPEN,
        T.INTEGER, T.TERM_SEPARATOR, T.INTEGER,
        T.EXPRESSION_CLOSE,
        T.EXPRESSION_CLOSE,
        T.EXPRESSION_CLOSE,
    ]


@mark.parametrize('text', [
    '(1 + 2) * 3',
    'pow((1), (2))',
    '((((1))))',
    '1 + 2',
    'max(1, min(2, 3)); (4)',
])
def test_brackets_balance(text):
    found = types(text)
    assert found.count(T.EXPRESSION_OPEN) == found.count(T.EXPRESSION_CLOSE)
    depth = 0
    for type_ in found:
        if type_ is T.EXPRESSION_OPEN:
            depth += 1
        elif type_ is T.EXPRESSION_CLOSE:
            depth -= 1
        assert depth >= 0


def test_statement_separator():
    assert types('1; 2') == [T.INTEGER, T.SEPARATOR, T.INTEGER]


def test_unmatched_open():
    with raises(CalcSyntaxError,
                match=regex.escape('Unmatched open bracket!')) as e:
        tokenize('(1 + 2')
    assert '    (1 + 2\n    ^~~~~' in str(e.value)


def test_unmatched_close():
    with raises(CalcSyntaxError,
                match=regex.escape('Unmatched close bracket!')) as e:
        tokenize('1 + 2)')
    assert '    1 + 2)\n    ~~~~~^' in str(e.value)


def test_brackets_do_not_span_statements():
    with raises(CalcSyntaxError, match=regex.escape('Unmatched open')):
        tokenize('(1; 2)')


def test_nesting_limit():
    assert types('((1))', max_depth=2)
    with raises(CalcSyntaxError, match='maximum of 2'):
        tokenize('(((1)))', max_depth=2)


def test_unknown_lexeme():
    assert types('1 # 2') == [T.INTEGER, T.UNKNOWN, T.INTEGER]


def test_empty():
    assert tokenize('') == []


def test_stringify_collapses_gaps():
    assert stringify(primitives('pow(2,   10)')) == 'pow(2, 10)'
    assert stringify(primitives('1+2')) == '1+2'
    assert stringify(primitives('1  +  2'), include_ws=False) == '1+2'


def test_is_number():
    assert [is_number(primitive)
            for primitive in primitives('0x1 + x * 2.5')] == \
        [True, False, False, False, True]
