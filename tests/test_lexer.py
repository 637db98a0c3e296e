'''
Lexer tests
'''

import regex

from calc.lexer import Lexer
from calc.tokens import LexemeType as L
from calc.util import LexicalError

from pytest import raises


def lex(text, **kwargs):
    return [(lexeme.type, lexeme.text) for lexeme in Lexer(text, **kwargs)]


def test_number_literals():
    assert lex('0b1010 017 0x1F 42 1.5 .5 3.') == [
        (L.BINARY_NUMBER, '0b1010'),
        (L.OCTAL_NUMBER, '017'),
        (L.HEX_NUMBER, '0x1F'),
        (L.INT_NUMBER, '42'),
        (L.REAL_NUMBER, '1.5'),
        (L.REAL_NUMBER, '.5'),
        (L.REAL_NUMBER, '3.'),
    ]


def test_octal_needs_octal_digits():
    assert lex('018') == [(L.INT_NUMBER, '018')]
    assert lex('0') == [(L.INT_NUMBER, '0')]


def test_separators_stay_in_literal():
    assert lex('1,000,000') == [(L.INT_NUMBER, '1,000,000')]
    assert lex('1_000') == [(L.INT_NUMBER, '1_000')]
    assert lex('0b10_10') == [(L.BINARY_NUMBER, '0b10_10')]


def test_binary_underscore_only_between_digits():
    assert lex('0b1_') == [(L.BINARY_NUMBER, '0b1'), (L.ALPHA, '_')]


def test_commas_between_arguments():
    assert lex('pow(2,10)') == [
        (L.ALPHA, 'p'),
        (L.ALPHA, 'o'),
        (L.ALPHA, 'w'),
        (L.PARENTHESIS_OPEN, '('),
        (L.INT_NUMBER, '2'),
        (L.COMMA, ','),
        (L.INT_NUMBER, '10'),
        (L.PARENTHESIS_CLOSE, ')'),
    ]


def test_punctuation():
    assert lex('= : ; . $ @ < > [ ] { } \\a + ~') == [
        (L.EQUAL, '='),
        (L.COLON, ':'),
        (L.SEMICOLON, ';'),
        (L.PERIOD, '.'),
        (L.MACRO, '$'),
        (L.MACRO, '@'),
        (L.ANGLE_OPEN, '<'),
        (L.ANGLE_CLOSE, '>'),
        (L.SQUARE_OPEN, '['),
        (L.SQUARE_CLOSE, ']'),
        (L.BRACE_OPEN, '{'),
        (L.BRACE_CLOSE, '}'),
        (L.ESCAPE, '\\a'),
        (L.OPERATOR, '+'),
        (L.OPERATOR, '~'),
    ]


def test_offsets_skip_whitespace():
    lexemes = list(Lexer('1 +  22'))
    assert [lexeme.offset for lexeme in lexemes] == [0, 2, 5]
    assert not lexemes[0].is_adjacent_to(lexemes[1])


def test_unknown_character():
    assert lex('1 # 2') == [(L.INT_NUMBER, '1'),
                            (L.UNKNOWN, '#'),
                            (L.INT_NUMBER, '2')]


def test_unknown_character_strict():
    with raises(LexicalError,
                match=regex.escape('Unrecognized character "#" at offset 2!')):
        lex('1 # 2', strict=True)


def test_eof_forever():
    lexer = Lexer('1')
    assert lexer.next().type is L.INT_NUMBER
    for _ in range(3):
        eof = lexer.next()
        assert eof.type is L.EOF
        assert eof.offset == 1


def test_reset_restarts():
    lexer = Lexer('a')
    assert lexer.next().text == 'a'
    lexer.reset()
    assert lexer.next().text == 'a'


def test_all_ends_with_eof():
    lexemes = Lexer('1 + 2').all()
    assert len(lexemes) == 4
    assert lexemes[-1].type is L.EOF
    assert Lexer('').all()[0].type is L.EOF
