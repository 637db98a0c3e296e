from functools import reduce
import logging
import operator

import regex

from .tokens import Lexeme, LexemeType
from .util import LexicalError


log = logging.getLogger(__name__)
DIGITS = '0123456789'


class Lexer:
    '''
    Scanner turning expression text into lexemes, one per ``next()``.

    Restartable: ``reset()`` rewinds to the beginning. Past the end of the
    text, ``next()`` keeps returning an EOF lexeme.

    Literal text is captured verbatim; malformed digit runs are only rejected
    once they're converted to numbers.
    '''
    # 0b1010, 0b10_10, but not 0b_1 or 0b1_
    BINARY = r'''
              0b
              (?:
                  [01]+
                  (?:
                      # Underscores only between binary digits
                      _[01]+
                  )*
              )?
              '''
    HEXADECIMAL = r'''
                   0x
                   [0-9A-Fa-f]*
                   '''
    # 1, 1_000, 1,000, 1.5, 1., .5
    # A comma only counts as a thousands separator when followed by exactly
    # three digits, so that pow(2,10) stays a two argument call.
    DECIMAL = r'''
               (?:
                   [0-9]+
                   (?:
                       ,[0-9]{3}(?![0-9])
                       |
                       _[0-9]+
                   )*
                   (?:
                       \.
                       [0-9]*
                       (?:
                           _[0-9]+
                       )*
                   )?
               )|(?:
                   \.
                   [0-9]+
                   (?:
                       _[0-9]+
                   )*
               )
               '''
    SPACE = r'\s+'
    OPERATORS = '+-*/%^!|&~'
    PUNCTUATION = {
        '=': LexemeType.EQUAL,
        ':': LexemeType.COLON,
        ';': LexemeType.SEMICOLON,
        ',': LexemeType.COMMA,
        '.': LexemeType.PERIOD,
        '$': LexemeType.MACRO,
        '@': LexemeType.MACRO,
        '<': LexemeType.ANGLE_OPEN,
        '>': LexemeType.ANGLE_CLOSE,
        '[': LexemeType.SQUARE_OPEN,
        ']': LexemeType.SQUARE_CLOSE,
        '(': LexemeType.PARENTHESIS_OPEN,
        ')': LexemeType.PARENTHESIS_CLOSE,
        '{': LexemeType.BRACE_OPEN,
        '}': LexemeType.BRACE_CLOSE,
    }
    # Default regex flags for matching literals
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self, text, *, strict=False):
        self.text = text
        self.strict = strict
        self.position = 0

    def reset(self):
        self.position = 0

    def _match(self, pattern):
        return regex.match(pattern, self.text,
                           flags=type(self).FLAGS,
                           pos=self.position)

    def _emit(self, type_, length=1):
        lexeme = Lexeme(type_, self.position,
                        self.text[self.position:self.position + length])
        self.position += len(lexeme.text)
        return lexeme

    @staticmethod
    def _classify(literal):
        '''
        Decide between Real, Octal, and Int for a decimal-looking literal.
        '''
        if '.' in literal:
            return LexemeType.REAL_NUMBER
        digits = literal.replace(',', '').replace('_', '')
        if len(digits) > 1 and digits.startswith('0') \
           and not regex.search(r'[89]', digits):
            return LexemeType.OCTAL_NUMBER
        return LexemeType.INT_NUMBER

    def next(self):
        '''
        Scan and return the next lexeme.
        '''
        space = self._match(type(self).SPACE)
        if space is not None:
            self.position = space.end()
        if self.position >= len(self.text):
            return Lexeme(LexemeType.EOF, len(self.text), '')

        char = self.text[self.position]
        following = self.text[self.position + 1:self.position + 2]
        if char in DIGITS or char == '.' and following \
           and following in DIGITS:
            for pattern, type_ in ((type(self).BINARY,
                                    LexemeType.BINARY_NUMBER),
                                   (type(self).HEXADECIMAL,
                                    LexemeType.HEX_NUMBER)):
                match = self._match(pattern)
                if match is not None:
                    return self._emit(type_, len(match.group()))
            literal = self._match(type(self).DECIMAL).group()
            return self._emit(self._classify(literal), len(literal))
        elif char.isalpha() or char == '_':
            return self._emit(LexemeType.ALPHA)
        elif char == '\\':
            return self._emit(LexemeType.ESCAPE, 2)
        elif char in type(self).OPERATORS:
            return self._emit(LexemeType.OPERATOR)
        elif char in type(self).PUNCTUATION:
            return self._emit(type(self).PUNCTUATION[char])
        elif self.strict:
            raise self.unrecognized(self.text, self.position)
        return self._emit(LexemeType.UNKNOWN)

    @staticmethod
    def unrecognized(text, position):
        return LexicalError('Unrecognized character "{}" at offset {}!'
                            .format(text[position], position),
                            source=text,
                            span=(position, position + 1))

    def __iter__(self):
        '''
        Yield lexemes up to, not including, EOF.
        '''
        while True:
            lexeme = self.next()
            if lexeme.type is LexemeType.EOF:
                return
            yield lexeme

    def all(self):
        '''
        Drain the stream. The last lexeme is always EOF.
        '''
        lexemes = list(self)
        lexemes.append(self.next())
        log.debug('Lexed %r into %s', self.text,
                  [(lexeme.type.name, lexeme.text) for lexeme in lexemes])
        return lexemes

    @classmethod
    def grammar(cls):
        '''
        Return (name, pattern) pairs for the literal grammar.
        '''
        return [('binary', cls.BINARY),
                ('hexadecimal', cls.HEXADECIMAL),
                ('decimal', cls.DECIMAL),
                ('space', cls.SPACE)]
