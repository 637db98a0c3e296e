import logging

from .settings import DEFAULT_SETTINGS
from .tokens import (LexemeType, Primitive, PrimitiveTokenType,
                     evaluates_to_number, lexeme_evaluates_to_number)
from .util import CalcSyntaxError


log = logging.getLogger(__name__)

LITERALS = {
    LexemeType.BINARY_NUMBER: PrimitiveTokenType.BINARY,
    LexemeType.OCTAL_NUMBER: PrimitiveTokenType.OCTAL,
    LexemeType.HEX_NUMBER: PrimitiveTokenType.HEXADECIMAL,
    LexemeType.INT_NUMBER: PrimitiveTokenType.INTEGER,
    LexemeType.REAL_NUMBER: PrimitiveTokenType.REAL,
}
PUNCTUATION = {
    LexemeType.COLON: PrimitiveTokenType.SETTER,
    LexemeType.COMMA: PrimitiveTokenType.TERM_SEPARATOR,
    LexemeType.SEMICOLON: PrimitiveTokenType.SEPARATOR,
    LexemeType.PARENTHESIS_CLOSE: PrimitiveTokenType.EXPRESSION_CLOSE,
}
# Operators whose meaning doesn't depend on their neighbours
SIMPLE_OPERATORS = {
    '+': PrimitiveTokenType.ADD,
    '*': PrimitiveTokenType.MULTIPLY,
    '/': PrimitiveTokenType.DIVIDE,
    '%': PrimitiveTokenType.MODULO,
    '~': PrimitiveTokenType.BIT_NOT,
}
# Single character, doubled character
DOUBLING_OPERATORS = {
    '|': (PrimitiveTokenType.BIT_OR, PrimitiveTokenType.LOGICAL_OR),
    '&': (PrimitiveTokenType.BIT_AND, PrimitiveTokenType.LOGICAL_AND),
}
# Alone, doubled, followed by =
ANGLES = {
    LexemeType.ANGLE_OPEN: (PrimitiveTokenType.LESS_THAN,
                            PrimitiveTokenType.SHIFT_LEFT,
                            PrimitiveTokenType.LESS_OR_EQUAL),
    LexemeType.ANGLE_CLOSE: (PrimitiveTokenType.GREATER_THAN,
                             PrimitiveTokenType.SHIFT_RIGHT,
                             PrimitiveTokenType.GREATER_OR_EQUAL),
}
BOOLEANS = {'true', 'false'}


def combine(type_, lexemes):
    '''
    Merge adjacent lexemes into one primitive.
    '''
    return Primitive(type_, lexemes[0].offset,
                     ''.join(lexeme.text for lexeme in lexemes))


class PrimitiveTokenizer:
    '''
    Reinterprets lexemes as semantically typed primitive tokens.

    Brackets are validated up front, then every parenthesized range is
    tokenized recursively between an ExpressionOpen/ExpressionClose pair.
    '''

    def __init__(self, lexemes, function_map=None, settings=DEFAULT_SETTINGS,
                 source=None):
        self.lexemes = [lexeme
                        for lexeme in lexemes
                        if lexeme.type is not LexemeType.EOF]
        self.function_map = function_map
        self.settings = settings
        self.source = source if source is not None else self._rebuild()
        self.pairs = {}

    def _rebuild(self):
        '''
        Reconstruct source text from lexeme offsets, for error pointers.
        '''
        chars = []
        for lexeme in self.lexemes:
            chars.extend(' ' * (lexeme.offset - len(chars)))
            chars.extend(lexeme.text)
        return ''.join(chars)

    def _statement(self, index):
        '''
        Return (begin, end) source offsets of the statement around index.
        '''
        first = last = index
        while first > 0 \
                and self.lexemes[first - 1].type is not LexemeType.SEMICOLON:
            first -= 1
        while last + 1 < len(self.lexemes) \
                and self.lexemes[last + 1].type is not LexemeType.SEMICOLON:
            last += 1
        return self.lexemes[first].offset, self.lexemes[last].end

    def _error(self, message, index):
        lexeme = self.lexemes[index]
        return CalcSyntaxError(message,
                               source=self.source,
                               span=(lexeme.offset, lexeme.end),
                               context=self._statement(index))

    def _at(self, index, end):
        return self.lexemes[index] if index < end else None

    def _adjacent(self, index, end, type_, text=None):
        '''
        True if the lexeme after index is of type_ and touches it.
        '''
        following = self._at(index + 1, end)
        return following is not None \
            and following.type is type_ \
            and (text is None or following.text == text) \
            and self.lexemes[index].is_adjacent_to(following)

    def _operator(self, index, end, previous):
        '''
        Return (primitive, lexemes consumed) for an operator lexeme.
        '''
        lexeme = self.lexemes[index]
        char = lexeme.text
        if char in SIMPLE_OPERATORS:
            return Primitive(SIMPLE_OPERATORS[char], lexeme.offset, char), 1
        elif char == '-':
            following = self._at(index + 1, end)
            if following is not None \
               and (previous is None
                    or not evaluates_to_number(previous)
                    or previous.type is PrimitiveTokenType.EXPRESSION_OPEN) \
               and lexeme_evaluates_to_number(following):
                type_ = PrimitiveTokenType.NEGATE
            else:
                type_ = PrimitiveTokenType.SUBTRACT
            return Primitive(type_, lexeme.offset, char), 1
        elif char == '!':
            if self._adjacent(index, end, LexemeType.EQUAL):
                return combine(PrimitiveTokenType.NOT_EQUAL,
                               self.lexemes[index:index + 2]), 2
            if previous is not None and previous.is_adjacent_to(lexeme) \
               and evaluates_to_number(previous):
                type_ = PrimitiveTokenType.FACTORIAL
            else:
                type_ = PrimitiveTokenType.LOGICAL_NOT
            return Primitive(type_, lexeme.offset, char), 1
        elif char in DOUBLING_OPERATORS:
            single, double = DOUBLING_OPERATORS[char]
            if self._adjacent(index, end, LexemeType.OPERATOR, char):
                return combine(double, self.lexemes[index:index + 2]), 2
            return Primitive(single, lexeme.offset, char), 1
        elif char == '^':
            if self.settings.caret_is_exponent:
                type_ = PrimitiveTokenType.EXPONENT
            else:
                type_ = PrimitiveTokenType.BIT_XOR
            return Primitive(type_, lexeme.offset, char), 1
        raise self._error('No implementation available for operator "{}"'
                          .format(char), index)

    def _alpha(self, index, end):
        '''
        Return (primitive, lexemes consumed) for a run of alpha lexemes.
        '''
        stop = index + 1
        while self._adjacent(stop - 1, end, LexemeType.ALPHA):
            stop += 1
        run = self.lexemes[index:stop]
        name = ''.join(lexeme.text for lexeme in run)
        if name in BOOLEANS:
            type_ = PrimitiveTokenType.BOOLEAN
        elif self._adjacent(stop - 1, end, LexemeType.PARENTHESIS_OPEN) \
                and self.function_map is not None \
                and self.function_map.is_function(name):
            type_ = PrimitiveTokenType.FUNCTION_NAME
        else:
            type_ = PrimitiveTokenType.VARIABLE
        return combine(type_, run), len(run)

    def _next(self, index, end, previous):
        '''
        Return (primitive, lexemes consumed) for the lexeme at index.
        '''
        lexeme = self.lexemes[index]
        if lexeme.type in LITERALS:
            return Primitive(LITERALS[lexeme.type], lexeme.offset,
                             lexeme.text), 1
        elif lexeme.type is LexemeType.ALPHA:
            return self._alpha(index, end)
        elif lexeme.type is LexemeType.OPERATOR:
            return self._operator(index, end, previous)
        elif lexeme.type is LexemeType.EQUAL:
            if self._adjacent(index, end, LexemeType.EQUAL):
                return combine(PrimitiveTokenType.EQUAL,
                               self.lexemes[index:index + 2]), 2
            return Primitive(PrimitiveTokenType.SETTER, lexeme.offset,
                             lexeme.text), 1
        elif lexeme.type in ANGLES:
            alone, doubled, or_equal = ANGLES[lexeme.type]
            if self._adjacent(index, end, lexeme.type):
                return combine(doubled, self.lexemes[index:index + 2]), 2
            elif self._adjacent(index, end, LexemeType.EQUAL):
                return combine(or_equal, self.lexemes[index:index + 2]), 2
            return Primitive(alone, lexeme.offset, lexeme.text), 1
        elif lexeme.type in PUNCTUATION:
            return Primitive(PUNCTUATION[lexeme.type], lexeme.offset,
                             lexeme.text), 1
        return Primitive(PrimitiveTokenType.UNKNOWN, lexeme.offset,
                         lexeme.text), 1

    def _tokenize(self, begin, end, depth, output):
        '''
        Tokenize lexemes [begin, end) onto output, recursing into brackets.
        '''
        index = begin
        while index < end:
            lexeme = self.lexemes[index]
            if lexeme.type is LexemeType.PARENTHESIS_OPEN:
                if depth >= self.settings.max_depth:
                    raise self._error('Brackets are nested deeper than the '
                                      'maximum of {}!'
                                      .format(self.settings.max_depth),
                                      index)
                close = self.pairs[index]
                output.append(Primitive(PrimitiveTokenType.EXPRESSION_OPEN,
                                        lexeme.offset, lexeme.text))
                self._tokenize(index + 1, close, depth + 1, output)
                closing = self.lexemes[close]
                output.append(Primitive(PrimitiveTokenType.EXPRESSION_CLOSE,
                                        closing.offset, closing.text))
                index = close + 1
                continue
            primitive, consumed = self._next(index, end,
                                             output[-1] if output else None)
            output.append(primitive)
            index += consumed
        return output

    def tokenize(self):
        '''
        Return primitive tokens for every lexeme, EOF excluded.

        Raises CalcSyntaxError on unmatched brackets or excessive nesting.
        '''
        if not self.lexemes:
            return []
        self.pairs = {}
        self._match_statements()
        primitives = self._tokenize(0, len(self.lexemes), 0, [])
        log.debug('Tokenized into %s',
                  [(primitive.type.value, primitive.text)
                   for primitive in primitives])
        return primitives

    def _match_statements(self):
        '''
        Validate brackets separately within each ; delimited statement.
        '''
        start = 0
        lexemes = self.lexemes
        for index, lexeme in enumerate(lexemes + [None]):
            if lexeme is None or lexeme.type is LexemeType.SEMICOLON:
                self._match_range(start, index)
                start = index + 1

    def _match_range(self, begin, end):
        opened = []
        for index in range(begin, end):
            lexeme = self.lexemes[index]
            if lexeme.type is LexemeType.PARENTHESIS_OPEN:
                opened.append(index)
            elif lexeme.type is LexemeType.PARENTHESIS_CLOSE:
                if not opened:
                    raise self._error('Unmatched close bracket!', index)
                self.pairs[opened.pop()] = index
        if opened:
            raise self._error('Unmatched open bracket!', opened[-1])

