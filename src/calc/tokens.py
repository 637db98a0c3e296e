'''
Token vocabulary shared by the lexer, tokenizer, and evaluator.
'''

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Iterable, TypeVar


class LexemeType(Enum):
    UNKNOWN = auto()
    ESCAPE = auto()
    EQUAL = auto()
    COLON = auto()
    SEMICOLON = auto()
    OPERATOR = auto()
    ALPHA = auto()
    INT_NUMBER = auto()
    REAL_NUMBER = auto()
    BINARY_NUMBER = auto()
    OCTAL_NUMBER = auto()
    HEX_NUMBER = auto()
    PERIOD = auto()
    COMMA = auto()
    MACRO = auto()
    ANGLE_OPEN = auto()
    ANGLE_CLOSE = auto()
    SQUARE_OPEN = auto()
    SQUARE_CLOSE = auto()
    PARENTHESIS_OPEN = auto()
    PARENTHESIS_CLOSE = auto()
    BRACE_OPEN = auto()
    BRACE_CLOSE = auto()
    EOF = auto()


class PrimitiveTokenType(Enum):
    '''
    Semantic token kinds. Values are the names used in messages.
    '''
    UNKNOWN = 'Unknown'
    VARIABLE = 'Variable'
    FUNCTION_NAME = 'FunctionName'
    EXPRESSION_OPEN = 'ExpressionOpen'
    EXPRESSION_CLOSE = 'ExpressionClose'
    BOOLEAN = 'Boolean'
    BINARY = 'BinaryNumber'
    OCTAL = 'OctalNumber'
    HEXADECIMAL = 'HexNumber'
    INTEGER = 'IntNumber'
    REAL = 'RealNumber'
    SETTER = 'Setter'
    TERM_SEPARATOR = 'TermSeparator'
    SEPARATOR = 'Separator'
    ADD = 'Add'
    SUBTRACT = 'Subtract'
    NEGATE = 'Negate'
    MULTIPLY = 'Multiply'
    DIVIDE = 'Divide'
    MODULO = 'Modulo'
    EXPONENT = 'Exponent'
    FACTORIAL = 'Factorial'
    BIT_OR = 'BitwiseOR'
    BIT_AND = 'BitwiseAND'
    BIT_XOR = 'BitwiseXOR'
    BIT_NOT = 'BitwiseNOT'
    SHIFT_LEFT = 'BitshiftLeft'
    SHIFT_RIGHT = 'BitshiftRight'
    EQUAL = 'Equal'
    NOT_EQUAL = 'NotEqual'
    LESS_THAN = 'LessThan'
    LESS_OR_EQUAL = 'LessOrEqual'
    GREATER_THAN = 'GreaterThan'
    GREATER_OR_EQUAL = 'GreaterOrEqual'
    LOGICAL_NOT = 'LogicalNOT'
    LOGICAL_OR = 'LogicalOR'
    LOGICAL_AND = 'LogicalAND'


T = TypeVar('T', LexemeType, PrimitiveTokenType)


@dataclass(frozen=True)
class Span(Generic[T]):
    '''
    Typed run of source text starting at offset.
    '''
    type: T
    offset: int
    text: str

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    def is_adjacent_to(self, other: 'Span') -> bool:
        '''
        Return True if no whitespace separates self and other.
        '''
        return self.end == other.offset or other.end == self.offset


class Lexeme(Span[LexemeType]):
    pass


class Primitive(Span[PrimitiveTokenType]):
    pass


NUMBER_LEXEMES = frozenset({
    LexemeType.INT_NUMBER,
    LexemeType.REAL_NUMBER,
    LexemeType.BINARY_NUMBER,
    LexemeType.OCTAL_NUMBER,
    LexemeType.HEX_NUMBER,
})
NUMBER_PRIMITIVES = frozenset({
    PrimitiveTokenType.BINARY,
    PrimitiveTokenType.OCTAL,
    PrimitiveTokenType.HEXADECIMAL,
    PrimitiveTokenType.INTEGER,
    PrimitiveTokenType.REAL,
})
# Pushed straight to the output queue by the shunting-yard.
OPERANDS = NUMBER_PRIMITIVES | {
    PrimitiveTokenType.VARIABLE,
    PrimitiveTokenType.BOOLEAN,
}
BASES = {
    PrimitiveTokenType.BINARY: 2,
    PrimitiveTokenType.OCTAL: 8,
    PrimitiveTokenType.HEXADECIMAL: 16,
    PrimitiveTokenType.INTEGER: 10,
    PrimitiveTokenType.REAL: 10,
}


def lexeme_evaluates_to_number(lexeme: Lexeme) -> bool:
    '''
    True if the lexeme can begin an operand.
    '''
    return lexeme.type in NUMBER_LEXEMES \
        or lexeme.type in {LexemeType.ALPHA, LexemeType.PARENTHESIS_OPEN}


def evaluates_to_number(primitive: Primitive) -> bool:
    '''
    True if the primitive can end an operand.
    '''
    return primitive.type in OPERANDS \
        or primitive.type in {PrimitiveTokenType.EXPRESSION_CLOSE,
                              PrimitiveTokenType.FACTORIAL}


def is_number(primitive: Primitive) -> bool:
    return primitive.type in NUMBER_PRIMITIVES


def stringify(spans: Iterable[Span], include_ws=True) -> str:
    '''
    Reassemble span texts, with a single space wherever the source had a gap.
    '''
    pieces = []
    previous = None
    for span in spans:
        if include_ws and previous is not None \
           and span.offset > previous.end:
            pieces.append(' ')
        pieces.append(span.text)
        previous = span
    return ''.join(pieces)
