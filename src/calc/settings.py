from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    '''
    Run-wide configuration, passed explicitly to each pipeline stage.

    :param caret_is_exponent: ``^`` means Exponent rather than BitXOR.
    :param unsafe_cast: Narrowing casts wrap/saturate instead of raising.
    :param strict: Unknown characters raise LexicalError.
    :param max_depth: Deepest bracket nesting the tokenizer accepts.
    '''
    caret_is_exponent: bool = True
    unsafe_cast: bool = False
    strict: bool = False
    max_depth: int = 256


DEFAULT_SETTINGS = Settings()
