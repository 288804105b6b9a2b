from .calculator import calculate
from .duration import Duration
from .errors import (
    CalcError,
    DivisionByZero,
    EvalError,
    InvalidCharacter,
    InvalidDate,
    InvalidDuration,
    InvalidExpression,
    InvalidNumber,
    LexError,
    OutOfRange,
    TypeMismatch,
    UnknownOperator,
)
from .evaluator import evaluate
from .lexer import tokenize
from .postfix import to_postfix
from .present import localize, present
from .tokens import Token, TokenKind
from .util import DAY, HOUR, MILLISECOND, MINUTE, MONTH, SECOND, WEEK, YEAR
from .values import CalcValue, ValueKind, canonical, kind_of

__version__ = "0.1.0"

__all__ = [
    "calculate",
    "tokenize",
    "to_postfix",
    "evaluate",
    "present",
    "localize",
    "canonical",
    "kind_of",
    "CalcValue",
    "ValueKind",
    "Duration",
    "Token",
    "TokenKind",
    "CalcError",
    "LexError",
    "InvalidCharacter",
    "InvalidNumber",
    "InvalidDate",
    "InvalidDuration",
    "EvalError",
    "InvalidExpression",
    "TypeMismatch",
    "DivisionByZero",
    "UnknownOperator",
    "OutOfRange",
    "MILLISECOND",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "MONTH",
    "YEAR",
]
