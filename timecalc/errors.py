"""Error types raised while tokenizing and evaluating expressions.

Every error derives from :class:`CalcError`, and also from the closest builtin
exception so callers that only care about ``ValueError`` or ``TypeError`` can
catch them without importing this module.
"""


class CalcError(Exception):
    """Base class for every failure raised by timecalc."""


class LexError(CalcError, ValueError):
    """A lexeme in the input could not be turned into a token."""

    label = "Invalid lexeme"

    def __init__(self, lexeme: str, position: int, hint: str | None = None):
        self.lexeme: str = lexeme
        self.position: int = position
        message = self._describe()
        if hint:
            message += f"\nHint: {hint}"
        super().__init__(message)

    def _describe(self) -> str:
        return f"{self.label}: {self.lexeme}"


class InvalidCharacter(LexError):
    label = "Invalid character"

    def _describe(self) -> str:
        return f"{self.label}: {self.lexeme} at position {self.position}"


class InvalidNumber(LexError):
    label = "Invalid number"


class InvalidDate(LexError):
    label = "Invalid date"


class InvalidDuration(LexError):
    label = "Invalid duration"


class EvalError(CalcError):
    """The postfix sequence could not be reduced to a single value."""


class InvalidExpression(EvalError, ValueError):
    def __init__(self, detail: str | None = None):
        message = "Invalid expression"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class TypeMismatch(EvalError, TypeError):
    """An operator was applied to operand kinds it has no rule for."""


class DivisionByZero(EvalError, ZeroDivisionError):
    def __init__(self) -> None:
        super().__init__("Division by zero")


class UnknownOperator(EvalError, ValueError):
    def __init__(self, operator: object):
        self.operator: object = operator
        super().__init__(f"Unknown operator: {operator}")


class OutOfRange(EvalError, OverflowError):
    """Arithmetic produced a value outside the representable range."""
