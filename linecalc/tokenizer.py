import enum
import re
from dataclasses import dataclass
from typing import Optional

from linecalc.utils import PrintableEnum, format_number


@dataclass
class TokenizerError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        return self.errmsg

    def highlight(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                f"[Tokenizer error] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class UnknownCharacter(TokenizerError):
    def __init__(self, code: str, error_char_idx: int) -> None:
        super().__init__(f'Unknown character "{code[error_char_idx]}"', code, error_char_idx)

    @property
    def char(self) -> str:
        return self.code[self.error_char_idx]


class Precedence(enum.IntEnum):
    LOW = enum.auto()
    HIGH = enum.auto()


class Operator(PrintableEnum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    BRACKET_OPEN = "("
    BRACKET_CLOSE = ")"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> Optional[Precedence]:
        """None for brackets, which bind no operands themselves"""
        return _PRECEDENCES.get(self)


_PRECEDENCES = {
    Operator.ADD: Precedence.LOW,
    Operator.SUB: Precedence.LOW,
    Operator.MUL: Precedence.HIGH,
    Operator.DIV: Precedence.HIGH,
}


@dataclass(frozen=True)
class Number:
    value: float

    def __str__(self) -> str:
        return f"<NUMBER>{format_number(self.value)}"


Token = Number | Operator


SINGLE_CHAR_TOKENS = {op.symbol: op for op in Operator}

DIGITS = frozenset("0123456789")
WHITESPACE = frozenset(" \t\n\r\f")


def _consume_digits(code: str, i: int) -> int:
    while i < len(code) and code[i] in DIGITS:
        i += 1
    return i


def tokenize(code: str) -> tuple[list[Token], list[TokenizerError]]:
    """Scan a single line into tokens, collecting an error for every unknown character"""
    i = 0
    tokens: list[Token] = []
    errors: list[TokenizerError] = []
    while i < len(code):
        if code[i] in DIGITS:
            number_end_idx = _consume_digits(code, i + 1)
            if number_end_idx < len(code) and code[number_end_idx] == ".":
                number_end_idx = _consume_digits(code, number_end_idx + 1)
            # digits with an optional dot and fraction ("3." included) are always valid float syntax
            tokens.append(Number(float(code[i:number_end_idx])))
            i = number_end_idx - 1  # to account for += 1 later
        elif code[i] in SINGLE_CHAR_TOKENS:
            tokens.append(SINGLE_CHAR_TOKENS[code[i]])
        elif code[i] in WHITESPACE:
            pass
        else:
            errors.append(UnknownCharacter(code=code, error_char_idx=i))
        i += 1

    return tokens, errors


def _render(token: Token) -> str:
    if isinstance(token, Number):
        return format_number(token.value)
    return token.symbol


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(_render(t) for t in tokens)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)
    return result
