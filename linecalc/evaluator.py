import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from linecalc.tokenizer import Number, Operator, Token, untokenize

logger = logging.getLogger(__name__)


@dataclass
class EvaluationError(Exception):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    def __str__(self) -> str:
        return f"Evaluation error: {self.errmsg}"

    def highlight(self) -> str:
        evaluated_tokens = self.tokens[: self.error_token_idx]
        separated = (
            bool(evaluated_tokens)
            and evaluated_tokens[-1] is not Operator.BRACKET_OPEN
            and self.tokens[self.error_token_idx : self.error_token_idx + 1] != [Operator.BRACKET_CLOSE]
        )
        filler_whitespace = " " * (len(untokenize(evaluated_tokens)) + separated)
        return "\n".join([str(self), untokenize(self.tokens), filler_whitespace + "^"])


class UnbalancedParentheses(EvaluationError):
    pass


class MissingOperand(EvaluationError):
    pass


class MissingOperator(EvaluationError):
    pass


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        # the sign of zero matters: 1 / -0.0 => -inf
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


OPERATOR_IMPLS: dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUB: lambda a, b: a - b,
    Operator.MUL: lambda a, b: a * b,
    Operator.DIV: _divide,
}


def apply_operator(op: Operator, left: float, right: float) -> float:
    if op not in OPERATOR_IMPLS:
        raise ValueError(f"{op} is not an arithmetic operator")
    return OPERATOR_IMPLS[op](left, right)


def evaluate(tokens: list[Token]) -> Optional[float]:
    """Evaluate infix tokens in one pass with a value stack and an operator stack

    Operators are applied as soon as a lower or equal precedence operator, a closing
    bracket or the end of input shows that both of their operands are complete, so
    no syntax tree is ever built. Returns None if the tokens produce no value at all.
    """
    values: list[float] = []
    operators: list[Operator] = []

    def reduce(idx: int) -> None:
        op = operators.pop()
        if op is Operator.BRACKET_OPEN:
            raise UnbalancedParentheses("Unclosed bracket", tokens=tokens, error_token_idx=idx)
        if len(values) < 2:
            raise MissingOperand(f"{op} expects two operands", tokens=tokens, error_token_idx=idx)
        right = values.pop()
        left = values.pop()
        result = apply_operator(op, left, right)
        logger.debug("Reduced %s %s %s => %s", left, op.symbol, right, result)
        values.append(result)

    for i, token in enumerate(tokens):
        if isinstance(token, Number):
            values.append(token.value)
        elif token is Operator.BRACKET_OPEN:
            operators.append(token)
        elif token is Operator.BRACKET_CLOSE:
            while operators and operators[-1] is not Operator.BRACKET_OPEN:
                reduce(i)
            if not operators:
                raise UnbalancedParentheses("Unmatched closing bracket", tokens=tokens, error_token_idx=i)
            operators.pop()
        else:
            precedence = token.precedence
            while operators:
                top_precedence = operators[-1].precedence
                # an open bracket has no precedence and stops the reduction
                if top_precedence is None or top_precedence < precedence:
                    break
                reduce(i)
            operators.append(token)

    while operators:
        reduce(len(tokens))

    if not values:
        return None
    if len(values) > 1:
        raise MissingOperator(
            f"{len(values)} values left without an operator between them", tokens=tokens, error_token_idx=len(tokens)
        )
    return values[0]
