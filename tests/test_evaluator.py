import math
from typing import Type

import pytest

from linecalc.evaluator import (
    EvaluationError,
    MissingOperand,
    MissingOperator,
    UnbalancedParentheses,
    apply_operator,
    evaluate,
)
from linecalc.tokenizer import Number, Operator, tokenize


def _tokens(code: str):
    tokens, errors = tokenize(code)
    assert errors == []
    return tokens


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("2+3*4", 14.0),
        pytest.param("(2+3)*4", 20.0),
        pytest.param("8-3-2", 3.0),
        pytest.param("8/4/2", 1.0),
        pytest.param("2*3/4", 1.5),
        pytest.param("1 - (2 - 3)", 2.0),
        pytest.param("2 * (3 + 4) * 5", 70.0),
        pytest.param("((7))", 7.0),
        pytest.param("0.1 + 0.2", 0.1 + 0.2),
        pytest.param("6/0", math.inf),
        pytest.param("0 - 6/0", -math.inf),
    ],
)
def test_evaluate(code: str, expected: float) -> None:
    assert evaluate(_tokens(code)) == expected


def test_evaluate_zero_by_zero_is_nan() -> None:
    assert math.isnan(evaluate(_tokens("0/0")))


@pytest.mark.parametrize("code", ["", "   ", "()", "(())"])
def test_evaluate_without_value(code: str) -> None:
    assert evaluate(_tokens(code)) is None


@pytest.mark.parametrize(
    "code, error_type",
    [
        pytest.param("+", MissingOperand),
        pytest.param("1 +", MissingOperand),
        pytest.param("1 + * 2", MissingOperand),
        pytest.param("() + 1", MissingOperand),
        pytest.param("(1 + 2", UnbalancedParentheses),
        pytest.param("1 + 2)", UnbalancedParentheses),
        pytest.param(")(", UnbalancedParentheses),
        pytest.param("1 2", MissingOperator),
        pytest.param("(1)(2)", MissingOperator),
    ],
)
def test_evaluate_structural_errors(code: str, error_type: Type[EvaluationError]) -> None:
    with pytest.raises(error_type):
        evaluate(_tokens(code))


def test_evaluation_error_highlight() -> None:
    with pytest.raises(UnbalancedParentheses) as exc_info:
        evaluate(_tokens("1+2)"))
    assert exc_info.value.error_token_idx == 3
    assert str(exc_info.value) == "Evaluation error: Unmatched closing bracket"
    assert exc_info.value.highlight() == "Evaluation error: Unmatched closing bracket\n1 + 2)\n     ^"


def test_evaluation_error_highlight_at_end() -> None:
    with pytest.raises(MissingOperand) as exc_info:
        evaluate(_tokens("1 -"))
    assert exc_info.value.highlight().splitlines()[1:] == ["1 -", "    ^"]


def test_evaluate_consumes_tokens_only() -> None:
    tokens = [Number(1.0), Operator.ADD, Number(2.0)]
    assert evaluate(tokens) == 3.0
    assert evaluate(tokens) == 3.0
    assert tokens == [Number(1.0), Operator.ADD, Number(2.0)]


@pytest.mark.parametrize(
    "op, left, right, expected",
    [
        pytest.param(Operator.ADD, 1.5, 2.0, 3.5),
        pytest.param(Operator.SUB, 1.0, 3.0, -2.0),
        pytest.param(Operator.MUL, 4.0, 0.5, 2.0),
        pytest.param(Operator.DIV, 3.0, 2.0, 1.5),
        pytest.param(Operator.DIV, 1.0, -0.0, -math.inf),
        pytest.param(Operator.DIV, -1.0, 0.0, -math.inf),
    ],
)
def test_apply_operator(op: Operator, left: float, right: float, expected: float) -> None:
    assert apply_operator(op, left, right) == expected


def test_apply_operator_rejects_brackets() -> None:
    with pytest.raises(ValueError):
        apply_operator(Operator.BRACKET_OPEN, 1.0, 2.0)
