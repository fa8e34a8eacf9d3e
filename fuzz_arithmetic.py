import math
import random
import re
import string
import warnings

from linecalc.evaluator import EvaluationError, evaluate
from linecalc.tokenizer import tokenize

warnings.filterwarnings("ignore")


def eval_py(code: str) -> float | str:
    try:
        return eval(code)
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str | None:
    tokens, errors = tokenize(code)
    if errors:
        return "; ".join(str(e) for e in errors)
    try:
        return evaluate(tokens)
    except EvaluationError as e:
        return str(e)


if __name__ == "__main__":
    alphabet = string.digits + ".()+-*/ "

    def generate(length: int) -> str:
        return "".join(random.choices(alphabet, k=length))

    while True:
        code = generate(10)

        if re.findall(r"\*\s*\*", code):
            continue  # avoid generating powers (10**4)

        if re.findall(r"/\s*/", code):
            continue  # avoid generating int devision (10 // 3)

        res_py = eval_py(code)
        res_my = eval_my(code)
        # python accepts unary signs and ".5", the calculator does not; only numbers on both sides are comparable
        if not isinstance(res_py, (int, float)) or isinstance(res_py, bool) or not isinstance(res_my, float):
            continue
        if math.isclose(float(res_py), res_my) or (math.isnan(res_my) and math.isnan(res_py)):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
