from linecalc.evaluator import EvaluationError, evaluate
from linecalc.tokenizer import tokenize
from linecalc.utils import format_number


if __name__ == "__main__":
    while True:
        try:
            code = input("> ")
        except EOFError:
            break

        tokens, errors = tokenize(code)
        if errors:
            for error in errors:
                print(error.highlight())
            continue

        try:
            result = evaluate(tokens)
        except EvaluationError as e:
            print(e.highlight())
            continue

        if result is not None:
            print(format_number(result))
