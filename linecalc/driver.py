import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Iterable, Optional, TextIO

from linecalc.evaluator import EvaluationError, evaluate
from linecalc.tokenizer import TokenizerError, tokenize
from linecalc.utils import format_number

logger = logging.getLogger(__name__)


@dataclass
class LineResult:
    line: str
    value: Optional[float] = None
    lexer_errors: list[TokenizerError] = field(default_factory=list)
    evaluation_error: Optional[EvaluationError] = None

    @property
    def failed(self) -> bool:
        return bool(self.lexer_errors) or self.evaluation_error is not None

    def render(self) -> Optional[str]:
        if self.value is None:
            return None
        return f"{self.line} = {format_number(self.value)}"


def process_line(line: str) -> LineResult:
    tokens, errors = tokenize(line)
    if errors:
        return LineResult(line=line, lexer_errors=errors)

    try:
        value = evaluate(tokens)
    except EvaluationError as e:
        return LineResult(line=line, evaluation_error=e)
    return LineResult(line=line, value=value)


def run(lines: Iterable[str | bytes], out: TextIO, err: TextIO) -> int:
    """Evaluate every line, returning the number of lines that failed

    Byte lines are decoded one at a time, so an undecodable line is reported and
    skipped without losing the rest of the input.
    """
    failures = 0
    for lineno, line in enumerate(lines, start=1):
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as e:
                print(f'Failed to read line: "{e}"', file=err)
                logger.debug("Line %d is not valid UTF-8", lineno)
                failures += 1
                continue

        result = process_line(line.rstrip("\r\n"))
        if result.lexer_errors:
            print("Lexing Errors:", file=err)
            for error in result.lexer_errors:
                print(f"  - {error}", file=err)
        elif result.evaluation_error is not None:
            print(f"{result.line}: {result.evaluation_error}", file=err)

        if result.failed:
            logger.debug("Line %d failed: %r", lineno, result.line)
            failures += 1
            continue

        rendered = result.render()
        if rendered is not None:
            print(rendered, file=out)
    return failures


def get_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="linecalc", description="Evaluate arithmetic expressions, one per line")
    parser.add_argument("input_file", type=str, help="file with one expression per line, - for stdin")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="log every evaluation step")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = get_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger("linecalc").setLevel(level)

    if args.input_file == "-":
        failures = run(sys.stdin.buffer, out=sys.stdout, err=sys.stderr)
    else:
        try:
            with open(args.input_file, "rb") as f:
                failures = run(f, out=sys.stdout, err=sys.stderr)
        except OSError as e:
            logger.debug("Failed to read %s: %s", args.input_file, e)
            print(f'Input file "{args.input_file}" should exist and be readable.', file=sys.stderr)
            return 1

    logger.info("%d line(s) failed", failures)
    return 0
