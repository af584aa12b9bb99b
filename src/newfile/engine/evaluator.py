"""Evaluator - runs a compiled template program against an environment."""

from __future__ import annotations

import logging
from collections import ChainMap
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from jinja2.exceptions import UndefinedError

from newfile.engine.errors import Diagnostic, RenderError, TemplateEvaluationError
from newfile.engine.expressions import Expression, is_undefined
from newfile.engine.lines import decorate, insert_lines
from newfile.engine.spec import (
    AppendComputed,
    AppendLiteral,
    ForBlock,
    IfBlock,
    InsertExpression,
    InsertSequence,
    Instruction,
    SetVariable,
)

log = logging.getLogger(__name__)

# Available to every template unless the environment defines the same name
BUILTINS: Dict[str, Any] = {
    "enumerate": enumerate,
    "zip": zip,
    "sorted": sorted,
    "reversed": reversed,
    "len": len,
    "range": range,
    "str": str,
    "decorate": decorate,
}

Frame = Tuple[int, str]


class _Failure(Exception):
    """Internal: an error pinned to a template line and its enclosing frames."""

    def __init__(self, line: int, message: str, frames: Tuple[Frame, ...]) -> None:
        self.line = line
        self.message = message
        self.frames = frames
        super().__init__(message)


def _describe(error: Exception) -> str:
    if isinstance(error, (RenderError, UndefinedError)):
        return str(error)
    return f"{type(error).__name__}: {error}"


class Evaluator:
    """Runs template programs, translating failures into template diagnostics."""

    def __init__(self, source: Sequence[str]):
        """Initialize with the template lines used to annotate errors."""
        self.source = source

    def run(
        self,
        program: Sequence[Instruction],
        environment: Mapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> List[str]:
        """Run `program` and return the produced lines.

        Lookups go through, in order: names bound by the template itself
        (`@set`, loop variables), `overrides`, `environment`, BUILTINS.
        Only the first layer is written to, and it is discarded afterwards.

        Raises:
            TemplateEvaluationError: If any instruction fails.
        """
        scope: ChainMap[str, Any] = ChainMap({}, dict(overrides or {}), environment, BUILTINS)
        output: List[str] = []
        try:
            self._run_block(program, scope, output, ())
        except _Failure as failure:
            log.debug("Template evaluation failed at line %d: %s", failure.line, failure.message)
            raise self._translate(failure) from failure.__cause__
        return output

    def _translate(self, failure: _Failure) -> TemplateEvaluationError:
        cause = Diagnostic(failure.line, failure.message, self._source_line(failure.line))
        trace = [
            Diagnostic(line, label, self._source_line(line))
            for line, label in reversed(failure.frames)
        ]
        return TemplateEvaluationError(cause, trace)

    def _source_line(self, line: int) -> Optional[str]:
        if 1 <= line <= len(self.source):
            return self.source[line - 1]
        return None

    @contextmanager
    def _at(self, line: int, frames: Tuple[Frame, ...]) -> Iterator[None]:
        """Pin any error raised inside the block to `line`."""
        try:
            yield
        except _Failure:
            raise
        except Exception as e:
            raise _Failure(line, _describe(e), frames) from e

    def _run_block(
        self,
        instructions: Sequence[Instruction],
        scope: ChainMap[str, Any],
        output: List[str],
        frames: Tuple[Frame, ...],
    ) -> None:
        for instruction in instructions:
            here = frames + ((instruction.line, instruction.describe()),)

            if isinstance(instruction, ForBlock):
                self._run_for(instruction, scope, output, here)
            elif isinstance(instruction, IfBlock):
                self._run_if(instruction, scope, output, frames)
            else:
                with self._at(instruction.line, here):
                    self._run_simple(instruction, scope, output)

    def _run_simple(
        self, instruction: Instruction, scope: ChainMap[str, Any], output: List[str]
    ) -> None:
        if isinstance(instruction, AppendLiteral):
            output.append(instruction.text)
        elif isinstance(instruction, AppendComputed):
            output.append(
                "".join(
                    self._stringify(part, scope) if isinstance(part, Expression) else part
                    for part in instruction.parts
                )
            )
        elif isinstance(instruction, InsertSequence):
            insert_lines(
                output,
                scope.get(instruction.name),
                instruction.indent,
                f"Variable '{instruction.name}'",
            )
        elif isinstance(instruction, InsertExpression):
            insert_lines(
                output,
                instruction.expression.evaluate(scope),
                instruction.indent,
                f"Expression '{instruction.expression}'",
            )
        elif isinstance(instruction, SetVariable):
            scope[instruction.name] = instruction.expression.evaluate(scope)
        else:
            raise RenderError(f"unsupported instruction {type(instruction).__name__}")

    def _run_for(
        self,
        block: ForBlock,
        scope: ChainMap[str, Any],
        output: List[str],
        frames: Tuple[Frame, ...],
    ) -> None:
        with self._at(block.line, frames):
            iterable = block.iterable.evaluate(scope)
            if is_undefined(iterable):
                raise RenderError(
                    f"Expression '{block.iterable}' is undefined in the current environment"
                )
            items = iter(iterable)

        while True:
            with self._at(block.line, frames):
                try:
                    item = next(items)
                except StopIteration:
                    return
                self._bind(block.targets, item, scope)
            self._run_block(block.body, scope, output, frames)

    def _bind(self, targets: List[str], item: Any, scope: ChainMap[str, Any]) -> None:
        if len(targets) == 1:
            scope[targets[0]] = item
            return
        values = tuple(item)
        if len(values) != len(targets):
            raise RenderError(
                f"cannot unpack {len(values)} values into {len(targets)} loop variables"
            )
        for name, value in zip(targets, values):
            scope[name] = value

    def _run_if(
        self,
        block: IfBlock,
        scope: ChainMap[str, Any],
        output: List[str],
        frames: Tuple[Frame, ...],
    ) -> None:
        for index, branch in enumerate(block.branches):
            keyword = "if" if index == 0 else "elif"
            here = frames + ((branch.line, f"in '{keyword} {branch.condition}'"),)
            with self._at(branch.line, here):
                taken = bool(branch.condition.evaluate(scope))
            if taken:
                self._run_block(branch.body, scope, output, here)
                return
        if block.else_line is not None:
            here = frames + ((block.else_line, "in 'else'"),)
            self._run_block(block.orelse, scope, output, here)

    def _stringify(self, expression: Expression, scope: Mapping[str, Any]) -> str:
        value = expression.evaluate(scope)
        if is_undefined(value):
            raise RenderError(
                f"Expression '{expression}' is undefined in the current environment"
            )
        return str(value)
