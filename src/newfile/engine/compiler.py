"""Compiler - turns template text into a CompiledTemplate.

Each template line becomes exactly one entry of the program listing:

- a line starting with `@` (after optional blanks) is a statement,
- a line holding only `${name}` inserts the lines of the sequence `name`,
- any other line is text, with `$(expr)` (or `«expr»`) placeholders
  replaced by the stringified value of `expr`.

Statements give templates control flow:

    @for field in fields
    $(field.type) $(field.name);
    @end
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from newfile.engine.errors import Diagnostic, TemplateSyntaxError
from newfile.engine.expressions import (
    Expression,
    ExpressionSyntaxError,
    compile_expression,
)
from newfile.engine.lines import split_lines
from newfile.engine.spec import (
    EPILOGUE,
    PROLOGUE,
    AppendComputed,
    AppendLiteral,
    Branch,
    ForBlock,
    IfBlock,
    InsertExpression,
    InsertSequence,
    Instruction,
    SetVariable,
    VariableSyntax,
)
from newfile.engine.template import CompiledTemplate

log = logging.getLogger(__name__)

ESCAPE_LINE = re.compile(r"^(\s*)@")
TABLE_DIRECTIVE = re.compile(r"^(\s*)\$\{([A-Za-z_][A-Za-z0-9_]*)\}\s*$")
BRACKET_REFERENCE = re.compile(r"«(.*?)»")
IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
STATEMENT = re.compile(r"^([A-Za-z_]+)\b\s*(.*)$")
FOR_STATEMENT = re.compile(r"^for\s+(?P<targets>.+?)\s+in\s+(?P<iterable>.+?)\s*:?$")
SET_STATEMENT = re.compile(r"^set\s+(?P<name>[^=\s]+)\s*=\s*(?P<expr>.*)$")

BLOCK_CLOSERS = {"end": None, "endfor": "for", "endif": "if"}


class _CompileError(Exception):
    """Internal: a syntax problem at a given template line."""

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(message)


@dataclass
class _Block:
    """An open `@for` / `@if` block while compiling."""

    kind: str
    instruction: Union[ForBlock, IfBlock]
    body: List[Instruction]
    in_else: bool = False


@dataclass
class _State:
    program: List[Instruction] = field(default_factory=list)
    listing: List[str] = field(default_factory=list)
    blocks: List[_Block] = field(default_factory=list)

    @property
    def body(self) -> List[Instruction]:
        return self.blocks[-1].body if self.blocks else self.program


def _closing_paren(text: str, open_index: int) -> int:
    """Index of the parenthesis closing the one at `open_index`, or -1.

    Parentheses inside quoted strings are ignored.
    """
    depth = 0
    quote: Optional[str] = None
    i = open_index
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _default_references(line: str) -> Tuple[List[Tuple[str, str, str]], str]:
    """Find `$(expr)` references in `line`.

    Returns:
        A list of (preceding text, expression, raw match) and the tail of
        the line after the last reference.
    """
    matches = []
    start = search = 0
    while True:
        pos = line.find("$(", search)
        if pos == -1:
            break
        end = _closing_paren(line, pos + 1)
        if end == -1:
            # Unbalanced: not a reference, keep looking further right
            search = pos + 2
            continue
        matches.append((line[start:pos], line[pos + 2 : end], line[pos : end + 1]))
        start = search = end + 1
    return matches, line[start:]


def _bracket_references(line: str) -> Tuple[List[Tuple[str, str, str]], str]:
    """Find `«expr»` references in `line` (same shape as `_default_references`)."""
    matches = []
    start = 0
    for m in BRACKET_REFERENCE.finditer(line):
        matches.append((line[start : m.start()], m.group(1), m.group(0)))
        start = m.end()
    return matches, line[start:]


class Compiler:
    """Compiles template text into a CompiledTemplate."""

    def __init__(
        self,
        indent: int = 0,
        variable_syntax: Union[VariableSyntax, str] = VariableSyntax.DEFAULT,
    ):
        """Initialize the compiler.

        Args:
            indent: Number of blanks prepended to every produced line; the
                relative indentation of template lines is preserved.
            variable_syntax: "default" for `$(expr)`, "bracket" for `«expr»`.
        """
        if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
            raise ValueError(f"indent must be a non-negative integer, got {indent!r}")
        self.indent = " " * indent
        self.variable_syntax = VariableSyntax(variable_syntax)

    def compile(
        self, text: str, environment: Optional[Mapping[str, Any]] = None
    ) -> CompiledTemplate:
        """Compile `text` and bind the result to `environment`.

        Raises:
            TemplateSyntaxError: If a statement or expression is malformed,
                or blocks are not balanced.
        """
        source = tuple(split_lines(text))
        try:
            program, listing = self._compile_lines(source)
        except _CompileError as e:
            source_line = source[e.line - 1] if 1 <= e.line <= len(source) else None
            line = e.line if source_line is not None else -1
            raise TemplateSyntaxError(Diagnostic(line, e.message, source_line)) from e

        log.debug("Compiled %d template lines", len(source))
        return CompiledTemplate(
            source=source,
            program=tuple(program),
            code=tuple(listing),
            environment=environment if environment is not None else {},
        )

    def _compile_lines(
        self, source: Sequence[str]
    ) -> Tuple[List[Instruction], List[str]]:
        state = _State()
        state.listing.append(PROLOGUE)

        for lineno, line in enumerate(source, start=1):
            escape = ESCAPE_LINE.match(line)
            if escape:
                statement = line[escape.end() :]
                state.listing.append(
                    self._compile_statement(state, lineno, statement, escape.group(1))
                )
                continue

            directive = TABLE_DIRECTIVE.match(line)
            if directive:
                instruction: Instruction = InsertSequence(
                    lineno, name=directive.group(2), indent=self.indent + directive.group(1)
                )
            else:
                instruction = self._compile_text(lineno, line)
            state.body.append(instruction)
            state.listing.append(str(instruction))

        if state.blocks:
            block = state.blocks[-1]
            raise _CompileError(
                block.instruction.line,
                f"'{block.kind}' block is never closed (missing @end)",
            )

        state.listing.append(EPILOGUE)
        return state.program, state.listing

    def _compile_text(self, lineno: int, line: str) -> Instruction:
        """Compile a text line with placeholders."""
        if self.variable_syntax is VariableSyntax.BRACKET:
            matches, tail = _bracket_references(line)
        else:
            matches, tail = _default_references(line)

        parts: List[Union[str, Expression]] = []
        if line != "" and self.indent:
            parts.append(self.indent)

        for text, expr, raw in matches:
            parts.append(text)
            if expr == "":
                # Empty placeholders are plain text
                parts.append(raw)
            else:
                parts.append(self._expression(lineno, expr))
        parts.append(tail)

        merged: List[Union[str, Expression]] = []
        for part in parts:
            if isinstance(part, str):
                if part == "":
                    continue
                if merged and isinstance(merged[-1], str):
                    merged[-1] += part
                    continue
            merged.append(part)

        if not any(isinstance(p, Expression) for p in merged):
            return AppendLiteral(lineno, text="".join(merged))  # type: ignore[arg-type]
        return AppendComputed(lineno, parts=merged)

    def _compile_statement(
        self, state: _State, lineno: int, statement: str, leading: str
    ) -> str:
        """Compile an `@` line; returns its listing entry."""
        stripped = statement.strip()
        if stripped == "" or stripped.startswith("#"):
            return "NOP"

        m = STATEMENT.match(stripped)
        if not m:
            raise _CompileError(lineno, f"invalid statement '{stripped}'")
        keyword, rest = m.group(1), m.group(2).strip()

        if keyword == "for":
            return self._open_for(state, lineno, stripped)

        if keyword == "if":
            condition = self._expression(lineno, self._header(lineno, keyword, rest))
            block = IfBlock(lineno, branches=[Branch(lineno, condition)])
            state.body.append(block)
            state.blocks.append(_Block("if", block, block.branches[0].body))
            return str(block)

        if keyword in ("elif", "else"):
            return self._continue_if(state, lineno, keyword, rest)

        if keyword in BLOCK_CLOSERS:
            if rest:
                raise _CompileError(lineno, f"unexpected text after '{keyword}': '{rest}'")
            if not state.blocks:
                raise _CompileError(lineno, f"'{keyword}' without an open block")
            expected = BLOCK_CLOSERS[keyword]
            if expected is not None and state.blocks[-1].kind != expected:
                raise _CompileError(
                    lineno,
                    f"'{keyword}' closes a '{state.blocks[-1].kind}' block "
                    f"opened at line {state.blocks[-1].instruction.line}",
                )
            state.blocks.pop()
            return "END"

        if keyword == "set":
            sm = SET_STATEMENT.match(stripped)
            if not sm:
                raise _CompileError(lineno, "expected 'set <name> = <expression>'")
            name = sm.group("name")
            if not IDENTIFIER.match(name):
                raise _CompileError(lineno, f"'{name}' is not a valid variable name")
            if not sm.group("expr").strip():
                raise _CompileError(lineno, f"missing expression for '{name}'")
            instruction: Instruction = SetVariable(
                lineno, name=name, expression=self._expression(lineno, sm.group("expr"))
            )
            state.body.append(instruction)
            return str(instruction)

        if keyword == "insert":
            if not rest:
                raise _CompileError(lineno, "expected 'insert <expression>'")
            instruction = InsertExpression(
                lineno,
                expression=self._expression(lineno, rest),
                indent=self.indent + leading,
            )
            state.body.append(instruction)
            return str(instruction)

        raise _CompileError(lineno, f"unknown statement '{keyword}'")

    def _open_for(self, state: _State, lineno: int, statement: str) -> str:
        fm = FOR_STATEMENT.match(statement)
        if not fm:
            raise _CompileError(lineno, "expected 'for <name>[, <name>...] in <expression>'")
        targets = [t.strip() for t in fm.group("targets").split(",")]
        for target in targets:
            if not IDENTIFIER.match(target):
                raise _CompileError(lineno, f"'{target}' is not a valid loop variable")
        block = ForBlock(
            lineno,
            targets=targets,
            iterable=self._expression(lineno, fm.group("iterable")),
        )
        state.body.append(block)
        state.blocks.append(_Block("for", block, block.body))
        return str(block)

    def _continue_if(self, state: _State, lineno: int, keyword: str, rest: str) -> str:
        block = state.blocks[-1] if state.blocks else None
        if block is None or not isinstance(block.instruction, IfBlock):
            raise _CompileError(lineno, f"'{keyword}' without a matching 'if'")
        if block.in_else:
            raise _CompileError(lineno, f"'{keyword}' after 'else'")
        if_block = block.instruction

        if keyword == "elif":
            condition = self._expression(lineno, self._header(lineno, keyword, rest))
            branch = Branch(lineno, condition)
            if_block.branches.append(branch)
            block.body = branch.body
            return f"ELIF {condition}"

        if rest not in ("", ":"):
            raise _CompileError(lineno, f"unexpected text after 'else': '{rest}'")
        if_block.else_line = lineno
        block.in_else = True
        block.body = if_block.orelse
        return "ELSE"

    def _header(self, lineno: int, keyword: str, rest: str) -> str:
        """The expression of an `if`/`elif` header, without a trailing colon."""
        expr = rest.removesuffix(":").strip()
        if not expr:
            raise _CompileError(lineno, f"missing condition after '{keyword}'")
        return expr

    def _expression(self, lineno: int, source: str) -> Expression:
        try:
            return compile_expression(source)
        except ExpressionSyntaxError as e:
            raise _CompileError(lineno, str(e)) from e


def compile_template(
    text: str,
    indent: int = 0,
    variable_syntax: Union[VariableSyntax, str] = VariableSyntax.DEFAULT,
    environment: Optional[Mapping[str, Any]] = None,
) -> CompiledTemplate:
    """Compile a text template.

    Example:
        >>> compile_template("Hello $(whom)", environment={"whom": "Marco"}).evaluate()
        'Hello Marco'

    Args:
        text: The template text.
        indent: Blanks prepended to every produced non-empty line.
        variable_syntax: "default" (`$(expr)`) or "bracket" (`«expr»`).
        environment: Values referenced by the template.

    Returns:
        A CompiledTemplate bound to `environment`.

    Raises:
        TemplateSyntaxError: If the template is malformed.
    """
    return Compiler(indent=indent, variable_syntax=variable_syntax).compile(
        text, environment
    )


def render(
    text: str,
    environment: Optional[Mapping[str, Any]] = None,
    indent: int = 0,
    variable_syntax: Union[VariableSyntax, str] = VariableSyntax.DEFAULT,
) -> str:
    """Compile and evaluate `text` in one go.

    Raises:
        TemplateError: TemplateSyntaxError or TemplateEvaluationError; in
            both cases `str(error)` is the full, newline-joined message.
    """
    compiled = compile_template(
        text, indent=indent, variable_syntax=variable_syntax, environment=environment
    )
    return compiled.evaluate()  # type: ignore[return-value]
