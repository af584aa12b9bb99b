"""Template program spec - the instruction IR produced by the compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from newfile.engine.expressions import Expression

PROLOGUE = "text = []"
EPILOGUE = "return text"


class VariableSyntax(str, Enum):
    """Placeholder syntax, chosen once per compilation."""

    DEFAULT = "default"  # $(expr)
    BRACKET = "bracket"  # «expr»


@dataclass
class Instruction:
    """Base for all instructions; `line` is the originating template line."""

    line: int

    def describe(self) -> str:
        """Short label used for stack trace frames."""
        return "in template line"


@dataclass
class AppendLiteral(Instruction):
    """Append a fixed line of text to the output."""

    text: str = ""

    def describe(self) -> str:
        return "in text line"

    def __str__(self) -> str:
        return f"APPEND {self.text!r}"


@dataclass
class AppendComputed(Instruction):
    """Append a line built from literal parts and stringified expressions."""

    parts: List[Union[str, Expression]] = field(default_factory=list)

    @property
    def expressions(self) -> List[Expression]:
        return [p for p in self.parts if isinstance(p, Expression)]

    def describe(self) -> str:
        return "in substitution"

    def __str__(self) -> str:
        rendered = " ~ ".join(
            f"$({p.source})" if isinstance(p, Expression) else repr(p)
            for p in self.parts
        )
        return f"APPEND {rendered}"


@dataclass
class InsertSequence(Instruction):
    """Insert every element of a named sequence variable (`${name}`)."""

    name: str = ""
    indent: str = ""

    def describe(self) -> str:
        return f"in insertion of '{self.name}'"

    def __str__(self) -> str:
        return f"INSERT {self.name} indent={self.indent!r}"


@dataclass
class InsertExpression(Instruction):
    """Insert every element of a sequence-valued expression (`@insert`)."""

    expression: Expression
    indent: str = ""

    def describe(self) -> str:
        return f"in 'insert {self.expression}'"

    def __str__(self) -> str:
        return f"INSERT {self.expression} indent={self.indent!r}"


@dataclass
class SetVariable(Instruction):
    """Bind a name for the rest of the evaluation (`@set`)."""

    name: str
    expression: Expression

    def describe(self) -> str:
        return f"in 'set {self.name}'"

    def __str__(self) -> str:
        return f"SET {self.name} = {self.expression}"


@dataclass
class ForBlock(Instruction):
    """Run `body` once per item of `iterable` (`@for ... in ...`)."""

    targets: List[str]
    iterable: Expression
    body: List[Instruction] = field(default_factory=list)

    def describe(self) -> str:
        return f"in 'for {', '.join(self.targets)} in {self.iterable}'"

    def __str__(self) -> str:
        return f"FOR {', '.join(self.targets)} IN {self.iterable}"


@dataclass
class Branch:
    """One `@if` / `@elif` arm."""

    line: int
    condition: Expression
    body: List[Instruction] = field(default_factory=list)


@dataclass
class IfBlock(Instruction):
    """Run the first branch whose condition holds, else `orelse`."""

    branches: List[Branch] = field(default_factory=list)
    orelse: List[Instruction] = field(default_factory=list)
    else_line: Optional[int] = None

    def describe(self) -> str:
        return f"in 'if {self.branches[0].condition}'"

    def __str__(self) -> str:
        return f"IF {self.branches[0].condition}"
