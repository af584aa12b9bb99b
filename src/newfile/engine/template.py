"""CompiledTemplate - the result of compiling a template."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple, Union

from newfile.engine.evaluator import Evaluator
from newfile.engine.spec import Instruction


@dataclass(frozen=True)
class CompiledTemplate:
    """A compiled template, ready to be evaluated any number of times.

    Attributes:
        source: The template lines, kept to annotate error messages.
        program: Top-level instructions; blocks nest their bodies.
        code: Program listing: a prologue, one entry per source line, and
            an epilogue. Entry `n` describes template line `n`.
        environment: The environment bound at compile time. Evaluation
            never modifies it.
    """

    source: Tuple[str, ...]
    program: Tuple[Instruction, ...]
    code: Tuple[str, ...]
    environment: Mapping[str, Any] = field(default_factory=dict)

    def evaluate(
        self,
        return_lines: bool = False,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Union[str, List[str]]:
        """Render the template.

        Args:
            return_lines: Return the list of produced lines instead of a
                single newline-joined string.
            overrides: Values layered over the bound environment for this
                call only.

        Raises:
            TemplateEvaluationError: If anything fails while rendering.
        """
        lines = Evaluator(self.source).run(self.program, self.environment, overrides)
        if return_lines:
            return lines
        return "\n".join(lines)

    def listing(self) -> str:
        """Human-readable program listing, numbered like the template."""
        width = len(str(len(self.code)))
        rows = []
        for index, entry in enumerate(self.code):
            if 0 < index < len(self.code) - 1:
                rows.append(f"{index:>{width}}  {entry}")
            else:
                rows.append(f"{'':>{width}}  {entry}")
        return "\n".join(rows)
