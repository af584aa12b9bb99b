"""Tests for the template compiler."""

import pytest

from newfile.engine import Compiler, TemplateSyntaxError, compile_template
from newfile.engine.spec import (
    EPILOGUE,
    PROLOGUE,
    AppendComputed,
    AppendLiteral,
    ForBlock,
    IfBlock,
    InsertExpression,
    InsertSequence,
    SetVariable,
)


# =============================================================================
# Text lines
# =============================================================================


class TestTextLines:
    def test_literal_text_round_trips(self):
        """Text without placeholders or statements is reproduced unchanged."""
        text = "first line\n  indented\n\nlast"
        assert compile_template(text).evaluate() == text

    def test_single_trailing_newline_is_not_a_line(self):
        compiled = compile_template("a\nb\n")
        assert compiled.source == ("a", "b")
        assert compiled.evaluate() == "a\nb"

    def test_empty_template_is_one_empty_line(self):
        compiled = compile_template("")
        assert compiled.source == ("",)
        assert compiled.evaluate(return_lines=True) == [""]

    def test_indent_prefixes_every_line(self):
        assert compile_template("x", indent=4).evaluate() == "    x"

    def test_indent_preserves_relative_indentation_and_blank_lines(self):
        compiled = compile_template("a\n  b\n\nc", indent=2)
        assert compiled.evaluate() == "  a\n    b\n\n  c"

    def test_literal_line_compiles_to_append_literal(self):
        compiled = compile_template("plain text")
        assert compiled.program == (AppendLiteral(1, text="plain text"),)

    def test_placeholder_line_compiles_to_append_computed(self):
        compiled = compile_template("Hello $(name)!")
        (instruction,) = compiled.program
        assert isinstance(instruction, AppendComputed)
        assert [str(p) for p in instruction.parts] == ["Hello ", "name", "!"]

    def test_empty_placeholder_is_literal(self):
        """`$()` has nothing to evaluate, so it stays in the output as is."""
        assert compile_template("cost: $()").evaluate() == "cost: $()"
        assert (
            compile_template("cost: «»", variable_syntax="bracket").evaluate()
            == "cost: «»"
        )

    def test_placeholder_with_nested_parentheses(self):
        compiled = compile_template(
            "v=$(fmt('(x)'))", environment={"fmt": lambda s: s.upper()}
        )
        assert compiled.evaluate() == "v=(X)"

    def test_unbalanced_placeholder_is_literal(self):
        assert compile_template("a $(b").evaluate() == "a $(b"

    def test_bracket_placeholders_ignore_default_syntax(self):
        compiled = compile_template(
            "$(name) «name»", variable_syntax="bracket", environment={"name": "Ada"}
        )
        assert compiled.evaluate() == "$(name) Ada"


# =============================================================================
# Directives and statements
# =============================================================================


class TestDirectivesAndStatements:
    def test_table_directive_captures_indent(self):
        compiled = compile_template("  ${items}", indent=2)
        assert compiled.program == (InsertSequence(1, name="items", indent="    "),)

    def test_table_directive_must_be_alone_on_its_line(self):
        """Anything besides whitespace makes it a regular text line."""
        compiled = compile_template("${items} trailing")
        assert compiled.program == (AppendLiteral(1, text="${items} trailing"),)

    def test_escape_line_takes_priority(self):
        """A comment line is never scanned for placeholders."""
        assert compile_template("@# $(missing)\ntext").evaluate() == "text"

    def test_blocks_nest_their_bodies(self):
        compiled = compile_template(
            "@for x in xs\n@if x\n$(x)\n@else\n-\n@end\n@end"
        )
        (loop,) = compiled.program
        assert isinstance(loop, ForBlock)
        assert loop.targets == ["x"]
        (cond,) = loop.body
        assert isinstance(cond, IfBlock)
        assert cond.else_line == 4
        assert isinstance(cond.branches[0].body[0], AppendComputed)
        assert cond.orelse == [AppendLiteral(5, text="-")]

    def test_set_and_insert_statements(self):
        compiled = compile_template("@set n = 1\n  @insert lines", indent=1)
        set_var, insert = compiled.program
        assert isinstance(set_var, SetVariable)
        assert set_var.name == "n"
        assert isinstance(insert, InsertExpression)
        assert insert.indent == "   "

    def test_statements_carry_their_expressions(self):
        compiled = compile_template("@set n = 1\n@insert rows\n@for x in xs\n@end")
        set_var, insert, loop = compiled.program
        assert str(set_var.expression) == "1"
        assert str(insert.expression) == "rows"
        assert str(loop.iterable) == "xs"

    def test_statement_instructions_require_an_expression(self):
        with pytest.raises(TypeError):
            SetVariable(1, name="n")
        with pytest.raises(TypeError):
            InsertExpression(1)
        with pytest.raises(TypeError):
            ForBlock(1, targets=["x"])

    def test_trailing_colons_are_accepted(self):
        compiled = compile_template("@for x in xs:\n@if x:\n@elif y:\n@else:\n@end\n@end")
        assert isinstance(compiled.program[0], ForBlock)

    def test_listing_has_one_entry_per_line_plus_prologue_and_epilogue(self):
        compiled = compile_template("a\n@for x in xs\n$(x)\n@end\n${rows}")
        assert len(compiled.code) == len(compiled.source) + 2
        assert compiled.code[0] == PROLOGUE
        assert compiled.code[-1] == EPILOGUE
        assert compiled.code[2] == "FOR x IN xs"
        assert compiled.code[4] == "END"

    def test_listing_is_numbered_like_the_template(self):
        listing = compile_template("a\nb").listing().splitlines()
        assert listing[1].strip().startswith("1")
        assert listing[2].strip().startswith("2")


# =============================================================================
# Syntax errors
# =============================================================================


class TestSyntaxErrors:
    @pytest.mark.parametrize(
        "text, line, fragment",
        [
            ("@for x items", 1, "expected 'for"),
            ("ok\n@if x\nfoo", 2, "never closed"),
            ("@end", 1, "without an open block"),
            ("@else", 1, "without a matching 'if'"),
            ("$(1 +)", 1, "invalid expression '1 +'"),
            ("a\n@bogus thing", 2, "unknown statement 'bogus'"),
            ("@if x\n@else\n@elif y\n@end", 3, "'elif' after 'else'"),
            ("@for x in xs\n@endif", 2, "'endif' closes a 'for' block"),
            ("@set 1x = 2", 1, "not a valid variable name"),
            ("@for a, 2 in xs\n@end", 1, "not a valid loop variable"),
            ("@if\n@end", 1, "missing condition"),
            ("@insert", 1, "expected 'insert"),
        ],
    )
    def test_error_reports_template_line(self, text, line, fragment):
        with pytest.raises(TemplateSyntaxError) as excinfo:
            compile_template(text)

        error = excinfo.value
        assert error.line == line
        assert fragment in error.diagnostic.message
        assert error.diagnostic.source == text.split("\n")[line - 1]

    def test_error_message_format(self):
        with pytest.raises(TemplateSyntaxError) as excinfo:
            compile_template("first\n@for x items")

        assert str(excinfo.value) == (
            "Syntax error in the template: "
            "expected 'for <name>[, <name>...] in <expression>'\n"
            "\tat line 2:  >>> @for x items <<<"
        )

    def test_invalid_indent(self):
        with pytest.raises(ValueError):
            Compiler(indent=-1)

    def test_invalid_variable_syntax(self):
        with pytest.raises(ValueError):
            Compiler(variable_syntax="curly")
