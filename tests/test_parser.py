"""Tests for the Whisker tree builder.

Covers the element tree produced for every tag kind, the inheritance
declaration rules, and line-tagged syntax errors.
"""

from __future__ import annotations

import pytest

from whisker import DictLoader, Environment, ErrorCode, Template, TemplateSyntaxError
from whisker.environment.exceptions import TemplateNotFoundError
from whisker.nodes import Block, Section, Text, Variable


class TestElementTree:
    """Node kinds produced for each tag."""

    def test_text_and_variable(self, env: Environment) -> None:
        template = env.from_string("Hello {{name}}!")
        assert template.elements == (
            Text(1, "Hello "),
            Variable(1, "name"),
            Text(1, "!"),
        )

    def test_tag_body_is_trimmed(self, env: Environment) -> None:
        template = env.from_string("{{  user.name  }}")
        assert template.elements == (Variable(1, "user.name"),)

    def test_raw_variable(self, env: Environment) -> None:
        template = env.from_string("{{{ name }}}")
        assert template.elements == (Variable(1, "name", escape=False),)

    def test_comment_emits_nothing(self, env: Environment) -> None:
        template = env.from_string("a{{! a comment }}b")
        assert template.elements == (Text(1, "a"), Text(1, "b"))

    def test_section(self, env: Environment) -> None:
        template = env.from_string("{{#items}}\n- {{name}}\n{{/items}}")
        assert template.elements == (
            Section(
                1,
                "items",
                False,
                (Text(2, "- "), Variable(2, "name"), Text(2, "\n")),
            ),
        )

    def test_inverted_section(self, env: Environment) -> None:
        template = env.from_string("{{^empty}}none{{/empty}}")
        assert template.elements == (Section(1, "empty", True, (Text(1, "none"),)),)

    def test_section_open_consumes_crlf(self, env: Environment) -> None:
        template = env.from_string("{{#a}}\r\nx{{/a}}")
        (section,) = template.elements
        assert section.body == (Text(2, "x"),)

    def test_only_one_line_break_is_consumed(self, env: Environment) -> None:
        template = env.from_string("{{#a}}\n\nx{{/a}}")
        (section,) = template.elements
        assert section.body == (Text(2, "\nx"),)

    def test_close_tag_name_is_trimmed(self, env: Environment) -> None:
        template = env.from_string("{{# a }}x{{/ a }}")
        assert template.elements == (Section(1, "a", False, (Text(1, "x"),)),)

    def test_nested_sections(self, env: Environment) -> None:
        template = env.from_string("{{#a}}{{^b}}{{c}}{{/b}}{{/a}}")
        assert template.elements == (
            Section(1, "a", False, (Section(1, "b", True, (Variable(1, "c"),)),)),
        )

    def test_dotted_section_name(self, env: Environment) -> None:
        template = env.from_string("{{#A.B}}{{C}}{{/A.B}}")
        assert template.elements == (Section(1, "A.B", False, (Variable(1, "C"),)),)

    def test_text_lineno_is_start_line(self, env: Environment) -> None:
        template = env.from_string("a\nb\n{{x}}")
        assert template.elements == (Text(1, "a\nb\n"), Variable(3, "x"))


class TestBlocks:
    """Block registration in the template's block table."""

    def test_block_is_element_and_registered(self, env: Environment) -> None:
        template = env.from_string("{{*title}}T{{/title}}")
        block = Block(1, "title", (Text(1, "T"),))
        assert template.elements == (block,)
        assert template.blocks == {"title": block}

    def test_last_definition_wins(self, env: Environment) -> None:
        template = env.from_string("{{*a}}1{{/a}}{{*a}}2{{/a}}")
        assert template.blocks["a"].body == (Text(1, "2"),)
        assert len(template.elements) == 2

    def test_nested_block_is_registered(self, env: Environment) -> None:
        template = env.from_string("{{#s}}{{*inner}}x{{/inner}}{{/s}}")
        assert "inner" in template.blocks

    def test_block_table_is_read_only(self, env: Environment) -> None:
        template = env.from_string("{{*a}}x{{/a}}")
        with pytest.raises(TypeError):
            template.blocks["a"] = template.blocks["a"]  # type: ignore[index]


class TestParentDeclaration:
    """{{<parent}} handling."""

    def test_parent_name_recorded(self, env: Environment) -> None:
        template = env.from_string("{{< layout }}{{*a}}x{{/a}}")
        assert template.parent == "layout"

    def test_no_parent_by_default(self, env: Environment) -> None:
        assert env.from_string("x").parent == ""

    def test_inheriting_template_keeps_only_blocks(self, env: Environment) -> None:
        template = env.from_string(
            "{{<layout}}intro {{name}}{{{raw}}}{{*a}}x{{/a}}{{#s}}y{{/s}}{{^t}}z{{/t}}"
        )
        assert template.elements == (Block(1, "a", (Text(1, "x"),)),)

    def test_declaration_position_does_not_matter(self, env: Environment) -> None:
        before = env.from_string("{{<layout}}{{name}}{{*a}}x{{/a}}{{#s}}y{{/s}}")
        after = env.from_string("{{name}}{{*a}}x{{/a}}{{#s}}y{{/s}}{{<layout}}")
        assert before.elements == after.elements
        assert before.blocks == after.blocks
        assert after.parent == "layout"

    def test_last_declaration_wins(self, env: Environment) -> None:
        template = env.from_string("{{<one}}{{<two}}")
        assert template.parent == "two"

    def test_content_outside_blocks_is_still_checked(self, env: Environment) -> None:
        with pytest.raises(TemplateSyntaxError):
            env.from_string("{{<layout}}{{#s}}y{{/t}}")


class TestPartials:
    """{{>name}} is parsed eagerly and spliced in whole."""

    def test_partial_is_spliced_as_template(self) -> None:
        env = Environment(loader=DictLoader({"nav.html": "<nav/>"}), directory="")
        template = env.from_string("A{{> nav }}B", extension=".html")
        assert template.elements[0] == Text(1, "A")
        partial = template.elements[1]
        assert isinstance(partial, Template)
        assert partial.name == "nav.html"
        assert partial.elements == (Text(1, "<nav/>"),)
        assert template.elements[2] == Text(1, "B")

    def test_partial_resolved_in_template_directory(self) -> None:
        loader = DictLoader({"pages/home.txt": "{{>part}}", "pages/part.txt": "P"})
        template = Environment(loader=loader).get_template("pages/home.txt")
        assert template.elements[0].name == "pages/part.txt"

    def test_missing_partial_raises(self, env: Environment) -> None:
        with pytest.raises(TemplateNotFoundError):
            env.from_string("{{>missing}}")

    def test_partial_syntax_error_propagates(self) -> None:
        env = Environment(loader=DictLoader({"bad.html": "\n{{#x}}"}), directory="")
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.from_string("{{>bad}}", extension=".html")
        assert exc_info.value.name == "bad.html"
        assert exc_info.value.lineno == 2

    def test_self_including_partial(self) -> None:
        env = Environment(loader=DictLoader({"a.html": "x{{>a}}"}))
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.get_template("a.html")
        assert exc_info.value.code is ErrorCode.CIRCULAR_PARTIAL
        assert "a.html -> a.html" in exc_info.value.message

    def test_indirect_partial_cycle(self) -> None:
        env = Environment(loader=DictLoader({"a.html": "{{>b}}", "b.html": "{{>a}}"}))
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.get_template("a.html")
        assert "a.html -> b.html -> a.html" in exc_info.value.message

    def test_include_depth_limit(self) -> None:
        loader = DictLoader({"a.html": "{{>b}}", "b.html": "{{>c}}", "c.html": "x"})
        env = Environment(loader=loader, max_include_depth=2)
        with pytest.raises(TemplateSyntaxError, match="maximum partial depth"):
            env.get_template("a.html")


class TestSyntaxErrors:
    """Errors carry a message, an error code and the offending tag's line."""

    @pytest.mark.parametrize(
        ("source", "message", "lineno", "code"),
        [
            ("{{ }}", "empty tag", 1, ErrorCode.EMPTY_TAG),
            ("a\n\n{{}}", "empty tag", 3, ErrorCode.EMPTY_TAG),
            ("line1\nline2 {{name", "unterminated tag", 2, ErrorCode.UNTERMINATED_TAG),
            ("{{{name}}", "unterminated tag", 1, ErrorCode.UNTERMINATED_TAG),
            (
                "a\n{{#items}}\nb",
                "unterminated container: missing closing tag for 'items'",
                2,
                ErrorCode.UNTERMINATED_CONTAINER,
            ),
            (
                "{{*body}}\n\nx",
                "unterminated container: missing closing tag for 'body'",
                1,
                ErrorCode.UNTERMINATED_CONTAINER,
            ),
            ("{{#a}}\n{{/b}}", "mismatched closing tag: 'b'", 2, ErrorCode.MISMATCHED_CLOSE),
            ("x\n\n{{/a}}", "unmatched close tag", 3, ErrorCode.UNMATCHED_CLOSE),
            (
                "{{#a}}\n{{#b}}\n\n{{/a}}",
                "mismatched closing tag: 'a'",
                4,
                ErrorCode.MISMATCHED_CLOSE,
            ),
        ],
    )
    def test_error(
        self, env: Environment, source: str, message: str, lineno: int, code: ErrorCode
    ) -> None:
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.from_string(source)
        error = exc_info.value
        assert error.message == message
        assert error.lineno == lineno
        assert error.code is code

    def test_error_message_includes_location_and_snippet(self, env: Environment) -> None:
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.from_string("ok\n{{#a}}{{/b}}\n", name="page.html")
        text = str(exc_info.value)
        assert "mismatched closing tag: 'b'" in text
        assert "page.html:2" in text
        assert "{{#a}}{{/b}}" in text

    def test_format_compact(self, env: Environment) -> None:
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.from_string("{{}}")
        assert exc_info.value.format_compact() == "W-PAR-001: line 1: empty tag (<template>:1)"


class TestNestingLimit:
    """Sections and blocks nested past ``max_nesting_depth`` are rejected."""

    @staticmethod
    def _nested(depth: int) -> str:
        return "{{#a}}" * depth + "x" + "{{/a}}" * depth

    def test_at_limit_parses(self) -> None:
        env = Environment(loader=DictLoader({}), max_nesting_depth=5)
        assert env.from_string(self._nested(5)).render(a=True) == "x"

    def test_over_limit_raises(self) -> None:
        env = Environment(loader=DictLoader({}), max_nesting_depth=5)
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.from_string("\n" + self._nested(6))
        assert exc_info.value.code is ErrorCode.NESTING_TOO_DEEP
        assert exc_info.value.lineno == 2
        assert "maximum nesting depth exceeded (5)" in exc_info.value.message

    def test_blocks_count_toward_limit(self) -> None:
        env = Environment(loader=DictLoader({}), max_nesting_depth=2)
        with pytest.raises(TemplateSyntaxError, match="maximum nesting depth"):
            env.from_string("{{*a}}{{^b}}{{*c}}{{/c}}{{/b}}{{/a}}")

    def test_siblings_do_not_accumulate(self) -> None:
        env = Environment(loader=DictLoader({}), max_nesting_depth=1)
        template = env.from_string("{{#a}}1{{/a}}{{#a}}2{{/a}}{{*b}}3{{/b}}")
        assert template.render(a=True) == "123"

    def test_default_limit_stops_deep_nesting(self, env: Environment) -> None:
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.from_string(self._nested(600))
        assert exc_info.value.code is ErrorCode.NESTING_TOO_DEEP

    def test_limit_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="max_nesting_depth"):
            Environment(max_nesting_depth=0)


class TestIdempotence:
    """Parsing the same source twice yields equal trees."""

    def test_same_tree(self, env: Environment) -> None:
        source = "{{#a}}\n{{b.c}}{{{d}}}{{^e}}f{{/e}}{{/a}}{{*g}}h{{/g}}"
        first = env.from_string(source)
        second = env.from_string(source)
        assert first.elements == second.elements
        assert first.blocks == second.blocks
