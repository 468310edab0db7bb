"""Compile-time and render-time errors."""

import pytest

from xtmpl.environment.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UnclosedMarkerError,
    UnknownHelperError,
    UnmatchedBlockCloseError,
    build_source_snippet,
)


class TestUnknownHelper:
    def test_block_helper(self, env):
        with pytest.raises(UnknownHelperError) as exc_info:
            env.compile("{{#loop items}}{{/loop}}")
        error = exc_info.value
        assert error.helper == "loop"
        assert error.kind == "block"
        assert error.code is ErrorCode.UNKNOWN_HELPER

    def test_inline_helper(self, env):
        with pytest.raises(UnknownHelperError, match="No inline helper named 'fmt'"):
            env.compile("{{fmt a 2}}")

    def test_is_syntax_error(self):
        assert issubclass(UnknownHelperError, TemplateSyntaxError)
        assert issubclass(TemplateSyntaxError, TemplateError)


class TestBlockStructure:
    def test_unterminated_block(self, env):
        with pytest.raises(UnmatchedBlockCloseError) as exc_info:
            env.compile("{{#if a}}")
        assert exc_info.value.expected == "if"
        assert exc_info.value.lineno == 1

    def test_innermost_unterminated_reported(self, env):
        with pytest.raises(UnmatchedBlockCloseError) as exc_info:
            env.compile("{{#if a}}\n{{#with b}}\n{{/if}}")
        assert exc_info.value.expected == "with"
        assert exc_info.value.found == "if"
        assert exc_info.value.lineno == 3

    def test_mismatched_close(self, env):
        with pytest.raises(UnmatchedBlockCloseError, match="does not match open block 'forin'"):
            env.compile("{{#forin a}}{{$key}}{{/for}}")

    def test_close_without_open(self, env):
        with pytest.raises(UnmatchedBlockCloseError) as exc_info:
            env.compile("x{{/if}}")
        assert exc_info.value.found == "if"
        assert exc_info.value.expected is None

    def test_else_outside_block(self, env):
        with pytest.raises(TemplateSyntaxError, match="outside of a block"):
            env.compile("{{#else}}")

    def test_second_else(self, env):
        with pytest.raises(TemplateSyntaxError, match="already has"):
            env.compile("{{#if a}}1{{#else}}2{{#else}}3{{/if}}")

    def test_unclosed_marker(self, env):
        with pytest.raises(UnclosedMarkerError) as exc_info:
            env.compile("ok {{a")
        assert exc_info.value.code is ErrorCode.UNCLOSED_MARKER
        assert exc_info.value.col_offset == 3

    def test_scope_above_root(self, env):
        with pytest.raises(TemplateSyntaxError, match="climbs"):
            env.compile("{{../a}}")

    def test_parent_loop_local(self, env):
        source = "{{#for rows}}{{#for cols}}{{../$key}}{{/for}}{{/for}}"
        with pytest.raises(TemplateSyntaxError, match="cannot be reached") as exc_info:
            env.compile(source)
        assert exc_info.value.lineno == 1


class TestErrorLocation:
    def test_location_in_message(self, env):
        with pytest.raises(UnknownHelperError) as exc_info:
            env.compile("line one\n  {{#loop items}}\nline three", name="card.html")
        error = exc_info.value
        assert (error.lineno, error.col_offset, error.name) == (2, 2, "card.html")
        message = str(error)
        assert "--> card.html:2:2" in message
        assert ">  2 |   {{#loop items}}" in message
        assert "     |   ^" in message

    def test_format_compact(self, env):
        with pytest.raises(UnknownHelperError) as exc_info:
            env.compile("{{#loop items}}{{/loop}}", name="t.html")
        assert exc_info.value.format_compact() == "X-PAR-002: No block helper named 'loop' (t.html:1)"

    def test_unnamed_template(self, env):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.compile("{{}}")
        assert "<template>:1:0" in str(exc_info.value)

    def test_snippet_context(self):
        snippet = build_source_snippet("a\nb\nc\nd", 3, column=0)
        assert [lineno for lineno, _ in snippet.lines] == [2, 3, 4]
        assert snippet.format().splitlines()[2] == ">  3 | c"

    def test_error_code_categories(self):
        assert ErrorCode.SYNTAX_ERROR.category == "compile"
        assert ErrorCode.RUNTIME_ERROR.category == "runtime"


class TestRuntimeErrors:
    def test_helper_removed_after_compile(self, env):
        env.register_inline_helper("gone", lambda x: x)
        template = env.compile("{{#if true}}\n{{gone 1}}{{/if}}", name="page")
        env.helpers.unregister_inline_helper("gone")
        with pytest.raises(TemplateRuntimeError) as exc_info:
            template({})
        error = exc_info.value
        assert error.lineno == 2
        assert error.blocks == ["#if (line 1)"]
        assert "Inline helper 'gone' is not registered" in str(error)
        assert "Location: page:2" in str(error)
        assert "Inside: #if (line 1)" in str(error)

    def test_escape_helper_removed(self, env):
        template = env.compile("{{a}}")
        env.helpers.unregister_inline_helper("$escape")
        with pytest.raises(TemplateRuntimeError, match=r"\$escape"):
            template({"a": 1})

    def test_raw_output_needs_no_escape_helper(self, env):
        template = env.compile("{{=a}}")
        env.helpers.unregister_inline_helper("$escape")
        assert template({"a": "<"}) == "<"
