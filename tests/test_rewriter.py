"""Tests for source rewriting and import insertion."""

from intl_refactor.extraction.context import ExtractionContext
from intl_refactor.refactoring.rewriter import DEFAULT_IMPORT_LINE, Rewriter

END_TO_END = "Text(\"Hello\"), MyText('World');"
KEYS = {"Hello": "hello", "World": "world"}


class TestRewrite:
    """Literal replacement inside display-constructor windows."""

    def test_end_to_end(self, rewriter):
        record = rewriter.rewrite(END_TO_END, KEYS)
        assert record.changed
        assert record.replacements == 2
        assert record.content == (
            "Text(AppLocalizations.of(context).hello), MyText(AppLocalizations.of(context).world);"
        )

    def test_idempotent(self, rewriter):
        first = rewriter.rewrite(END_TO_END, KEYS)
        second = rewriter.rewrite(first.content, KEYS)
        assert not second.changed
        assert second.content == first.content

    def test_no_match_unchanged(self, rewriter):
        record = rewriter.rewrite(END_TO_END, {"Goodbye": "goodbye"})
        assert not record.changed
        assert record.content == END_TO_END

    def test_unrelated_occurrences_untouched(self, rewriter):
        content = '// Say "Hello" to users\nprint("Hello");\nText("Hello")'
        record = rewriter.rewrite(content, {"Hello": "hello"})
        assert record.content == (
            '// Say "Hello" to users\nprint("Hello");\nText(AppLocalizations.of(context).hello)'
        )

    def test_one_replacement_per_window(self, rewriter):
        content = 'Text("Hello", semanticsLabel: "World")'
        record = rewriter.rewrite(content, KEYS)
        assert record.replacements == 1
        assert record.content == 'Text(AppLocalizations.of(context).hello, semanticsLabel: "World")'

    def test_other_arguments_kept(self, rewriter):
        content = "Text('Hello', style: TextStyle(fontSize: 12))"
        record = rewriter.rewrite(content, {"Hello": "hello"})
        assert record.content == "Text(AppLocalizations.of(context).hello, style: TextStyle(fontSize: 12))"

    def test_parentheses_inside_literal(self, rewriter):
        record = rewriter.rewrite('Text("Tap (here)")', {"Tap (here)": "tap_here"})
        assert record.content == "Text(AppLocalizations.of(context).tap_here)"

    def test_escaped_quote(self, rewriter):
        record = rewriter.rewrite("Text('Don\\'t panic')", {"Don't panic": "dont_panic"})
        assert record.content == "Text(AppLocalizations.of(context).dont_panic)"

    def test_dot_case_key_made_identifier(self, rewriter):
        record = rewriter.rewrite('Text("Hello")', {"Hello": "greeting.hello"})
        assert record.content == "Text(AppLocalizations.of(context).greetingHello)"

    def test_unbalanced_quotes_do_not_crash(self, rewriter):
        content = 'Text("Hello)\nText("World")'
        record = rewriter.rewrite(content, KEYS)
        assert record.content.split("\n") == ['Text("Hello)', "Text(AppLocalizations.of(context).world)"]

    def test_ignore_directive_respected(self, rewriter):
        content = "// i18n-ignore\nText('Sign out'),\nText('Sign out'),\n"
        record = rewriter.rewrite(content, {"Sign out": "sign_out"})
        assert record.replacements == 1
        assert record.content == (
            "// i18n-ignore\nText('Sign out'),\nText(AppLocalizations.of(context).sign_out),\n"
        )

    def test_custom_accessor_class(self):
        rewriter = Rewriter(ExtractionContext.create(accessor_class="S", reverse_lookup=False))
        record = rewriter.rewrite('Text("Hello")', {"Hello": "hello"})
        assert record.content == "Text(S.of(context).hello)"


# =============================================================================
# Accessor Forms
# =============================================================================


class TestAccessorForms:
    """Null assertion, const handling and call-style references."""

    def test_null_assertion_follows_file(self, rewriter):
        content = "AppBar(title: Text(AppLocalizations.of(context)!.title)),\nText('Hello'),"
        record = rewriter.rewrite(content, {"Hello": "hello"})
        assert "Text(AppLocalizations.of(context)!.hello)" in record.content
        assert "AppLocalizations.of(context).hello" not in record.content

    def test_const_dropped_for_accessor(self, rewriter):
        record = rewriter.rewrite('const Text("Hello")', {"Hello": "hello"}, preserve_const=True)
        assert record.content == "Text(AppLocalizations.of(context).hello)"

    def test_call_reference(self, rewriter):
        record = rewriter.rewrite('const Text("Hello")', {"Hello": "hello"}, use_accessor_pattern=False)
        assert record.content == 'Text(tr("hello"))'
        assert not record.import_needed

    def test_const_preserved_without_accessor(self, rewriter):
        record = rewriter.rewrite(
            'const Text("Hello")', {"Hello": "hello"}, use_accessor_pattern=False, preserve_const=True
        )
        assert record.content == 'const Text(tr("hello"))'


# =============================================================================
# Imports
# =============================================================================


class TestImports:
    """Import insertion."""

    def test_after_last_import(self, rewriter):
        content = "import 'package:flutter/material.dart';\nimport 'home.dart';\n\nclass A {}\n"
        assert rewriter.ensure_import(content) == (
            "import 'package:flutter/material.dart';\nimport 'home.dart';\n"
            f"{DEFAULT_IMPORT_LINE}\n\nclass A {{}}\n"
        )

    def test_top_of_file_without_imports(self, rewriter):
        assert rewriter.ensure_import("class A {}\n") == f"{DEFAULT_IMPORT_LINE}\n\nclass A {{}}\n"

    def test_idempotent(self, rewriter):
        once = rewriter.ensure_import("import 'a.dart';\nclass A {}\n")
        assert rewriter.ensure_import(once) == once
        assert once.count(DEFAULT_IMPORT_LINE) == 1

    def test_apply_adds_import(self, rewriter):
        record = rewriter.apply("import 'a.dart';\nText('Hello')", {"Hello": "hello"})
        assert record.content == (
            f"import 'a.dart';\n{DEFAULT_IMPORT_LINE}\nText(AppLocalizations.of(context).hello)"
        )

    def test_apply_dry_run_skips_import(self, rewriter):
        record = rewriter.apply("Text('Hello')", {"Hello": "hello"}, dry_run=True)
        assert record.changed
        assert record.content == "Text(AppLocalizations.of(context).hello)"

    def test_apply_unchanged_file_gets_no_import(self, rewriter):
        record = rewriter.apply("Text('Hello')", {"Bye": "bye"})
        assert record.content == "Text('Hello')"
