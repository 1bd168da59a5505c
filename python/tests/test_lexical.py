"""
Tests for comment/literal span detection and SourceText lookups.
"""

from rehome.refactor.lexical import SourceText, literal_spans


def _covered(content: str, needle: str, nested: bool = False) -> bool:
    """Whether the first occurrence of ``needle`` starts inside a span."""
    pos = content.index(needle)
    return any(s <= pos < e for s, e in literal_spans(content, nested))


class TestLiteralSpans:
    def test_line_comment(self):
        content = "Foo x; // Foo again\nFoo y;"
        spans = literal_spans(content)

        assert spans == [(7, content.index("\n"))]

    def test_block_comment(self):
        assert _covered("/* Invoice */ Bar b;", "Invoice")
        assert not _covered("/* x */ Invoice i;", "Invoice")

    def test_string_literal(self):
        content = 'String s = "Invoice"; Invoice i;'
        spans = literal_spans(content)

        assert len(spans) == 1
        start, end = spans[0]
        assert content[start:end] == '"Invoice"'

    def test_escaped_quote_does_not_end_string(self):
        content = r'String s = "say \"Invoice\""; Invoice i;'
        start, end = literal_spans(content)[0]

        assert content[start:end] == r'"say \"Invoice\""'

    def test_char_literal(self):
        content = "char c = '\\''; Invoice i;"
        start, end = literal_spans(content)[0]

        assert content[start:end] == "'\\''"

    def test_text_block(self):
        content = 'String s = """\n  Invoice\n  """;\nInvoice i;'
        spans = literal_spans(content)

        assert len(spans) == 1
        assert _covered(content, "Invoice")
        assert spans[0][1] == content.index(";")

    def test_unterminated_string_stops_at_newline(self):
        content = 'String s = "oops\nInvoice i;'
        assert not _covered(content, "Invoice")

    def test_comment_markers_inside_string_are_not_comments(self):
        content = 'String url = "http://host"; Invoice i;'
        assert not _covered(content, "Invoice")

    def test_nested_block_comments(self):
        content = "/* a /* b */ Invoice */ x"

        # Kotlin: the comment only ends at the second */
        assert _covered(content, "Invoice", nested=True)
        # Java: the first */ closes it
        assert not _covered(content, "Invoice", nested=False)


class TestSourceText:
    def test_lines_strip_carriage_returns(self):
        source = SourceText("package a;\r\nclass B {}\r\n")

        assert source.lines == ["package a;", "class B {}", ""]
        assert source.line_text(2) == "class B {}"

    def test_offset(self):
        source = SourceText("ab\r\ncd\nef")

        assert source.offset(1, 0) == 0
        assert source.offset(2, 1) == 5
        assert source.offset(3, 0) == 7

    def test_in_literal(self):
        source = SourceText('class A {\n  // Invoice\n  Invoice i = "Invoice";\n}')

        assert source.in_literal(2, 5)
        assert not source.in_literal(3, 2)
        assert source.in_literal(3, 15)

    def test_code_lines_skip_comment_lines(self):
        source = SourceText("/*\n * package x.y;\n */\npackage a.b;\nimport c.D;\n")

        assert [num for num, _ in source.code_lines()] == [4, 5]
