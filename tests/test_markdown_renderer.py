from synapse_notes.services.markdown_renderer import MarkdownRenderer


def test_renders_headings_and_code_blocks():
    html = MarkdownRenderer().render_body("# Title\n\n```\nprint(1)\n```\n")

    assert "<h1>Title</h1>" in html
    assert "<pre>" in html


def test_strips_scripts_and_unsafe_links():
    html = MarkdownRenderer().render_body(
        "<script>alert(1)</script>\n\n[click](javascript:void) [ok](https://example.com)"
    )

    assert "<script" not in html
    assert "javascript:" not in html
    assert 'href="https://example.com"' in html


def test_page_escapes_title():
    page = MarkdownRenderer().render_page("body", title="<b>x</b>")

    assert "<h1>&lt;b&gt;x&lt;/b&gt;</h1>" in page
    assert "<p>body</p>" in page


def test_empty_text_renders_empty_body():
    assert MarkdownRenderer().render_body("") == ""
