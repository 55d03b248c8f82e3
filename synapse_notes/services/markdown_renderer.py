from __future__ import annotations

import html

import markdown as md

from synapse_notes.core.sanitize import sanitize_rendered_html


class MarkdownRenderer:
    def __init__(self, *, extensions: list[str] | None = None):
        self.extensions = extensions or ["fenced_code", "tables"]

    def render_body(self, text: str) -> str:
        rendered = md.markdown(text or "", extensions=self.extensions)
        return sanitize_rendered_html(rendered)

    def render_page(self, text: str, *, title: str = "") -> str:
        body = self.render_body(text)
        heading = f"<h1>{html.escape(title)}</h1>\n" if title else ""
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <style>
    body {{ font-family: sans-serif; padding: 16px; line-height: 1.5; }}
    code, pre {{ background: #f5f5f5; }}
    pre {{ padding: 12px; }}
    a {{ text-decoration: none; }}
  </style>
</head>
<body>{heading}{body}</body>
</html>
"""
