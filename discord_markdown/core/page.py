"""Standalone HTML page renderer with a Jinja2 template."""

from __future__ import annotations

from pathlib import Path

import jinja2

_TEMPLATE_DIR = str(Path(__file__).resolve().parent.parent / "templates" / "html")

_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_page(body_html: str, title: str = "Message") -> str:
    """Wrap a rendered HTML fragment in a complete document with its stylesheet.

    *body_html* is inserted as-is; *title* is escaped.
    """
    template = _env.get_template("page.html.j2")
    return template.render(body=body_html, title=title)
