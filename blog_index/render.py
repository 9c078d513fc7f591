from __future__ import annotations

from datetime import date
from html import escape
from typing import Iterable, List

from .config import SiteConfig
from .types import Post

INDEX_CSS = """
body {
    max-width: 42em;
    margin: 2em auto;
    padding: 0 1em;
    font-family: Georgia, 'Times New Roman', serif;
    line-height: 1.6;
}
.post-list {
    list-style: none;
    padding: 0;
}
.post-list li {
    margin-bottom: 1.5em;
}
.post-date {
    display: block;
    color: #777;
    font-size: 0.9em;
}
.post-code {
    margin-left: 0.5em;
    font-size: 0.9em;
}
"""

ABSOLUTE_URL_PREFIXES = ("http://", "https://", "//")


def _display_date(value: date) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def _href(baseurl: str, url: str) -> str:
    if url.startswith(ABSOLUTE_URL_PREFIXES):
        return url
    if not baseurl:
        return url
    return baseurl + "/" + url.lstrip("/")


def _render_item(post: Post, baseurl: str) -> str:
    lines = [
        '  <li class="post">',
        f'    <time class="post-date" datetime="{post.date.isoformat()}">'
        f"{_display_date(post.date)}</time>",
        f'    <a class="post-link" href="{escape(_href(baseurl, post.url))}">'
        f"{escape(post.title)}</a>",
    ]
    if post.external_code_ref:
        lines.append(
            f'    <a class="post-code" href="{escape(post.external_code_ref)}">code</a>'
        )
    if post.excerpt:
        lines.append(f'    <p class="post-excerpt">{escape(post.excerpt)}</p>')
    lines.append("  </li>")
    return "\n".join(lines)


def render(posts: Iterable[Post], baseurl: str = "") -> str:
    """
    Render posts as an HTML list, one item per post, in the order given.
    """
    items: List[str] = [_render_item(post, baseurl) for post in posts]
    if not items:
        return '<ul class="post-list"></ul>'
    return '<ul class="post-list">\n' + "\n".join(items) + "\n</ul>"


def render_document(posts: Iterable[Post], config: SiteConfig) -> str:
    """Wrap the post list in a complete front page."""
    description = ""
    if config.description:
        description = f'\n<p class="site-description">{escape(config.description)}</p>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{escape(config.title)}</title>
<style>{INDEX_CSS}</style>
</head>
<body>
<h1 class="site-title">{escape(config.title)}</h1>{description}
{render(posts, baseurl=config.baseurl)}
</body>
</html>
"""
