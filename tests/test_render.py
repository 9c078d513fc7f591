from datetime import date

import pytest
from bs4 import BeautifulSoup

from blog_index.config import SiteConfig
from blog_index.render import render, render_document
from blog_index.store import ContentStore
from blog_index.types import MalformedPostError, Post


@pytest.fixture
def posts():
    return (
        Post(
            title="Validation with applicatives",
            url="/2014/05/01/validation.html",
            date=date(2014, 5, 1),
            excerpt="Accumulating errors instead of failing fast.",
            external_code_ref="https://github.com/example/validation",
        ),
        Post(title="Futures", url="/2014/04/01/futures.html", date=date(2014, 4, 1)),
    )


def _items(html):
    return BeautifulSoup(html, "lxml").select("ul.post-list > li")


def test_one_item_per_post_in_given_order(posts):
    items = _items(render(posts))

    assert len(items) == 2
    assert [li.select_one("a.post-link").get_text() for li in items] == [
        "Validation with applicatives",
        "Futures",
    ]


def test_listing_from_store_is_newest_first():
    store = ContentStore(
        [
            {"title": "A", "url": "/a", "date": "2014-04-01"},
            {"title": "B", "url": "/b", "date": "2014-05-01"},
        ]
    )

    items = _items(render(store.list_posts()))

    assert [li.select_one("a.post-link")["href"] for li in items] == ["/b", "/a"]


def test_render_is_idempotent(posts):
    assert render(posts) == render(posts)
    assert render_document(posts, SiteConfig()) == render_document(posts, SiteConfig())


def test_empty_listing():
    html = render([])

    assert html == '<ul class="post-list"></ul>'
    assert _items(html) == []


def test_code_link_only_when_reference_present(posts):
    with_code, without_code = _items(render(posts))

    code_link = with_code.select_one("a.post-code")
    assert code_link is not None
    assert code_link["href"] == "https://github.com/example/validation"
    assert without_code.select_one("a.post-code") is None


def test_excerpt_only_when_present(posts):
    with_excerpt, without_excerpt = _items(render(posts))

    assert with_excerpt.select_one("p.post-excerpt").get_text() == (
        "Accumulating errors instead of failing fast."
    )
    assert without_excerpt.select_one("p.post-excerpt") is None


def test_date_display(posts):
    time_el = _items(render(posts))[1].select_one("time.post-date")

    assert time_el["datetime"] == "2014-04-01"
    assert time_el.get_text() == "Apr 1, 2014"


def test_text_is_escaped():
    post = Post(title="<script>alert(1)</script>", url='/x?a=1&b="2"', date=date(2014, 1, 1))

    html = render([post])

    assert "<script>" not in html
    link = _items(html)[0].select_one("a.post-link")
    assert link.get_text() == "<script>alert(1)</script>"
    assert link["href"] == '/x?a=1&b="2"'


def test_baseurl_prefixes_relative_links():
    relative = Post(title="A", url="/a.html", date=date(2014, 1, 2))
    absolute = Post(title="B", url="https://elsewhere.example/b", date=date(2014, 1, 1))

    items = _items(render([relative, absolute], baseurl="/blog"))

    assert items[0].select_one("a.post-link")["href"] == "/blog/a.html"
    assert items[1].select_one("a.post-link")["href"] == "https://elsewhere.example/b"


def test_baseurl_joins_urls_without_leading_slash():
    post = Post(title="A", url="a.html", date=date(2014, 1, 1))

    assert _items(render([post], baseurl="/blog"))[0].select_one("a.post-link")["href"] == "/blog/a.html"
    assert _items(render([post]))[0].select_one("a.post-link")["href"] == "a.html"


def test_document_wraps_listing(posts):
    config = SiteConfig(title="Functional Commerce", description="Notes on FP", baseurl="/blog")

    soup = BeautifulSoup(render_document(posts, config), "lxml")

    assert soup.title.get_text() == "Functional Commerce"
    assert soup.select_one("h1.site-title").get_text() == "Functional Commerce"
    assert soup.select_one("p.site-description").get_text() == "Notes on FP"
    assert soup.select_one("a.post-link")["href"] == "/blog/2014/05/01/validation.html"


def test_document_without_posts_or_description():
    soup = BeautifulSoup(render_document([], SiteConfig()), "lxml")

    assert soup.select_one("ul.post-list") is not None
    assert soup.select("ul.post-list > li") == []
    assert soup.select_one("p.site-description") is None


def test_malformed_post_prevents_rendering():
    store = ContentStore([{"url": "/a", "date": "2014-04-01"}])

    with pytest.raises(MalformedPostError):
        render(store.list_posts())
