from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import re

import frontmatter
import markdown
import yaml
from bs4 import BeautifulSoup
from frontmatter.default_handlers import YAMLHandler

from .types import MalformedPostError, Post

DATE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[ T]|$)")
POST_FILENAME_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})-(.+)\.(?:md|markdown|html)$")
DRAFT_SUFFIXES = (".md", ".markdown", ".html")
DEFAULT_EXCERPT_SEPARATOR = "\n\n"


def _parse_date(value: Any, entry: str) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = DATE_PATTERN.match(value.strip())
        if match:
            try:
                return datetime.strptime(match.group(1), "%Y-%m-%d").date()
            except ValueError:
                pass
    raise MalformedPostError(entry, f"invalid date {value!r}")


def _require_text(record: Mapping[str, Any], keys: Tuple[str, ...], entry: str) -> str:
    for key in keys:
        value = record.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    raise MalformedPostError(entry, f"missing required field '{keys[0]}'")


def _plain_text(source: str) -> Optional[str]:
    """Render a Markdown snippet and flatten it to a single line of text."""
    soup = BeautifulSoup(markdown.markdown(source), "lxml")
    text = " ".join(soup.get_text().split())
    return text or None


def _excerpt(record: Mapping[str, Any], separator: str) -> Optional[str]:
    explicit = record.get("excerpt")
    if explicit is not None:
        return _plain_text(str(explicit))

    body = str(record.get("body") or "").strip()
    if not body:
        return None
    if not separator:
        # an empty separator turns excerpts off
        return None
    body = body.split(separator, 1)[0]
    return _plain_text(body)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_record(record: Any, entry: str, excerpt_separator: str) -> Post:
    if not isinstance(record, Mapping):
        raise MalformedPostError(entry, "post record is not a mapping")

    title = _require_text(record, ("title",), entry)
    if record.get("date") is None:
        raise MalformedPostError(entry, "missing required field 'date'")
    post_date = _parse_date(record["date"], entry)
    url = _require_text(record, ("url", "permalink"), entry)

    return Post(
        title=title,
        url=url,
        date=post_date,
        excerpt=_excerpt(record, excerpt_separator),
        external_code_ref=_optional_text(record.get("github")),
        body=str(record.get("body") or ""),
    )


def _entry_name(record: Any, index: int) -> str:
    if isinstance(record, Mapping) and record.get("source"):
        return str(record["source"])
    return f"post #{index}"


class ContentStore:
    """Read-only collection of post records for the front page."""

    def __init__(
        self,
        records: Iterable[Mapping[str, Any]],
        excerpt_separator: str = DEFAULT_EXCERPT_SEPARATOR,
    ) -> None:
        self._records = tuple(records)
        self.excerpt_separator = excerpt_separator

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_directory(
        cls,
        site_dir: Path,
        include_drafts: bool = False,
        excerpt_separator: str = DEFAULT_EXCERPT_SEPARATOR,
    ) -> "ContentStore":
        return cls(
            load_records(site_dir, include_drafts=include_drafts),
            excerpt_separator=excerpt_separator,
        )

    def list_posts(self) -> Tuple[Post, ...]:
        """Return every post, newest first. Any bad record aborts the listing."""

        posts: List[Post] = []
        seen_urls: Dict[str, str] = {}

        for index, record in enumerate(self._records, start=1):
            entry = _entry_name(record, index)
            post = _parse_record(record, entry, self.excerpt_separator)
            if post.url in seen_urls:
                raise MalformedPostError(
                    entry, f"duplicate url {post.url!r} (also used by {seen_urls[post.url]})"
                )
            seen_urls[post.url] = entry
            posts.append(post)

        def _sort_key(p: Post) -> tuple[date, str]:
            # url breaks ties so posts from the same day keep a stable order
            return (p.date, p.url)

        posts.sort(key=_sort_key, reverse=True)
        return tuple(posts)


def split_front_matter(text: str, entry: str) -> tuple[Dict[str, Any], str]:
    """Split a post file into its YAML front matter and body."""
    handler = YAMLHandler()
    if not handler.detect(text):
        raise MalformedPostError(entry, "missing front matter block")

    try:
        raw, _ = handler.split(text)
        # python-frontmatter drops non-mapping metadata, so check the raw block
        front = handler.load(raw)
        post = frontmatter.loads(text, handler=handler)
    except yaml.YAMLError as exc:
        raise MalformedPostError(entry, f"invalid front matter ({exc})") from exc
    except ValueError as exc:
        raise MalformedPostError(entry, "unterminated front matter block") from exc

    if front is not None and not isinstance(front, dict):
        raise MalformedPostError(entry, "front matter is not a mapping")

    return dict(post.metadata), post.content


def _default_url(date_value: Any, slug: str, entry: str) -> Optional[str]:
    try:
        post_date = _parse_date(date_value, entry)
    except MalformedPostError:
        # left unset so validation reports the bad date
        return None
    return f"/{post_date:%Y/%m/%d}/{slug}.html"


def _read_post_file(
    path: Path, entry: str, slug: str, default_date: Any
) -> Optional[Dict[str, Any]]:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedPostError(entry, f"not valid UTF-8 ({exc})") from exc

    front, body = split_front_matter(text, entry)
    if front.get("published", True) is False:
        return None

    record: Dict[str, Any] = dict(front)
    record["body"] = body
    record["source"] = entry
    record.setdefault("date", default_date)
    if not record.get("url") and not record.get("permalink"):
        url = _default_url(record["date"], slug, entry)
        if url:
            record["url"] = url
    return record


def load_records(site_dir: Path, include_drafts: bool = False) -> List[Dict[str, Any]]:
    """Read ``_posts`` (and ``_drafts`` on request) under a site directory."""

    records: List[Dict[str, Any]] = []

    posts_dir = site_dir / "_posts"
    if posts_dir.is_dir():
        for path in sorted(posts_dir.rglob("*")):
            if not path.is_file():
                continue
            match = POST_FILENAME_PATTERN.match(path.name)
            if not match:
                continue
            entry = path.relative_to(site_dir).as_posix()
            record = _read_post_file(path, entry, match.group(2), match.group(1))
            if record is not None:
                records.append(record)

    drafts_dir = site_dir / "_drafts"
    if include_drafts and drafts_dir.is_dir():
        for path in sorted(drafts_dir.rglob("*")):
            if not path.is_file() or path.suffix not in DRAFT_SUFFIXES:
                continue
            entry = path.relative_to(site_dir).as_posix()
            modified = date.fromtimestamp(path.stat().st_mtime)
            record = _read_post_file(path, entry, path.stem, modified)
            if record is not None:
                records.append(record)

    return records
