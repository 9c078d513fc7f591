from __future__ import annotations

from argparse import ArgumentParser
from pathlib import Path
from typing import List, Optional

from .config import CONFIG_FILENAME, ConfigError, load_config
from .render import render_document
from .store import ContentStore
from .types import MalformedPostError


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        description="Build the front page of a static blog from its post files."
    )
    parser.add_argument(
        "--site",
        type=str,
        default=".",
        help="Site directory containing _posts/ (default: current directory)",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="_site",
        help="Output directory for index.html (default: _site)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Site config file (default: <site>/{CONFIG_FILENAME})",
    )
    parser.add_argument(
        "--drafts",
        action="store_true",
        help="Also list posts from _drafts/",
    )
    parser.add_argument(
        "--title", type=str, default=None, help="Override the site title"
    )
    parser.add_argument(
        "--baseurl", type=str, default=None, help="Override the site base URL"
    )

    return parser


def write_index(document: str, out_dir: Path) -> Path:
    output_path = out_dir / "index.html"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        f.write(document)
    return output_path


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    site_dir = Path(args.site)
    config_path = Path(args.config) if args.config else site_dir / CONFIG_FILENAME

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        raise SystemExit(f"[error] {exc}") from exc
    config = config.with_overrides(title=args.title, baseurl=args.baseurl)

    try:
        store = ContentStore.from_directory(
            site_dir,
            include_drafts=args.drafts,
            excerpt_separator=config.excerpt_separator,
        )
        print(f"[load] {site_dir}: {len(store)} post files")
        posts = store.list_posts()
    except MalformedPostError as exc:
        raise SystemExit(f"[error] malformed post {exc}") from exc

    print(f"[render] {len(posts)} posts, newest first")
    document = render_document(posts, config)

    output_path = write_index(document, Path(args.out))
    print(f"[done] front page written: {output_path}")


if __name__ == "__main__":
    main()
