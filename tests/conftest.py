from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    site = tmp_path / "site"
    (site / "_posts").mkdir(parents=True)
    return site


@pytest.fixture
def write_post(site_dir: Path) -> Callable[..., Path]:
    """Write a post file under the site directory and return its path."""

    def _write(name: str, front_matter: str, body: str = "", folder: str = "_posts") -> Path:
        path = site_dir / folder / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"---\n{front_matter}---\n{body}", encoding="utf-8")
        return path

    return _write
