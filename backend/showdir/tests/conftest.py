import html
import os
import re
from pathlib import Path

import pytest

from showdir.schemas.listing import ListingOptions
from showdir.services.listing import DirectoryListing

ROW_RE = re.compile(
    r'<tr><td><i class="icon (?P<icon>[^"]*)"></i></td>'
    r'<td class="display-name(?P<external> external)?"><a href="(?P<href>[^"]*)"[^>]*>(?P<name>[^<]*)</a></td>'
    r'<td class="modified"><code>(?P<modified>[^<]*)</code></td>'
    r'<td class="filesize"><code>(?P<size>[^<]*)</code></td></tr>'
)


@pytest.fixture
def srv(tmp_path: Path) -> Path:
    """A small served tree with a subdirectory, files, a dotfile, a shortcut and a broken symlink."""
    root = tmp_path / "srv"
    root.mkdir()
    (root / "a").mkdir()
    (root / "a" / "inner.txt").write_text("inner")
    (root / "docs").mkdir()
    (root / "b.txt").write_bytes(b"x" * 2048)
    (root / "c.pdf").write_bytes(b"%PDF")
    (root / ".env").write_text("SECRET=1")
    (root / "link.url").write_text("https://example.com\n")
    os.symlink(root / "nowhere", root / "ghost")
    return root


@pytest.fixture
def make_listing(srv: Path):
    """Build a DirectoryListing rooted at the sample tree, with option overrides."""

    def _factory(**overrides) -> DirectoryListing:
        fields = {"root": str(srv), **overrides}
        return DirectoryListing(ListingOptions(**fields))

    return _factory


@pytest.fixture
def parse_rows():
    """Extract the listing table rows from rendered HTML, unescaped."""

    def _parse(page_html: str) -> list[dict]:
        rows = []
        for match in ROW_RE.finditer(page_html):
            rows.append(
                {
                    "icon": match["icon"],
                    "href": html.unescape(match["href"]),
                    "name": html.unescape(match["name"]),
                    "external": match["external"] is not None,
                    "modified": match["modified"],
                    "size": match["size"],
                }
            )
        return rows

    return _parse
