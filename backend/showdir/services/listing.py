"""DirectoryListing — renders the HTML index page for one directory.

The pipeline per request is: resolve the target path, stat it, read it, drop
dotfiles, classify and sort the entries, optionally add a ``..`` entry, build
the rows and render the template. Any failure while resolving, stating or
reading the target (or stating its parent) raises ``ListingError`` before any
output is produced. Per-entry stat failures are not errors; they show up as
rows without metadata.
"""

from __future__ import annotations

import asyncio
import os
import posixpath
import stat as stat_module
from pathlib import Path
from urllib.parse import quote, unquote

import jinja2
import structlog

from showdir.schemas.listing import Entry, FileMetadata, ListingOptions, ListingPage, ListingRow
from showdir.schemas.styles import DEFAULT_STYLES, ListingStyles
from showdir.services.classifier import classify_entries, sort_entries
from showdir.services.formatting import TIME_PLACEHOLDER, etag, format_mtime, http_date, size_to_string

logger = structlog.get_logger(__name__)

_TEMPLATES = jinja2.Environment(
    loader=jinja2.FileSystemLoader(Path(__file__).resolve().parent.parent / "templates"),
    autoescape=jinja2.select_autoescape(["html"]),
    keep_trailing_newline=True,
)

# Characters encodeURIComponent leaves alone, beyond what quote() already keeps.
_URI_COMPONENT_SAFE = "!~*'()"


class ListingError(Exception):
    """A fatal failure while listing a directory.

    ``stage`` is one of ``resolve``, ``stat``, ``readdir`` or ``parent``.
    """

    def __init__(self, stage: str, path: str, cause: Exception) -> None:
        super().__init__(f"{stage} failed for {path}: {cause}")
        self.stage = stage
        self.path = path
        self.cause = cause


def _is_within(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def _printable(name: str) -> str:
    # os.listdir hands back undecodable bytes as surrogates; they cannot be sent as UTF-8.
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


async def _stat(path: str) -> os.stat_result:
    return await asyncio.to_thread(os.stat, path)


class DirectoryListing:
    """Renders directory index pages under a fixed root."""

    def __init__(self, options: ListingOptions, styles: ListingStyles = DEFAULT_STYLES) -> None:
        self.options = options
        self.styles = styles
        self._root = os.path.normpath(options.root)

    def resolve_target(self, pathname: str) -> str:
        """Map a decoded URL path to an absolute filesystem path under the root.

        Raises:
            ListingError: When the normalized path escapes the root.
        """
        base = posixpath.join("/", self.options.base_dir)
        relative = posixpath.relpath(posixpath.join("/", pathname), base)
        target = os.path.normpath(os.path.join(self._root, relative))
        if not _is_within(target, self._root):
            raise ListingError("resolve", pathname, PermissionError(f"{target} is outside {self._root}"))
        return target

    async def render(self, raw_path: str, query: str = "", host: str = "") -> ListingPage:
        """Render the listing page for a request path.

        Args:
            raw_path: The URL path without the query string. Percent-escapes are
                decoded; hrefs are re-encoded from the decoded path.
            query: The raw query string without the leading ``?``.
            host: The request's ``Host`` header, only used for the footer.

        Returns:
            A ListingPage with the HTML body and the caching headers.

        Raises:
            ListingError: When the target cannot be resolved, stat'ed or read,
                or when the parent entry cannot be stat'ed.
        """
        pathname = unquote(raw_path, errors="surrogateescape")
        directory = self.resolve_target(pathname)

        try:
            dir_stat = FileMetadata.from_stat(await _stat(directory))
        except (OSError, ValueError) as exc:  # ValueError: embedded NUL byte
            raise ListingError("stat", directory, exc) from exc

        try:
            names = await asyncio.to_thread(os.listdir, directory)
        except OSError as exc:
            raise ListingError("readdir", directory, exc) from exc

        if not self.options.show_dotfiles:
            names = [name for name in names if not name.startswith(".")]

        buckets = await classify_entries(directory, names)

        parent = os.path.dirname(directory)
        if parent != directory and _is_within(parent, self._root):
            try:
                parent_stat = FileMetadata.from_stat(await _stat(parent))
            except OSError as exc:
                raise ListingError("parent", parent, exc) from exc
            buckets.dirs = sort_entries([Entry(name="..", stat=parent_stat), *buckets.dirs])

        base_href = quote(pathname.rstrip("/"), safe="/" + _URI_COMPONENT_SAFE, errors="surrogateescape")
        rows = [
            await self._build_row(entry, directory, base_href, query)
            for entry in (*buckets.dirs, *buckets.files, *buckets.unknowns)
        ]

        html = _TEMPLATES.get_template("listing.html").render(
            pathname=_printable(pathname),
            css=self.styles.css,
            rows=rows,
            time_placeholder=TIME_PLACEHOLDER,
            host=host,
            branded=bool(self.options.branding_host_suffix) and host.endswith(self.options.branding_host_suffix),
        )
        logger.info(
            "listing_rendered",
            path=directory,
            dirs=len(buckets.dirs),
            files=len(buckets.files),
            unknowns=len(buckets.unknowns),
        )
        return ListingPage(
            html=html,
            headers={
                "etag": etag(dir_stat, self.options.weak_etags),
                "last-modified": http_date(dir_stat.mtime),
                "cache-control": self.options.cache,
            },
        )

    async def _build_row(self, entry: Entry, directory: str, base_href: str, query: str) -> ListingRow:
        is_dir = entry.is_dir
        name = entry.name
        href = f"{base_href}/{quote(name, safe=_URI_COMPONENT_SAFE, errors='surrogateescape')}"
        if is_dir:
            href += f"/?{query}" if query else "/"

        external = False
        suffix = self.options.shortcut_suffix
        is_regular = entry.stat is not None and stat_module.S_ISREG(entry.stat.mode)
        if is_regular and suffix and name.endswith(suffix):
            target = await asyncio.to_thread(self._read_shortcut, os.path.join(directory, name))
            if target is not None:
                href = target
                name = name[: -len(suffix)]
                external = True

        return ListingRow(
            icon_class=self.styles.icon_class(name, is_dir),
            href=href,
            display_name=_printable(name) + ("/" if is_dir else ""),
            external=external,
            last_modified=format_mtime(entry.stat.mtime if entry.stat else None),
            size="-" if external else size_to_string(entry.stat, self.options.human_readable, self.options.si),
        )

    def _read_shortcut(self, path: str) -> str | None:
        """Read a shortcut file's link target.

        Blocking; callers run it in a worker thread and only for regular files.
        The read is capped at ``shortcut_max_bytes``.
        """
        try:
            with open(path, "rb") as f:
                data = f.read(self.options.shortcut_max_bytes)
        except OSError:
            logger.warning("shortcut_read_failed", path=path, exc_info=True)
            return None
        return data.decode("utf-8", "replace").strip()
