"""Pure formatters for listing cells and response headers."""

import stat as stat_module
from datetime import UTC, datetime

from markupsafe import Markup

from showdir.schemas.listing import FileMetadata

_BINARY_UNITS = ("K", "M", "G", "T", "P", "E", "Z", "Y")
_SI_UNITS = ("k", "M", "G", "T", "P", "E", "Z", "Y")

_NBSPS = "&nbsp;" * 9
TIME_PLACEHOLDER = Markup(f"{_NBSPS}-{_NBSPS}")


def size_to_string(metadata: FileMetadata | None, human_readable: bool, si: bool) -> str:
    """Format an entry's size for the size column.

    Entries without a usable size (broken symlinks, failed stats) render as
    ``"0B"`` in human-readable mode and ``"0"`` otherwise. Directories have no
    size and render as an empty string.
    """
    if metadata is None or metadata.size is None:
        return "0B" if human_readable else "0"
    if metadata.is_dir:
        return ""

    size = metadata.size
    if not human_readable:
        return str(size)

    threshold = 1000 if si else 1024
    if size < threshold:
        return f"{size}B"

    units = _SI_UNITS if si else _BINARY_UNITS
    value = size / threshold
    index = 0
    while value >= threshold and index < len(units) - 1:
        value /= threshold
        index += 1
    return f"{value:.1f}{units[index]}"


def perms_to_string(mode: int) -> str:
    """Render mode bits the way ``ls -l`` does, e.g. ``drwxr-xr-x``."""
    return stat_module.filemode(mode & 0o177777)


def format_mtime(mtime: float | None) -> str | None:
    """UTC ``YYYY-MM-DD HH:MM:SS``, or None when the time is unusable.

    Templates render None as ``TIME_PLACEHOLDER``.
    """
    if mtime is None:
        return None
    try:
        return datetime.fromtimestamp(mtime, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return None


def etag(metadata: FileMetadata, weak: bool) -> str:
    mtime = datetime.fromtimestamp(metadata.mtime or 0, tz=UTC)
    stamp = mtime.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    tag = f'"{metadata.ino}-{metadata.size}-{stamp}"'
    return f"W/{tag}" if weak else tag


def http_date(mtime: float | None) -> str:
    """RFC 1123 date for ``last-modified``."""
    return datetime.fromtimestamp(mtime or 0, tz=UTC).strftime("%a, %d %b %Y %H:%M:%S GMT")
