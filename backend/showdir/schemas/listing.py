"""Pydantic schemas for directory listings."""

import os
import stat as stat_module

from pydantic import BaseModel, ConfigDict, Field


class ListingOptions(BaseModel):
    """Process-wide rendering options, read-only once the app is running."""

    model_config = ConfigDict(frozen=True)

    cache: str = "max-age=3600"
    root: str
    base_dir: str = "/"
    human_readable: bool = True
    hide_permissions: bool = False
    show_dotfiles: bool = True
    si: bool = False
    weak_etags: bool = True
    handle_error: bool = True
    branding_host_suffix: str = "you.rocks"
    shortcut_suffix: str = ".url"
    shortcut_max_bytes: int = Field(default=8192, ge=1)


class FileMetadata(BaseModel):
    """The subset of ``os.stat_result`` a listing needs."""

    model_config = ConfigDict(frozen=True)

    is_dir: bool = False
    size: int | None = None
    mtime: float | None = None
    mode: int = 0
    ino: int = 0

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "FileMetadata":
        return cls(
            is_dir=stat_module.S_ISDIR(st.st_mode),
            size=st.st_size,
            mtime=st.st_mtime,
            mode=st.st_mode,
            ino=st.st_ino,
        )


class Entry(BaseModel):
    """A directory entry: its raw name plus the stat result, or why the stat failed."""

    name: str
    stat: FileMetadata | None = None
    stat_error: str | None = None

    @property
    def is_dir(self) -> bool:
        return self.stat is not None and self.stat.is_dir


class ListingBuckets(BaseModel):
    unknowns: list[Entry] = Field(default_factory=list)
    dirs: list[Entry] = Field(default_factory=list)
    files: list[Entry] = Field(default_factory=list)


class ListingRow(BaseModel):
    """One rendered table row. Values are unescaped; the template escapes them."""

    icon_class: str
    href: str
    display_name: str
    external: bool = False
    last_modified: str | None
    size: str


class ListingPage(BaseModel):
    """A fully rendered listing, ready to be written as a 200 response."""

    html: str
    headers: dict[str, str]
