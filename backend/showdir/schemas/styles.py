"""Icon and stylesheet table for directory listings."""

from pydantic import BaseModel, ConfigDict

_ICON_EXTENSIONS = frozenset(
    {
        "aac", "ai", "aiff", "avi", "bmp", "c", "cpp", "css", "csv", "dat", "dmg", "doc", "dotx",
        "dwg", "dxf", "eps", "exe", "flv", "gif", "h", "hpp", "html", "ics", "iso", "java", "jpg",
        "js", "json", "key", "less", "md", "mid", "mp3", "mp4", "mpg", "odf", "ods", "odt", "otp",
        "ots", "ott", "pdf", "php", "png", "ppt", "psd", "py", "qt", "rar", "rb", "rtf", "sass",
        "scss", "sql", "tga", "tgz", "tiff", "txt", "wav", "xls", "xlsx", "xml", "yml", "zip",
    }
)

_CSS = """
i.icon { display: block; height: 16px; width: 16px; }
table tr { white-space: nowrap; }
td.perms {}
td.file-size { text-align: right; padding-left: 1em; }
td.display-name { padding-left: 1em; }
td.display-name.external a::after { content: " \\2197"; }
i.icon-folder { background-position: -32px 0; }
i.icon-_page { background-position: 0 0; }
address { font-size: 0.85em; color: #777; }
.eceheart { color: #c0392b; }
"""


class ListingStyles(BaseModel):
    """Immutable style table injected into ``DirectoryListing`` at construction."""

    model_config = ConfigDict(frozen=True)

    icons: frozenset[str] = _ICON_EXTENSIONS
    css: str = _CSS

    def icon_class(self, name: str, is_dir: bool) -> str:
        if is_dir:
            return "icon-folder"
        ext = name.rsplit(".", 1)[-1]
        return f"icon-{ext}" if ext in self.icons else "icon-_page"


DEFAULT_STYLES = ListingStyles()
