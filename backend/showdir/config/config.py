from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from showdir.schemas.listing import ListingOptions


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_version: str = "0.1.0"
    root: str = "."
    base_dir: str = "/"
    cache: str = "max-age=3600"
    human_readable: bool = True
    hide_permissions: bool = False
    show_dotfiles: bool = True
    si: bool = False
    weak_etags: bool = True
    handle_error: bool = True
    branding_host_suffix: str = "you.rocks"
    shortcut_suffix: str = ".url"
    shortcut_max_bytes: int = 8192

    def listing_options(self) -> ListingOptions:
        """Freeze the listing-relevant settings, with ``root`` resolved to an absolute path."""
        return ListingOptions(
            cache=self.cache,
            root=str(Path(self.root).resolve()),
            base_dir=self.base_dir,
            human_readable=self.human_readable,
            hide_permissions=self.hide_permissions,
            show_dotfiles=self.show_dotfiles,
            si=self.si,
            weak_etags=self.weak_etags,
            handle_error=self.handle_error,
            branding_host_suffix=self.branding_host_suffix,
            shortcut_suffix=self.shortcut_suffix,
            shortcut_max_bytes=self.shortcut_max_bytes,
        )


settings = Settings()
