import stat

from showdir.schemas.listing import FileMetadata
from showdir.services.formatting import (
    TIME_PLACEHOLDER,
    etag,
    format_mtime,
    http_date,
    perms_to_string,
    size_to_string,
)


def _file(size: int | None, is_dir: bool = False) -> FileMetadata:
    return FileMetadata(is_dir=is_dir, size=size, mtime=0.0, mode=0o100644, ino=42)


class TestSizeToString:
    def test_zero_bytes_not_human_readable(self) -> None:
        assert size_to_string(_file(0), human_readable=False, si=False) == "0"

    def test_exact_byte_count_not_human_readable(self) -> None:
        assert size_to_string(_file(123456789), human_readable=False, si=False) == "123456789"

    def test_small_size_human_readable_uses_bytes(self) -> None:
        assert size_to_string(_file(512), human_readable=True, si=False) == "512B"

    def test_binary_kilobytes(self) -> None:
        assert size_to_string(_file(2048), human_readable=True, si=False) == "2.0K"

    def test_binary_megabytes_one_decimal(self) -> None:
        assert size_to_string(_file(int(1.5 * 1024 * 1024)), human_readable=True, si=False) == "1.5M"

    def test_si_uses_base_1000(self) -> None:
        assert size_to_string(_file(2000), human_readable=True, si=True) == "2.0k"
        assert size_to_string(_file(2048), human_readable=True, si=True) == "2.0k"
        assert size_to_string(_file(3_000_000), human_readable=True, si=True) == "3.0M"

    def test_si_threshold_differs_from_binary(self) -> None:
        assert size_to_string(_file(1000), human_readable=True, si=False) == "1000B"
        assert size_to_string(_file(1000), human_readable=True, si=True) == "1.0k"

    def test_huge_size_stays_on_largest_unit(self) -> None:
        assert size_to_string(_file(1024**9), human_readable=True, si=False) == "1024.0Y"

    def test_broken_symlink_human_readable(self) -> None:
        assert size_to_string(None, human_readable=True, si=False) == "0B"

    def test_broken_symlink_bytes_mode(self) -> None:
        assert size_to_string(None, human_readable=False, si=False) == "0"

    def test_missing_size_uses_broken_symlink_path(self) -> None:
        assert size_to_string(_file(None), human_readable=True, si=True) == "0B"

    def test_directory_has_no_size(self) -> None:
        assert size_to_string(_file(4096, is_dir=True), human_readable=True, si=False) == ""


class TestPermsToString:
    def test_regular_file(self) -> None:
        assert perms_to_string(stat.S_IFREG | 0o644) == "-rw-r--r--"

    def test_directory(self) -> None:
        assert perms_to_string(stat.S_IFDIR | 0o755) == "drwxr-xr-x"

    def test_setuid_setgid_sticky(self) -> None:
        assert perms_to_string(stat.S_IFREG | 0o4755) == "-rwsr-xr-x"
        assert perms_to_string(stat.S_IFREG | 0o2745) == "-rwxr-Sr-x"
        assert perms_to_string(stat.S_IFDIR | 0o1777) == "drwxrwxrwt"

    def test_unknown_bits_never_fail(self) -> None:
        result = perms_to_string(0xFFFFFFFF)
        assert len(result) == 10


class TestFormatMtime:
    def test_epoch(self) -> None:
        assert format_mtime(0.0) == "1970-01-01 00:00:00"

    def test_drops_fraction(self) -> None:
        assert format_mtime(1700000000.987) == "2023-11-14 22:13:20"

    def test_missing_time(self) -> None:
        assert format_mtime(None) is None

    def test_unrepresentable_time(self) -> None:
        assert format_mtime(1e20) is None

    def test_placeholder_is_nbsp_flanked_dash(self) -> None:
        assert str(TIME_PLACEHOLDER) == "&nbsp;" * 9 + "-" + "&nbsp;" * 9


class TestHeaders:
    def test_strong_etag(self) -> None:
        assert etag(_file(10), weak=False) == '"42-10-1970-01-01T00:00:00.000Z"'

    def test_weak_etag(self) -> None:
        assert etag(_file(10), weak=True) == 'W/"42-10-1970-01-01T00:00:00.000Z"'

    def test_http_date(self) -> None:
        assert http_date(0.0) == "Thu, 01 Jan 1970 00:00:00 GMT"
