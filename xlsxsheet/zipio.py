"""Reading and writing the zip container of a workbook package."""

from __future__ import annotations

import zipfile
from typing import BinaryIO

Source = "str | os.PathLike[str] | BinaryIO"


class ZipReader:
    """Read-only view of a zip archive.

    An archive that cannot be opened reports ``exists() == False`` and has no files.
    """

    def __init__(self, source) -> None:
        self._zip: zipfile.ZipFile | None = None
        self._paths: list[str] = []
        try:
            self._zip = zipfile.ZipFile(source)
        except (OSError, zipfile.BadZipFile):
            return
        self._paths = [info.filename for info in self._zip.infolist() if not info.is_dir()]

    def exists(self) -> bool:
        return self._zip is not None

    def file_paths(self) -> list[str]:
        return list(self._paths)

    def file_data(self, name: str) -> bytes:
        """Return the bytes of ``name``, or empty bytes when it is not present."""
        if self._zip is None:
            return b""
        try:
            return self._zip.read(name)
        except KeyError:
            return b""

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()

    def __enter__(self) -> ZipReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ZipWriter:
    """Write files into a new deflate-compressed zip archive."""

    def __init__(self, target) -> None:
        self._zip = zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED)

    def add_file(self, path: str, data: bytes | BinaryIO) -> None:
        """Add ``data`` (bytes or a readable binary file) under ``path``."""
        if hasattr(data, "read"):
            data = data.read()
        self._zip.writestr(path, data)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> ZipWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()