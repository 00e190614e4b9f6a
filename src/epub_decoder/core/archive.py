"""In-memory view of the EPUB zip container."""

import hashlib
import io
import threading
import zipfile

from epub_decoder.errors import FormatError, ResourceNotFoundError


class Archive:
    """Named entries of a zip archive, read on demand."""

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as exc:
            raise FormatError(f"not a valid zip archive: {exc}") from exc
        self._names = {
            info.filename: info for info in self._zip.infolist() if not info.is_dir()
        }
        self._lock = threading.Lock()
        self.digest = hashlib.sha256(data).hexdigest()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Archive):
            return NotImplemented
        return self.digest == other.digest

    def __hash__(self) -> int:
        return hash(self.digest)

    @property
    def names(self) -> list[str]:
        """Entry names in archive order."""
        return list(self._names)

    def __contains__(self, path: str) -> bool:
        return path in self._names

    def find(self, path: str) -> bytes | None:
        """Return the entry's bytes, or None if the archive has no such entry."""
        info = self._names.get(path)
        if info is None:
            return None
        # ZipFile shares one file handle between readers
        with self._lock:
            return self._zip.read(info)

    def read(self, path: str) -> bytes:
        """Return the entry's bytes.

        Raises:
            ResourceNotFoundError: If no entry exists at path
        """
        content = self.find(path)
        if content is None:
            raise ResourceNotFoundError(path)
        return content
