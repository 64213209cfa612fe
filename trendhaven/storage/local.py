from pathlib import Path

from trendhaven.storage.base import ImageStore


class LocalImageStore(ImageStore):
    """Photos on local disk, served by the app under ``url_prefix``."""

    def __init__(self, base_dir: str | Path, url_prefix: str = "/uploads"):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def _path(self, key: str) -> Path:
        base = self.base_dir.resolve()
        path = (base / key).resolve()
        if not path.is_relative_to(base):
            raise ValueError(f"key escapes storage root: {key}")
        return path

    def save(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def url(self, key: str) -> str:
        return f"{self.url_prefix}/{key}"
