from typing import Protocol


class ImageStore(Protocol):
    def save(self, key: str, data: bytes, content_type: str) -> None:
        ...

    def delete(self, key: str) -> None:
        """Remove the object; a missing object is not an error."""
        ...

    def url(self, key: str) -> str:
        ...
