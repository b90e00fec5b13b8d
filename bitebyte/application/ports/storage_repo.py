from typing import Optional, Protocol


class ObjectStorage(Protocol):
    @property
    def configured(self) -> bool:
        ...

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under key and return the public URL."""
        ...

    def key_for(self, url: str) -> Optional[str]:
        """Object key for a URL this store served, None for foreign URLs."""
        ...

    async def delete(self, key: str) -> None:
        ...
