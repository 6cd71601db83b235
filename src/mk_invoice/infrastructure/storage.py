"""Object storage URL resolution for invoice signature images.

Uploads and access control belong to the storage service; this core only
turns an opaque storage id into a URL. Unconfigured storage resolves to None.
"""
from urllib.parse import quote


class UrlPrefixObjectStorage:
    def __init__(self, base_url: str | None) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None

    def resolve_url(self, storage_id: str) -> str | None:
        if not self._base_url or not storage_id:
            return None
        return f"{self._base_url}/{quote(storage_id, safe='')}"
