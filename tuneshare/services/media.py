"""Upload remote audio/image assets to Cloudinary and return their hosted secure URLs."""

from __future__ import annotations

import hashlib
import time
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from tuneshare.core.errors import DependencyError

if TYPE_CHECKING:
    from tuneshare.core.config import Settings


class MediaUploader(Protocol):
    async def upload(self, source_url: str) -> str: ...


def _is_cloudinary_configured(settings: Settings) -> bool:
    if not settings.CLOUDINARY_CLOUD_NAME or not settings.CLOUDINARY_CLOUD_NAME.strip():
        return False
    if not settings.CLOUDINARY_API_KEY or not settings.CLOUDINARY_API_KEY.strip():
        return False
    if settings.CLOUDINARY_API_SECRET is None:
        return False
    return bool(settings.CLOUDINARY_API_SECRET.get_secret_value().strip())


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Cloudinary signature: SHA-1 over sorted 'k=v' pairs joined by '&', followed by the secret."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    """Signed uploads with resource_type 'auto' so audio and images share one path."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = client

    def _upload_url(self) -> str:
        base = self._settings.CLOUDINARY_API_BASE_URL.rstrip("/")
        return f"{base}/{self._settings.CLOUDINARY_CLOUD_NAME}/auto/upload"

    async def _post(self, client: httpx.AsyncClient, data: dict[str, Any]) -> httpx.Response:
        return await client.post(
            self._upload_url(),
            data=data,
            timeout=self._settings.MEDIA_UPLOAD_TIMEOUT_SEC,
        )

    async def upload(self, source_url: str) -> str:
        """Upload the asset at source_url. Raises DependencyError on any failure."""
        if not _is_cloudinary_configured(self._settings):
            raise DependencyError("Media upload is not configured.")
        secret = self._settings.CLOUDINARY_API_SECRET.get_secret_value()
        signed = {"timestamp": int(time.time())}
        data: dict[str, Any] = {
            "file": source_url,
            "api_key": self._settings.CLOUDINARY_API_KEY,
            "signature": sign_params(signed, secret),
            **signed,
        }
        try:
            if self._client is not None:
                resp = await self._post(self._client, data)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._post(client, data)
        except httpx.TimeoutException as e:
            raise DependencyError("Media upload timed out.") from e
        except httpx.HTTPError as e:
            raise DependencyError(f"Media host unreachable: {e}") from e

        if resp.status_code >= 400:
            try:
                detail = resp.json().get("error", {}).get("message") or resp.text[:300]
            except ValueError:
                detail = resp.text[:300] if resp.text else "Unknown error"
            raise DependencyError(f"Media upload failed ({resp.status_code}): {detail}")
        try:
            secure_url = resp.json().get("secure_url")
        except ValueError as e:
            raise DependencyError("Media host returned invalid JSON.") from e
        if not secure_url:
            raise DependencyError("Media host response missing secure_url.")
        return secure_url
