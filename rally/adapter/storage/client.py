"""Supabase storage client.

Talks to the storage REST API directly with the service key; there is one
avatar file per user and uploads overwrite it.
"""

from urllib.parse import quote

import httpx
import logfire

from rally.adapter.error import ProviderError
from rally.config import StorageSettings
from rally.domain.service.profile_service import AvatarStorage


class StorageError(ProviderError):
    """File storage provider error."""

    def __init__(self, message: str) -> None:
        super().__init__("storage", message)


class SupabaseStorageClient(AvatarStorage):
    """Base class for storage clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealSupabaseStorageClient(SupabaseStorageClient):
    """Supabase storage REST client."""

    def __init__(
        self,
        settings: StorageSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize storage client.

        Args:
            settings: Storage settings with endpoint, key and bucket
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings
        self._transport = transport
        self.base_url = settings.base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.service_key}",
            "apikey": self.settings.service_key,
        }

    def _object_path(self, path: str) -> str:
        return f"{quote(self.settings.bucket)}/{quote(path)}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload a file, replacing any file at the same path.

        Raises:
            StorageError: If the upload fails
        """
        url = f"{self.base_url}/object/{self._object_path(path)}"
        headers = {**self._headers(), "Content-Type": content_type, "x-upsert": "true"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    url,
                    content=content,
                    headers=headers,
                    timeout=self.settings.timeout_seconds,
                )
        except httpx.HTTPError as e:
            logfire.error("Storage upload HTTP error", path=path, error=str(e))
            raise StorageError(f"HTTP error during upload: {e}") from e

        if response.status_code not in (200, 201):
            logfire.error(
                "Storage upload failed",
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise StorageError(f"Upload failed: {response.status_code}")

        logfire.info("Avatar uploaded", path=path, size=len(content))
        return path

    async def create_signed_url(self, path: str, expires_in: int) -> str:
        """Issue a time-limited URL for a stored file.

        Raises:
            StorageError: If signing fails
        """
        url = f"{self.base_url}/object/sign/{self._object_path(path)}"

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    url,
                    json={"expiresIn": expires_in},
                    headers=self._headers(),
                    timeout=self.settings.timeout_seconds,
                )
        except httpx.HTTPError as e:
            logfire.error("Storage sign HTTP error", path=path, error=str(e))
            raise StorageError(f"HTTP error while signing URL: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Storage sign request failed",
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise StorageError(f"Signing failed: {response.status_code}")

        body = response.json()
        signed = body.get("signedURL") or body.get("signedUrl")
        if not signed:
            raise StorageError("Signing response did not contain a URL")

        # The API returns a path relative to the storage root
        if signed.startswith(("http://", "https://")):
            return signed
        return f"{self.base_url}/{signed.lstrip('/')}"


class MockSupabaseStorageClient(SupabaseStorageClient):
    """Mock storage client for testing.

    Keeps uploaded files in memory and signs URLs deterministically.
    """

    def __init__(self) -> None:
        self.files: dict[str, tuple[bytes, str]] = {}
        self.sign_calls: list[str] = []

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store the file in memory."""
        self.files[path] = (content, content_type)
        return path

    async def create_signed_url(self, path: str, expires_in: int) -> str:
        """Return a fake signed URL."""
        self.sign_calls.append(path)
        return f"https://storage.example.com/signed/{path}?expires_in={expires_in}"
