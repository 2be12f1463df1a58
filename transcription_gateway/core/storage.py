"""Object stores holding pre-uploaded audio, addressed by key."""

import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

import httpx

from transcription_gateway.core.config import GatewayConfig
from transcription_gateway.core.exceptions import (
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)

logger = logging.getLogger(__name__)


class AudioStore(Protocol):
    """Fetch audio bytes by key; ``None`` means the key does not exist."""

    async def fetch(self, key: str) -> bytes | None: ...


class HTTPObjectStore:
    """Object store reachable over plain HTTP GET.

    Works with an R2 bucket exposed through a public or custom domain, or
    any service that serves ``{base_url}/{key}``.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout_s: float = 300.0,
        connect_timeout_s: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = httpx.Timeout(timeout_s, connect=connect_timeout_s)

    def object_url(self, key: str) -> str:
        return f"{self.base_url}/{quote(key.lstrip('/'))}"

    async def fetch(self, key: str) -> bytes | None:
        url = self.object_url(key)
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                logger.debug(f"Fetching object {key!r} from {url}")
                response = await client.get(url, headers=headers)

        except httpx.TimeoutException as e:
            logger.error(f"Timeout fetching {url}: {e}")
            raise UpstreamTimeoutError("Object store did not respond in time", upstream=self.base_url) from e

        except (httpx.ConnectError, httpx.NetworkError) as e:
            logger.error(f"Connection error fetching {url}: {e}")
            raise UpstreamUnreachableError(
                f"Connection to object store failed: {str(e)}",
                upstream=self.base_url,
            ) from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.error("Object store returned HTTP %s for %s", response.status_code, url)
            raise UpstreamResponseError(
                f"Object store returned HTTP {response.status_code}",
                upstream=self.base_url,
            )
        return response.content


class LocalObjectStore:
    """Object store backed by a local directory, one file per key."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    async def fetch(self, key: str) -> bytes | None:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root) or not path.is_file():
            return None
        return path.read_bytes()


class NullObjectStore:
    """Store used when none is configured: every key is missing."""

    async def fetch(self, key: str) -> bytes | None:
        logger.warning("Object key %r requested but no object store is configured", key)
        return None


def build_audio_store(config: GatewayConfig) -> AudioStore:
    """Pick the object store described by the configuration."""
    if config.object_store_base_url:
        return HTTPObjectStore(
            config.object_store_base_url,
            token=config.object_store_token,
            timeout_s=config.timeout_s,
            connect_timeout_s=config.connect_timeout_s,
        )
    if config.object_store_dir:
        return LocalObjectStore(config.object_store_dir)
    return NullObjectStore()
