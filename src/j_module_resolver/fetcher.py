"""Download artifacts from remote Maven repositories into the local cache."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol

import httpx

from j_module_resolver.exceptions import FetchError
from j_module_resolver.layout import LocalRepository, relative_path
from j_module_resolver.models import Coordinate

logger = logging.getLogger(__name__)

MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2"


class ArtifactFetcher(Protocol):
    """Ensures an artifact's bytes exist in the local cache."""

    def fetch(self, coordinate: Coordinate) -> None:
        """Place `coordinate` into the local cache or raise `FetchError`."""
        ...


class HttpArtifactFetcher:
    """Fetch artifacts over HTTP(S) from a list of remote repositories.

    Remotes are tried once each, in order; there is no retry. Files are
    streamed to a `.part` sibling and renamed into place so the cache never
    holds a partially written artifact. Existing cache files are never touched.
    """

    def __init__(
        self,
        repository: LocalRepository,
        remote_urls: Iterable[str] = (MAVEN_CENTRAL,),
        *,
        timeout: float = 30.0,
        offline: bool = False,
        client: httpx.Client | None = None,
    ):
        self.repository = repository
        self.remote_urls = [u.rstrip("/") for u in remote_urls]
        self.offline = offline
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def __enter__(self) -> "HttpArtifactFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, coordinate: Coordinate) -> None:
        target = self.repository.path_for(coordinate)
        if target.exists():
            logger.debug(f"Artifact {coordinate} already cached at {target}")
            return

        if not coordinate.version:
            raise FetchError(coordinate, f"Cannot fetch {coordinate}: no version given")
        if self.offline:
            raise FetchError(coordinate, f"Cannot fetch {coordinate}: remote access is disabled (offline)")
        if not self.remote_urls:
            raise FetchError(coordinate, f"Cannot fetch {coordinate}: no remote repositories configured")

        rel = relative_path(coordinate).as_posix()
        for base_url in self.remote_urls:
            url = f"{base_url}/{rel}"
            logger.debug(f"Downloading {url}")
            try:
                with self._client.stream("GET", url) as response:
                    if response.status_code == httpx.codes.NOT_FOUND:
                        logger.debug(f"{coordinate} not present in {base_url}")
                        continue
                    response.raise_for_status()
                    self._store(response, target)
            except httpx.HTTPError as exc:
                logger.warning(f"Failed to download {url}: {exc}")
                continue
            except OSError as exc:
                raise FetchError(coordinate, f"Cannot write {target}: {exc}") from exc

            logger.info(f"Downloaded {coordinate} from {base_url}")
            return

        raise FetchError(
            coordinate,
            f"Could not find artifact {coordinate} in {', '.join(self.remote_urls)}",
        )

    @staticmethod
    def _store(response: httpx.Response, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        part = target.with_name(target.name + ".part")
        try:
            with part.open("wb") as fh:
                for chunk in response.iter_bytes():
                    fh.write(chunk)
            part.replace(target)
        finally:
            part.unlink(missing_ok=True)
