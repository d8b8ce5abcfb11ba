"""Downloads previously published artifacts."""

from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

import requests
import structlog

from release_ops_manager.comparison.exceptions import ArtifactFetchError
from release_ops_manager.utils.masking import mask_url_credentials

logger = structlog.get_logger(__name__)


class ArtifactFetcher(Protocol):
    """Fetches a remote artifact into a local directory."""

    def fetch(self, remote_url: str, target_dir: Path) -> Path:
        """Download the artifact and return the path of the local copy."""
        ...


class HttpArtifactFetcher:
    """Downloads artifacts over HTTP(S)."""

    def __init__(self, timeout: float = 60.0, chunk_size: int = 64 * 1024, session: requests.Session | None = None) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Connect and read timeout of the download, in seconds.
            chunk_size: Size of the chunks the response body is streamed in.
            session: Session to download with, e.g. one carrying repository credentials.
        """
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.session = session or requests.Session()

    def fetch(self, remote_url: str, target_dir: Path) -> Path:
        """Stream the artifact at the URL into the target directory.

        Raises:
            ArtifactFetchError: If the download fails. The URL in the message is masked.
        """
        masked_url = mask_url_credentials(remote_url)
        file_name = Path(urlparse(remote_url).path).name or "artifact"
        target = target_dir / file_name
        logger.info("Downloading artifact", url=masked_url, target=str(target))
        try:
            with self.session.get(remote_url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with target.open("wb") as output:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        output.write(chunk)
        except requests.RequestException as exc:
            raise ArtifactFetchError(f"Failed to download {masked_url}: {mask_url_credentials(str(exc))}") from exc
        return target
