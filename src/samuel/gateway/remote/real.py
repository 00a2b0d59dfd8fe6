"""GitHub-backed RemoteSource using the public REST API and archive endpoints."""

import io
import json
import logging
import time
import urllib.error
import urllib.request
from typing import BinaryIO

from samuel.core.errors import NetworkError, VersionNotFoundError
from samuel.gateway.remote.abc import RefKind, Release, RemoteSource

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
GITHUB_WEB = "https://github.com"
USER_AGENT = "samuel-cli"
CHUNK_SIZE = 64 * 1024


class GitHubRemoteSource(RemoteSource):
    """Fetches releases and archives for a GitHub repository."""

    def __init__(
        self,
        *,
        owner: str,
        repo: str,
        default_branch: str = "main",
        api_base: str = GITHUB_API,
        web_base: str = GITHUB_WEB,
    ) -> None:
        self._owner = owner
        self._repo = repo
        self._default_branch = default_branch
        self._api_base = api_base.rstrip("/")
        self._web_base = web_base.rstrip("/")

    @property
    def description(self) -> str:
        return f"github.com/{self._owner}/{self._repo}"

    @property
    def default_branch(self) -> str:
        return self._default_branch

    def latest_release_url(self) -> str:
        return f"{self._api_base}/repos/{self._owner}/{self._repo}/releases/latest"

    def archive_url(self, ref: str, kind: RefKind) -> str:
        ref_type = "tags" if kind == "tag" else "heads"
        return f"{self._web_base}/{self._owner}/{self._repo}/archive/refs/{ref_type}/{ref}.tar.gz"

    def get_latest_release(self, *, timeout: float) -> Release | None:
        request = urllib.request.Request(
            self.latest_release_url(),
            headers={"Accept": "application/vnd.github.v3+json", "User-Agent": USER_AGENT},
        )
        deadline = time.monotonic() + timeout
        buffer = io.BytesIO()
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                _copy_before_deadline(response, buffer, deadline=deadline, timeout=timeout)
            data = json.loads(buffer.getvalue().decode("utf-8"))
        except urllib.error.HTTPError as e:
            # 404 means the repository has no releases yet
            if e.code == 404:
                logger.debug("No releases published for %s", self.description)
                return None
            raise NetworkError(
                version="latest", source=self.description, cause=f"HTTP {e.code} {e.reason}"
            ) from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise NetworkError(version="latest", source=self.description, cause=str(e)) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise NetworkError(
                version="latest", source=self.description, cause=f"invalid release data: {e}"
            ) from e

        tag_name = data.get("tag_name")
        if not isinstance(tag_name, str) or not tag_name:
            raise NetworkError(
                version="latest", source=self.description, cause="release has no tag_name"
            )
        return Release(tag_name=tag_name, name=data.get("name") or "", body=data.get("body") or "")

    def fetch_archive(
        self,
        *,
        ref: str,
        kind: RefKind,
        destination: BinaryIO,
        timeout: float,
    ) -> int:
        url = self.archive_url(ref, kind)
        logger.debug("Fetching %s", url)
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        deadline = time.monotonic() + timeout
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                return _copy_before_deadline(
                    response, destination, deadline=deadline, timeout=timeout
                )
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise VersionNotFoundError(
                    version=ref, source=self.description, cause=f"{kind} {ref} not found"
                ) from e
            raise NetworkError(
                version=ref, source=self.description, cause=f"HTTP {e.code} {e.reason}"
            ) from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise NetworkError(version=ref, source=self.description, cause=str(e)) from e


def _copy_before_deadline(
    response: io.BufferedIOBase, destination: BinaryIO, *, deadline: float, timeout: float
) -> int:
    """Copy a response body, failing once the whole transfer outlives the deadline.

    The urlopen timeout only bounds each socket operation, so a server that
    trickles bytes would otherwise never time out.

    Raises:
        TimeoutError: If the deadline passes before the body is complete
    """
    written = 0
    while True:
        if time.monotonic() > deadline:
            raise TimeoutError(f"timed out after {timeout:g}s")
        chunk = response.read1(CHUNK_SIZE)
        if not chunk:
            return written
        destination.write(chunk)
        written += len(chunk)
