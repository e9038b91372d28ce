"""Bounded snapshot extraction from GitHub repositories."""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Iterator
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from internship_evaluate.config import SourceConfig
from internship_evaluate.exceptions import InvalidRepositoryURL, RepositoryAccessError
from internship_evaluate.models import ImageFile, RepositorySnapshot, TextFile

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS: frozenset[str] = frozenset({"png", "jpg", "jpeg", "gif", "svg", "webp"})
TEXT_EXTENSIONS: frozenset[str] = frozenset(
    {"html", "css", "js", "jsx", "ts", "tsx", "py", "md", "txt", "json", "csv"}
)

_HOSTS = frozenset({"github.com", "www.github.com"})
_SEGMENT = re.compile(r"^[A-Za-z0-9_.-]+$")
_USER_AGENT = "internship-evaluate"


def parse_repository_url(url: str) -> tuple[str, str]:
    """Extract ``(owner, repo)`` from a GitHub repository URL.

    Accepts ``https://github.com/owner/repo``, the same without scheme, with
    a trailing ``.git`` or with extra path segments (``/tree/main/src``).

    Parameters
    ----------
    url : str
        Submitted repository link.

    Returns
    -------
    tuple[str, str]

    Raises
    ------
    InvalidRepositoryURL
        If the host is not GitHub or owner/repo segments are missing.
    """
    if not isinstance(url, str) or not url.strip():
        msg = "Repository URL is empty"
        raise InvalidRepositoryURL(msg)

    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"

    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"} or (parsed.hostname or "").lower() not in _HOSTS:
        msg = f"Not a GitHub repository URL: {url!r}"
        raise InvalidRepositoryURL(msg)

    segments = [s for s in parsed.path.split("/") if s]
    if len(segments) < 2:
        msg = f"GitHub URL is missing owner or repository: {url!r}"
        raise InvalidRepositoryURL(msg)

    owner, repo = segments[0], segments[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not (_SEGMENT.match(owner) and _SEGMENT.match(repo)):
        msg = f"GitHub URL has invalid owner or repository: {url!r}"
        raise InvalidRepositoryURL(msg)
    return owner, repo


def _extension(name: str) -> str:
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


class RepositoryExtractor:
    """Fetch a bounded snapshot of text files and images from a repository.

    Directories are walked breadth-first from an explicit work-queue and
    traversal stops as soon as ``max_entries`` files + images have been
    accepted.

    Parameters
    ----------
    config : SourceConfig | None
        Hosting API settings.  Defaults to :class:`SourceConfig` defaults.
    client : httpx.Client | None
        Pre-configured client (tests pass one with a mock transport).  When
        omitted a client is created per :meth:`extract` call.
    """

    def __init__(self, config: SourceConfig | None = None, *, client: httpx.Client | None = None) -> None:
        self._config = config or SourceConfig()
        self._client = client

    def extract(self, repository_url: str) -> RepositorySnapshot:
        """Build a snapshot of the repository at *repository_url*.

        Parameters
        ----------
        repository_url : str
            Submitted repository link.

        Returns
        -------
        RepositorySnapshot

        Raises
        ------
        InvalidRepositoryURL
            If the URL cannot be parsed.
        RepositoryAccessError
            If the top-level directory listing fails.
        """
        owner, repo = parse_repository_url(repository_url)
        logger.debug("Extracting repository owner=%s repo=%s", owner, repo)

        if self._client is not None:
            return self._collect(self._client, owner, repo)
        with httpx.Client(timeout=self._config.timeout, follow_redirects=True) as client:
            return self._collect(client, owner, repo)

    def _collect(self, client: httpx.Client, owner: str, repo: str) -> RepositorySnapshot:
        files: dict[str, TextFile] = {}
        images: dict[str, ImageFile] = {}
        cap = self._config.max_entries

        for entry in self._walk(client, owner, repo):
            path = entry.get("path", "")
            ext = _extension(entry.get("name", path))

            if ext in IMAGE_EXTENSIONS:
                if int(entry.get("size") or 0) > self._config.max_image_size:
                    logger.info("Skipping oversized image %s (%s bytes)", path, entry.get("size"))
                    continue
                image = self._fetch_image(client, owner, repo, entry, ext)
                if image is not None:
                    images[path] = image
            elif ext in TEXT_EXTENSIONS and int(entry.get("size") or 0) < self._config.max_file_size:
                text = self._fetch_text(client, owner, repo, entry, ext)
                if text is not None:
                    files[path] = text

            if len(files) + len(images) >= cap:
                logger.info("Entry cap of %d reached for %s/%s; stopping traversal", cap, owner, repo)
                break

        logger.info(
            "Extracted %s/%s: files=%d images=%d",
            owner,
            repo,
            len(files),
            len(images),
        )
        return RepositorySnapshot(owner=owner, repo=repo, files=files, images=images)

    def _walk(self, client: httpx.Client, owner: str, repo: str) -> Iterator[dict[str, Any]]:
        """Yield file entries breadth-first.

        The root listing propagates :class:`RepositoryAccessError`; failing
        subdirectories are logged and skipped.
        """
        queue: deque[str] = deque([""])
        while queue:
            path = queue.popleft()
            try:
                entries = self._list_directory(client, owner, repo, path)
            except RepositoryAccessError:
                if not path:
                    raise
                logger.warning("Could not access directory %s in %s/%s; skipping", path, owner, repo)
                continue

            for entry in entries:
                kind = entry.get("type")
                if kind == "file":
                    yield entry
                elif kind == "dir":
                    queue.append(entry.get("path", ""))

    def _list_directory(self, client: httpx.Client, owner: str, repo: str, path: str) -> list[dict[str, Any]]:
        """Return every entry of a directory, following ``Link: rel="next"`` pages."""
        url: str | None = f"{self._config.api_url}/repos/{owner}/{repo}/contents/{quote(path)}".rstrip("/")
        params: dict[str, Any] | None = {"per_page": 100}
        entries: list[dict[str, Any]] = []

        while url:
            try:
                response = client.get(url, params=params, headers=self._headers(url))
                response.raise_for_status()
                page = response.json()
            except httpx.HTTPStatusError as exc:
                msg = f"Listing {path or '/'} failed with HTTP {exc.response.status_code}"
                raise RepositoryAccessError(msg, status_code=exc.response.status_code) from exc
            except (httpx.HTTPError, ValueError) as exc:
                msg = f"Listing {path or '/'} failed: {exc.__class__.__name__}"
                raise RepositoryAccessError(msg) from exc

            if not isinstance(page, list):
                msg = f"Listing {path or '/'} did not return a directory"
                raise RepositoryAccessError(msg)
            entries.extend(page)

            url = response.links.get("next", {}).get("url")
            params = None

        return entries

    def _fetch_text(
        self, client: httpx.Client, owner: str, repo: str, entry: dict[str, Any], ext: str
    ) -> TextFile | None:
        url = entry.get("download_url") or self._raw_url(owner, repo, entry["path"])
        try:
            response = client.get(url, headers=self._headers(url))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Could not fetch file %s: %s", entry["path"], exc.__class__.__name__)
            return None
        return TextFile(
            path=entry["path"],
            content=response.text,
            extension=ext,
            size=int(entry.get("size") or len(response.content)),
        )

    def _fetch_image(
        self, client: httpx.Client, owner: str, repo: str, entry: dict[str, Any], ext: str
    ) -> ImageFile | None:
        url = entry.get("download_url") or self._raw_url(owner, repo, entry["path"])
        try:
            response = client.get(url, headers=self._headers(url))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Could not fetch image %s: %s", entry["path"], exc.__class__.__name__)
            return None
        return ImageFile(path=entry["path"], content=response.content, extension=ext, url=url)

    def _raw_url(self, owner: str, repo: str, path: str) -> str:
        return f"{self._config.raw_url}/{owner}/{repo}/HEAD/{quote(path)}"

    def _headers(self, url: str) -> dict[str, str]:
        """Request headers; the credential is only sent to the configured hosts."""
        headers = {"Accept": "application/vnd.github+json", "User-Agent": _USER_AGENT}
        if self._config.token and url.startswith((self._config.api_url, self._config.raw_url)):
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers
