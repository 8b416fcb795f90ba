"""Repository URL parsing and raw manifest URL construction."""

from urllib.parse import quote, urlparse

import httpx

from errors import ConfigurationError, InvalidURL, UnsupportedHost
from models import RepoSpecification

SUPPORTED_HOSTS = {"github.com"}


def parse_repository_url(url: str) -> tuple[str, str]:
    """Split a repository URL into (owner, repository name).

    "https://github.com/owner/repo.git" -> ("owner", "repo")
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if not host:
        raise InvalidURL(url)
    if host not in SUPPORTED_HOSTS:
        raise UnsupportedHost(host)

    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        raise InvalidURL(url)

    owner, repository_name = parts[-2], parts[-1]
    if repository_name.endswith(".git"):
        repository_name = repository_name[: -len(".git")]
    if not repository_name:
        raise InvalidURL(url)
    return owner, repository_name


class RawUrlBuilder:
    """Builds raw content URLs: <base>/<owner>/<repo>/<branch>/<file>."""

    def __init__(self, raw_host_base: str = "https://raw.githubusercontent.com"):
        self.raw_host_base = raw_host_base.rstrip("/")

    def url(self, spec: RepoSpecification, file_name: str) -> str:
        segments = [spec.user_name, spec.repository_name, spec.branch_name, file_name]
        url = "/".join([self.raw_host_base, *(quote(s) for s in segments)])
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid raw URL: {url}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConfigurationError(f"Invalid raw URL: {url}")
        return url
