"""Branch resolution strategies.

A resolver maps (repository name, owner) to the branch whose manifest should
be fetched. All resolvers share one contract: a coroutine that returns a
single branch name or raises NoResult.
"""

from typing import Protocol

import httpx

from config import Config
from errors import NoResult
from logging_setup import get_logger
from models import RepoSpecification
from urls import RawUrlBuilder

GITHUB_API_BASE = "https://api.github.com"


class BranchResolver(Protocol):
    async def resolve(self, repo_name: str, owner: str) -> str: ...


class FixedBranchResolver:
    """Always returns the configured branch name."""

    def __init__(self, branch_name: str):
        self.branch_name = branch_name

    async def resolve(self, repo_name: str, owner: str) -> str:
        return self.branch_name


class GitHubDefaultBranchResolver:
    """Asks the GitHub repository API for the default branch."""

    def __init__(self, client: httpx.AsyncClient, api_base: str = GITHUB_API_BASE):
        self.client = client
        self.api_base = api_base.rstrip("/")

    async def resolve(self, repo_name: str, owner: str) -> str:
        url = f"{self.api_base}/repos/{owner}/{repo_name}"
        try:
            response = await self.client.get(url, headers={"Accept": "application/vnd.github+json"})
            response.raise_for_status()
            branch = response.json().get("default_branch")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            raise NoResult(f"Unable to query default branch for {owner}/{repo_name}: {e}") from e
        if not isinstance(branch, str) or not branch:
            raise NoResult(f"No default branch reported for {owner}/{repo_name}")
        return branch


class FallbackBranchResolver:
    """Tries each resolver in order and keeps the first branch that verifies.

    A branch verifies when a HEAD request for its raw manifest URL succeeds.
    """

    def __init__(
        self,
        resolvers: list[BranchResolver],
        client: httpx.AsyncClient,
        url_builder: RawUrlBuilder,
        file_name: str,
    ):
        self.resolvers = resolvers
        self.client = client
        self.url_builder = url_builder
        self.file_name = file_name

    async def resolve(self, repo_name: str, owner: str) -> str:
        logger = get_logger()
        tried: list[str] = []

        for resolver in self.resolvers:
            try:
                branch = await resolver.resolve(repo_name, owner)
            except NoResult as e:
                logger.debug("%s: %s", type(resolver).__name__, e.reason)
                continue
            if branch in tried:
                continue
            tried.append(branch)

            if await self.verify(RepoSpecification(repo_name, owner, branch)):
                return branch
            logger.debug("Branch %s not found for %s/%s", branch, owner, repo_name)

        raise NoResult(f"No branch found for {owner}/{repo_name} (tried: {', '.join(tried) or 'none'})")

    async def verify(self, spec: RepoSpecification) -> bool:
        url = self.url_builder.url(spec, self.file_name)
        try:
            response = await self.client.head(url)
        except httpx.HTTPError:
            return False
        return response.is_success


def build_branch_resolver(
    config: Config,
    client: httpx.AsyncClient,
    url_builder: RawUrlBuilder,
) -> BranchResolver:
    """Select the branch resolver described by the configuration."""
    if not config.query_default_branch and not config.fallback_branches:
        return FixedBranchResolver(config.branch_name)

    resolvers: list[BranchResolver] = []
    if config.query_default_branch:
        resolvers.append(GitHubDefaultBranchResolver(client))
    resolvers.append(FixedBranchResolver(config.branch_name))
    resolvers.extend(FixedBranchResolver(b) for b in config.fallback_branches)

    return FallbackBranchResolver(resolvers, client, url_builder, config.manifest_file_name)
