"""Tests for branches.py."""

import httpx
import pytest

from branches import (
    FallbackBranchResolver,
    FixedBranchResolver,
    GitHubDefaultBranchResolver,
    build_branch_resolver,
)
from errors import NoResult
from urls import RawUrlBuilder

RAW = "https://raw.example.com"


class TestFixedBranchResolver:
    """Tests for FixedBranchResolver."""

    @pytest.mark.asyncio
    async def test_returns_configured_branch(self):
        resolver = FixedBranchResolver("master")

        assert await resolver.resolve("repo", "owner") == "master"
        assert await resolver.resolve("other", "someone") == "master"


class TestGitHubDefaultBranchResolver:
    """Tests for GitHubDefaultBranchResolver."""

    @pytest.mark.asyncio
    async def test_reads_default_branch(self, httpx_mock):
        httpx_mock.add_response(
            url="https://api.github.com/repos/owner/repo",
            json={"full_name": "owner/repo", "default_branch": "main"},
        )

        async with httpx.AsyncClient() as client:
            branch = await GitHubDefaultBranchResolver(client).resolve("repo", "owner")

        assert branch == "main"

    @pytest.mark.asyncio
    async def test_not_found_is_no_result(self, httpx_mock):
        httpx_mock.add_response(url="https://api.github.com/repos/owner/gone", status_code=404)

        async with httpx.AsyncClient() as client:
            with pytest.raises(NoResult):
                await GitHubDefaultBranchResolver(client).resolve("gone", "owner")


class TestFallbackBranchResolver:
    """Tests for FallbackBranchResolver."""

    @pytest.mark.asyncio
    async def test_first_verified_branch_wins(self, httpx_mock):
        """Branches whose manifest is missing are skipped."""
        httpx_mock.add_response(method="HEAD", url=f"{RAW}/owner/repo/master/Package.swift", status_code=404)
        httpx_mock.add_response(method="HEAD", url=f"{RAW}/owner/repo/main/Package.swift", status_code=200)

        async with httpx.AsyncClient() as client:
            resolver = FallbackBranchResolver(
                [FixedBranchResolver("master"), FixedBranchResolver("main")],
                client,
                RawUrlBuilder(RAW),
                "Package.swift",
            )
            branch = await resolver.resolve("repo", "owner")

        assert branch == "main"

    @pytest.mark.asyncio
    async def test_failing_strategy_is_skipped(self, httpx_mock):
        """A strategy that raises NoResult falls through to the next one."""
        httpx_mock.add_response(url="https://api.github.com/repos/owner/repo", status_code=403)
        httpx_mock.add_response(method="HEAD", url=f"{RAW}/owner/repo/master/Package.swift", status_code=200)

        async with httpx.AsyncClient() as client:
            resolver = FallbackBranchResolver(
                [GitHubDefaultBranchResolver(client), FixedBranchResolver("master")],
                client,
                RawUrlBuilder(RAW),
                "Package.swift",
            )
            branch = await resolver.resolve("repo", "owner")

        assert branch == "master"

    @pytest.mark.asyncio
    async def test_no_branch_verifies(self, httpx_mock):
        """Fails with NoResult only when every strategy fails."""
        httpx_mock.add_response(method="HEAD", url=f"{RAW}/owner/repo/master/Package.swift", status_code=404)

        async with httpx.AsyncClient() as client:
            resolver = FallbackBranchResolver(
                [FixedBranchResolver("master"), FixedBranchResolver("master")],
                client,
                RawUrlBuilder(RAW),
                "Package.swift",
            )
            with pytest.raises(NoResult) as exc_info:
                await resolver.resolve("repo", "owner")

        assert "master" in exc_info.value.reason


class TestBuildBranchResolver:
    """Tests for build_branch_resolver()."""

    @pytest.mark.asyncio
    async def test_fixed_by_default(self, sample_config):
        async with httpx.AsyncClient() as client:
            resolver = build_branch_resolver(sample_config, client, RawUrlBuilder(RAW))

        assert isinstance(resolver, FixedBranchResolver)
        assert resolver.branch_name == "master"

    @pytest.mark.asyncio
    async def test_fallback_when_configured(self, sample_config):
        sample_config.fallback_branches = ["main"]
        sample_config.query_default_branch = True

        async with httpx.AsyncClient() as client:
            resolver = build_branch_resolver(sample_config, client, RawUrlBuilder(RAW))

        assert isinstance(resolver, FallbackBranchResolver)
        assert isinstance(resolver.resolvers[0], GitHubDefaultBranchResolver)
        assert [r.branch_name for r in resolver.resolvers[1:]] == ["master", "main"]
