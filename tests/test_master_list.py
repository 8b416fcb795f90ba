"""Tests for master_list.py."""

import httpx
import pytest

from master_list import fetch_master_list, filter_new

MASTER_URL = "https://raw.example.com/master/packages.json"


class TestFetchMasterList:
    """Tests for fetch_master_list()."""

    @pytest.mark.asyncio
    async def test_fetch_success(self, httpx_mock):
        expected = ["https://github.com/a/x.git", "https://github.com/b/y.git"]
        httpx_mock.add_response(url=MASTER_URL, json=expected)

        async with httpx.AsyncClient() as client:
            result = await fetch_master_list(client, MASTER_URL)

        assert result == expected

    @pytest.mark.asyncio
    async def test_http_error_propagates(self, httpx_mock):
        httpx_mock.add_response(url=MASTER_URL, status_code=500)

        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await fetch_master_list(client, MASTER_URL)

    @pytest.mark.asyncio
    async def test_wrong_shape_rejected(self, httpx_mock):
        httpx_mock.add_response(url=MASTER_URL, json={"packages": []})

        async with httpx.AsyncClient() as client:
            with pytest.raises(ValueError):
                await fetch_master_list(client, MASTER_URL)


class TestFilterNew:
    """Tests for filter_new()."""

    def test_removes_known_urls_keeping_order(self):
        urls = ["https://github.com/c/z.git", "https://github.com/a/x.git", "https://github.com/b/y.git"]
        master = ["https://github.com/a/x.git"]

        assert filter_new(urls, master) == ["https://github.com/c/z.git", "https://github.com/b/y.git"]

    def test_comparison_ignores_case_and_git_suffix(self):
        urls = ["https://github.com/Owner/Repo.git", "https://github.com/new/one.git"]
        master = ["https://github.com/owner/repo"]

        assert filter_new(urls, master) == ["https://github.com/new/one.git"]

    def test_empty_master_keeps_everything(self):
        urls = ["https://github.com/a/x.git"]

        assert filter_new(urls, []) == urls
