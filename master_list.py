"""Master package list fetching and filtering."""

import httpx


async def fetch_master_list(client: httpx.AsyncClient, master_list_url: str) -> list[str]:
    """Fetch the master list JSON (an array of repository URLs)."""
    response = await client.get(master_list_url)
    response.raise_for_status()
    urls = response.json()
    if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
        raise ValueError("Master list must be a JSON array of URLs")
    return urls


def _normalize(url: str) -> str:
    url = url.strip().lower().rstrip("/")
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url


def filter_new(urls: list[str], master: list[str]) -> list[str]:
    """Return the URLs that are not already in the master list, in input order."""
    known = {_normalize(url) for url in master}
    return [url for url in urls if _normalize(url) not in known]
