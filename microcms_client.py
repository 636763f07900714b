"""
microCMS list API client. Pulls slug, title and author name for every article in one endpoint.
"""
from typing import Any

import requests
from requests.exceptions import RequestException

from errors import EmptyResultError, MetadataFetchError
from models import ContentMeta

PAGE_SIZE = 100
FIELDS = "id,title,author"
REQUEST_TIMEOUT = 30


def _list_url(service: str, endpoint: str) -> str:
    return f"https://{service}.microcms.io/api/v1/{endpoint}"


def _get_page(session: requests.Session, url: str, api_key: str, offset: int) -> dict[str, Any]:
    """GET one page of the list API. Non-2xx responses are fatal."""
    params = {"limit": PAGE_SIZE, "offset": offset, "fields": FIELDS}
    try:
        resp = session.get(
            url,
            headers={"X-MICROCMS-API-KEY": api_key},
            params=params,
            timeout=REQUEST_TIMEOUT,
        )
    except RequestException as e:
        raise MetadataFetchError(f"microCMS request failed at offset {offset}: {e}") from e
    if not resp.ok:
        raise MetadataFetchError(
            f"microCMS returned an error at offset {offset}",
            status=resp.status_code,
            body=resp.text,
        )
    try:
        data = resp.json()
    except ValueError as e:
        raise MetadataFetchError(
            "microCMS returned a non-JSON body", status=resp.status_code, body=resp.text
        ) from e
    if not isinstance(data, dict):
        raise MetadataFetchError("microCMS response is not an object", status=resp.status_code)
    return data


def _author_name(raw: Any) -> str:
    """Author is a content reference ({'name': ...}); anything else has no name."""
    if isinstance(raw, dict):
        name = raw.get("name")
        return name.strip() if isinstance(name, str) else ""
    return ""


def parse_item(item: Any) -> ContentMeta:
    """Validate one list item. Only `id` is mandatory; title and author default to ''."""
    if not isinstance(item, dict):
        raise MetadataFetchError(f"microCMS item is not an object: {item!r}")
    slug = item.get("id")
    if not isinstance(slug, str) or not slug.strip():
        raise MetadataFetchError(f"microCMS item has no id: {item!r}")
    title = item.get("title")
    return ContentMeta(
        slug=slug.strip(),
        title=title if isinstance(title, str) else "",
        author=_author_name(item.get("author")),
    )


def _parse_page(data: dict[str, Any]) -> tuple[list[ContentMeta], int]:
    contents = data.get("contents")
    total = data.get("totalCount")
    if not isinstance(contents, list):
        raise MetadataFetchError("microCMS response has no 'contents' list")
    if not isinstance(total, int) or isinstance(total, bool):
        raise MetadataFetchError("microCMS response has no integer 'totalCount'")
    return [parse_item(item) for item in contents], total


def fetch_post_meta(
    service: str,
    api_key: str,
    endpoint: str,
    session: requests.Session | None = None,
) -> dict[str, ContentMeta]:
    """
    Fetch all items of the endpoint with offset pagination.
    Returns slug -> ContentMeta. Raises EmptyResultError when nothing was found.
    """
    session = session or requests.Session()
    url = _list_url(service, endpoint)
    posts: dict[str, ContentMeta] = {}
    offset = 0

    while True:
        data = _get_page(session, url, api_key, offset)
        items, total = _parse_page(data)
        for meta in items:
            posts[meta.slug] = meta
        if offset + PAGE_SIZE >= total or not items:
            break
        offset += PAGE_SIZE

    if not posts:
        raise EmptyResultError(f"No posts found in microCMS endpoint '{endpoint}'")
    return posts
