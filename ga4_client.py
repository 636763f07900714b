"""
GA4 Data API client. Fetches monthly pageviews for every page under the article path prefix.
"""
from typing import Any

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from errors import CollaboratorAPIError
from models import ViewRow

ROW_LIMIT = 100000


def _report_body(path_prefix: str, start_date: str, end_date: str, offset: int) -> dict[str, Any]:
    return {
        "dateRanges": [{"startDate": start_date, "endDate": end_date}],
        "dimensions": [{"name": "yearMonth"}, {"name": "pagePath"}],
        "metrics": [{"name": "screenPageViews"}],
        "dimensionFilter": {
            "filter": {
                "fieldName": "pagePath",
                "stringFilter": {"matchType": "BEGINS_WITH", "value": path_prefix},
            }
        },
        "limit": ROW_LIMIT,
        "offset": offset,
    }


def _run_report(service: Any, property_name: str, request_body: dict[str, Any]) -> dict[str, Any]:
    try:
        return (
            service.properties()
            .runReport(property=property_name, body=request_body)
            .execute()
        )
    except HttpError as e:
        status = getattr(e.resp, "status", None)
        raise CollaboratorAPIError("ga4_run_report", f"status={status}: {e}") from e
    except (GoogleAuthError, HttpLib2Error, OSError) as e:
        raise CollaboratorAPIError("ga4_run_report", f"{type(e).__name__}: {e}") from e


def slug_from_path(path: str, path_prefix: str) -> str:
    """'/articles/foo/' -> 'foo'. Strips the prefix and one trailing slash."""
    if path.startswith(path_prefix):
        path = path[len(path_prefix):]
    if path.endswith("/"):
        path = path[:-1]
    return path


def _parse_views(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parse_row(row: dict[str, Any], path_prefix: str) -> ViewRow:
    dims = row.get("dimensionValues", [])
    metrics = row.get("metricValues", [])
    year_month = dims[0].get("value", "") if len(dims) > 0 else ""
    path = dims[1].get("value", "") if len(dims) > 1 else ""
    views = metrics[0].get("value") if metrics else None
    return ViewRow(
        year_month=year_month or "",
        slug=slug_from_path(path or "", path_prefix),
        views=_parse_views(views),
    )


def fetch_monthly_views(
    service: Any,
    property_id: str,
    path_prefix: str,
    start_date: str,
    end_date: str = "yesterday",
) -> list[ViewRow]:
    """
    Fetch (yearMonth, slug, screenPageViews) rows for pages whose path begins with path_prefix.
    One request covers up to ROW_LIMIT rows; larger reports are read page by page via offset.
    """
    property_name = f"properties/{property_id}"
    rows: list[ViewRow] = []
    offset = 0

    while True:
        body = _report_body(path_prefix, start_date, end_date, offset)
        response = _run_report(service, property_name, body)
        page = response.get("rows", [])
        rows.extend(_parse_row(r, path_prefix) for r in page)
        total = int(response.get("rowCount", 0) or 0)
        offset += len(page)
        if not page or offset >= total:
            break

    return rows
