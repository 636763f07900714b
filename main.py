"""
Monthly Article Stats

Pulls article slugs, titles and authors from microCMS and monthly pageviews from GA4,
joins them by slug, and overwrites two tabs of a Google Sheet:
  blogs   - one row per article and month
  authors - pageviews summed per author and month
Meant to be run by an external scheduler; every run recomputes the full history.
"""
import sys
from typing import Any

import gspread
import requests

from config import Settings, load_settings
from ga4_client import fetch_monthly_views
from google_clients import get_credentials, get_ga4_service, get_sheets_client
from microcms_client import fetch_post_meta
from models import AUTHOR_HEADER, BLOG_HEADER
from report import build_author_rows, build_blog_rows
from sheets_writer import open_spreadsheet, write_sheet

BLOGS_SHEET = "blogs"
AUTHORS_SHEET = "authors"


def run(
    settings: Settings,
    sheets_client: gspread.Client,
    ga4_service: Any,
    session: requests.Session | None = None,
) -> tuple[int, int]:
    """Run the pipeline once. Returns (blog rows written, author rows written)."""
    print(f"Fetching posts from microCMS ({settings.microcms_service}/{settings.microcms_endpoint})...")
    meta = fetch_post_meta(
        settings.microcms_service,
        settings.microcms_api_key,
        settings.microcms_endpoint,
        session=session,
    )
    print(f"Found {len(meta)} posts.")

    print(f"Fetching GA4 monthly pageviews for '{settings.path_prefix}' since {settings.start_date}...")
    views = fetch_monthly_views(
        ga4_service,
        settings.ga_property_id,
        settings.path_prefix,
        settings.start_date,
    )
    print(f"Got {len(views)} GA4 rows.")

    spreadsheet = open_spreadsheet(sheets_client, settings.sheets_id)

    blog_rows = build_blog_rows(meta, views)
    write_sheet(spreadsheet, BLOGS_SHEET, BLOG_HEADER, [r.as_row() for r in blog_rows])
    print("blogs sheet updated", len(blog_rows))

    author_rows = build_author_rows(meta, views)
    write_sheet(spreadsheet, AUTHORS_SHEET, AUTHOR_HEADER, [r.as_row() for r in author_rows])
    print("authors sheet updated", len(author_rows))

    return len(blog_rows), len(author_rows)


def main() -> None:
    try:
        settings = load_settings()
        creds = get_credentials(settings.credentials_info)
        blogs, authors = run(settings, get_sheets_client(creds), get_ga4_service(creds))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"\nDone. {blogs} blog rows, {authors} author rows.")


if __name__ == "__main__":
    main()
