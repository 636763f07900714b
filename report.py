"""
Join GA4 view rows with microCMS metadata and aggregate them per author. No I/O here.
"""
from collections import defaultdict

from models import AuthorRow, BlogRow, ContentMeta, ViewRow

UNKNOWN_AUTHOR = "unknown"


def month_label(year_month: str) -> str:
    """'202501' -> '2025-01'. Anything that is not six digits is returned as is."""
    if isinstance(year_month, str) and len(year_month) == 6 and year_month.isdigit():
        return f"{year_month[:4]}-{year_month[4:]}"
    return year_month


def build_blog_rows(meta: dict[str, ContentMeta], views: list[ViewRow]) -> list[BlogRow]:
    """One row per matched (slug, month), sorted by slug then month. Unknown slugs are dropped."""
    rows = []
    for v in views:
        post = meta.get(v.slug)
        if post is None:
            continue
        rows.append(BlogRow(v.slug, post.title, post.author, month_label(v.year_month), v.views))
    rows.sort(key=lambda r: (r.slug, r.month))
    return rows


def build_author_rows(meta: dict[str, ContentMeta], views: list[ViewRow]) -> list[AuthorRow]:
    """Sum matched views per (author, month), sorted by author then month."""
    totals: dict[tuple[str, str], int] = defaultdict(int)
    for v in views:
        post = meta.get(v.slug)
        if post is None:
            continue
        totals[(post.author or UNKNOWN_AUTHOR, v.year_month)] += v.views
    rows = [AuthorRow(author, month_label(ym), n) for (author, ym), n in totals.items()]
    rows.sort(key=lambda r: (r.author, r.month))
    return rows
