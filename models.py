"""
Row types passed between the pipeline stages.
"""
from dataclasses import dataclass

BLOG_HEADER = ["slug", "title", "author", "month", "views"]
AUTHOR_HEADER = ["author", "month", "views"]


@dataclass(frozen=True)
class ContentMeta:
    """Article metadata from microCMS, keyed by slug."""
    slug: str
    title: str
    author: str  # "" when the article has no author


@dataclass(frozen=True)
class ViewRow:
    """One GA4 report row: pageviews of one page in one month."""
    year_month: str  # YYYYMM
    slug: str
    views: int


@dataclass(frozen=True)
class BlogRow:
    slug: str
    title: str
    author: str
    month: str  # YYYY-MM
    views: int

    def as_row(self) -> list:
        return [self.slug, self.title, self.author, self.month, self.views]


@dataclass(frozen=True)
class AuthorRow:
    author: str
    month: str
    views: int

    def as_row(self) -> list:
        return [self.author, self.month, self.views]
