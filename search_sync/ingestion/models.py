"""Data models for content indexing."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

# Raw date value as it comes out of front matter or file metadata
DateValue = datetime | date | str | int | float | None


@dataclass(frozen=True)
class TaxonomyTerm:
    """A category or tag attached to a post.

    Attributes:
        name: Display name as written in front matter
        slug: URL-safe form of the name
        path: Site-relative path of the term listing (e.g. "tags/python/")
        permalink: Absolute URL of the term listing
    """

    name: str
    slug: str
    path: str
    permalink: str


@dataclass(frozen=True)
class ContentItem:
    """A post or page read from the content store.

    Attributes:
        path: Site-relative output path (e.g. "en/hello-world/")
        title: Item title
        date: Publication date
        updated: Last update date
        slug: URL slug
        excerpt: Rendered excerpt markup, empty when the item has none
        layout: Layout name ("post", "page", ...)
        content: Rendered HTML markup
        permalink: Absolute URL of the item
        published: False for drafts and items marked `published: false`
        indexable: Only an explicit False excludes the item from indexing
        categories: Ordered categories, None when the item kind has none
        tags: Ordered tags, None when the item kind has none
        author: Author name from front matter
        lang: Language code from front matter
        source: File the item was loaded from
    """

    path: str
    title: str | None
    date: DateValue
    updated: DateValue
    slug: str | None
    excerpt: str | None
    layout: str | None
    content: str
    permalink: str
    published: bool = True
    indexable: bool | None = None
    categories: tuple[TaxonomyTerm, ...] | None = None
    tags: tuple[TaxonomyTerm, ...] | None = None
    author: str | None = None
    lang: str | None = None
    source: Path | None = None


def _serialize_date(value: DateValue) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


@dataclass
class IndexDocument:
    """Canonical index-ready representation of one content item."""

    object_id: str
    title: str | None
    date: DateValue
    updated: DateValue
    slug: str | None
    excerpt: str | None
    layout: str | None
    date_as_int: int | float
    updated_as_int: int | float
    permalink: str
    content: str
    author: str | None
    lang: str | None
    categories: list[dict[str, str]] | None = None
    tags: list[dict[str, str]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the record body sent to the remote index.

        Categories and tags are left out entirely when the item has none.
        """
        record: dict[str, Any] = {
            "objectID": self.object_id,
            "title": self.title,
            "date": _serialize_date(self.date),
            "updated": _serialize_date(self.updated),
            "slug": self.slug,
            "excerpt": self.excerpt,
            "layout": self.layout,
            "date_as_int": self.date_as_int,
            "updated_as_int": self.updated_as_int,
            "permalink": self.permalink,
        }
        if self.categories is not None:
            record["categories"] = self.categories
        if self.tags is not None:
            record["tags"] = self.tags
        record["content"] = self.content
        record["author"] = self.author
        record["lang"] = self.lang
        return record


class BatchOperation(str, Enum):
    """Write operation carried by a batch action."""

    # Full-document upsert keyed by objectID
    UPDATE = "update"


@dataclass(frozen=True)
class BatchAction:
    """One write operation targeted at a named remote index."""

    index_name: str
    document: IndexDocument
    operation: BatchOperation = BatchOperation.UPDATE
