"""Transformation of content items into index documents."""

import math
from datetime import UTC, date, datetime, time

import structlog

from search_sync.ingestion.models import ContentItem, DateValue, IndexDocument, TaxonomyTerm
from search_sync.ingestion.profiles import DEFAULT_PROFILE, IndexProfile
from search_sync.ingestion.sanitizer import MAX_CONTENT_BYTES, sanitize_content, truncate_utf8
from search_sync.utils.object_id import compute_object_id

logger = structlog.get_logger(__name__)


def to_epoch_seconds(value: DateValue) -> int | float:
    """Convert a date value to integer seconds since the epoch.

    Naive datetimes are read as UTC. Numbers are taken as epoch seconds.

    Returns:
        Epoch seconds, or NaN if the value cannot be parsed
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, int | float):
        return int(value) if math.isfinite(value) else math.nan
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time())
    else:
        try:
            moment = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return math.nan
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp())


def reduce_terms(terms: tuple[TaxonomyTerm, ...] | None) -> list[dict[str, str]] | None:
    """Keep only name and path of each term, in order; None stays None."""
    if terms is None:
        return None
    return [{"name": term.name, "path": term.path} for term in terms]


class DocumentTransformer:
    """Converts ContentItems into IndexDocuments for one target index.

    The transformer is pure apart from logging: it never raises on malformed
    fields. Unparsable dates become NaN and a warning is logged.
    """

    def __init__(
        self,
        profile: IndexProfile = DEFAULT_PROFILE,
        default_author: str | None = None,
        max_content_bytes: int = MAX_CONTENT_BYTES,
    ) -> None:
        """Initialize transformer.

        Args:
            profile: Profile of the target index (permalink policy)
            default_author: Author used when an item has none
            max_content_bytes: UTF-8 byte bound for the content field
        """
        self.profile = profile
        self.default_author = default_author
        self.max_content_bytes = max_content_bytes

    def transform(self, item: ContentItem) -> IndexDocument:
        """Transform one content item.

        Args:
            item: Item that already passed the index filter

        Returns:
            IndexDocument ready to be wrapped in a batch action
        """
        date_as_int = to_epoch_seconds(item.date)
        updated_as_int = to_epoch_seconds(item.updated)
        if isinstance(date_as_int, float) or isinstance(updated_as_int, float):
            logger.warning(
                "unparsable_date",
                path=item.path,
                date=str(item.date),
                updated=str(item.updated),
            )

        content = sanitize_content(item.content or "")
        content = truncate_utf8(content, self.max_content_bytes)

        return IndexDocument(
            object_id=compute_object_id(item.path),
            title=item.title,
            date=item.date,
            updated=item.updated,
            slug=item.slug,
            excerpt=item.excerpt,
            layout=item.layout,
            date_as_int=date_as_int,
            updated_as_int=updated_as_int,
            permalink=self.profile.normalize_permalink(item.permalink),
            content=content,
            author=item.author or self.default_author,
            lang=item.lang or item.path[:2],
            categories=reduce_terms(item.categories),
            tags=reduce_terms(item.tags),
        )

    def transform_all(self, items: list[ContentItem]) -> list[IndexDocument]:
        """Transform items in order."""
        return [self.transform(item) for item in items]
