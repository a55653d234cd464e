"""Unit tests for DocumentTransformer."""

import hashlib
import math
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from search_sync.ingestion.models import ContentItem, TaxonomyTerm
from search_sync.ingestion.profiles import IndexProfile
from search_sync.ingestion.transformer import DocumentTransformer, reduce_terms, to_epoch_seconds


class TestToEpochSeconds:
    """Test date conversion to epoch seconds."""

    def test_iso_string_with_zulu(self) -> None:
        assert to_epoch_seconds("2024-01-15T10:30:00Z") == 1705314600

    def test_naive_string_is_utc(self) -> None:
        assert to_epoch_seconds("2024-01-15 10:30:00") == 1705314600

    def test_string_with_offset(self) -> None:
        assert to_epoch_seconds("2024-01-15T12:30:00+02:00") == 1705314600

    def test_date_only_string(self) -> None:
        assert to_epoch_seconds("2024-01-15") == 1705276800

    def test_datetime_objects(self) -> None:
        """Test naive and aware datetimes."""
        assert to_epoch_seconds(datetime(2024, 1, 15, 10, 30)) == 1705314600
        aware = datetime(2024, 1, 15, 11, 30, tzinfo=timezone(timedelta(hours=1)))
        assert to_epoch_seconds(aware) == 1705314600

    def test_date_object(self) -> None:
        assert to_epoch_seconds(date(2024, 1, 15)) == 1705276800

    def test_number_is_epoch_seconds(self) -> None:
        assert to_epoch_seconds(1705314600) == 1705314600
        assert to_epoch_seconds(1705314600.7) == 1705314600

    def test_result_is_int(self) -> None:
        assert isinstance(to_epoch_seconds(datetime(2024, 1, 15, tzinfo=UTC)), int)

    @pytest.mark.parametrize("value", ["not a date", "", None, True, float("nan")])
    def test_unparsable_is_nan(self, value: object) -> None:
        """Test that unparsable values give NaN instead of raising."""
        assert math.isnan(to_epoch_seconds(value))  # type: ignore[arg-type]


class TestReduceTerms:
    """Test category/tag reduction."""

    def test_none_stays_none(self) -> None:
        assert reduce_terms(None) is None

    def test_empty_stays_empty(self) -> None:
        assert reduce_terms(()) == []

    def test_keeps_name_and_path_in_order(self) -> None:
        terms = (
            TaxonomyTerm(name="Zeta", slug="zeta", path="tags/zeta/", permalink="https://x/tags/zeta/"),
            TaxonomyTerm(name="Alpha", slug="alpha", path="tags/alpha/", permalink="https://x/tags/alpha/"),
        )

        assert reduce_terms(terms) == [
            {"name": "Zeta", "path": "tags/zeta/"},
            {"name": "Alpha", "path": "tags/alpha/"},
        ]


class TestDocumentTransformer:
    """Test ContentItem to IndexDocument transformation."""

    @pytest.fixture
    def transformer(self) -> DocumentTransformer:
        return DocumentTransformer(default_author="Site Team")

    def test_object_id_derived_from_path(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        """Test that objectID is the SHA-1 of the path and ignores other fields."""
        first = transformer.transform(make_item(title="One"))
        second = transformer.transform(make_item(title="Two", content="<p>changed</p>"))

        assert first.object_id == hashlib.sha1(b"en/hello-world/").hexdigest()
        assert first.object_id == second.object_id

    def test_projected_fields(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        """Test that scalar fields are copied unchanged."""
        item = make_item(excerpt="<p>Intro</p>", layout="post", slug="en/hello-world")

        document = transformer.transform(item)

        assert document.title == "Hello World"
        assert document.date == "2024-01-15T10:30:00Z"
        assert document.updated == "2024-02-01T08:00:00Z"
        assert document.slug == "en/hello-world"
        assert document.excerpt == "<p>Intro</p>"
        assert document.layout == "post"

    def test_epoch_fields(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        document = transformer.transform(make_item())

        assert document.date_as_int == 1705314600
        assert document.updated_as_int == 1706774400

    def test_unparsable_date_kept_as_nan(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        """Test that a bad date does not abort the transform."""
        document = transformer.transform(make_item(date="someday", updated=None))

        assert math.isnan(document.date_as_int)
        assert math.isnan(document.updated_as_int)
        assert document.date == "someday"

    def test_content_sanitized(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        document = transformer.transform(make_item())

        assert document.content == "Hello search world"

    def test_content_truncated(self, make_item: Callable[..., ContentItem]) -> None:
        """Test that content respects the byte bound."""
        transformer = DocumentTransformer(max_content_bytes=19000)
        item = make_item(content="<p>" + "я" * 15000 + "</p>")

        document = transformer.transform(item)

        assert len(document.content.encode("utf-8")) <= 19000

    def test_missing_content(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        document = transformer.transform(make_item(content=None))

        assert document.content == ""

    def test_default_permalink_policy(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        document = transformer.transform(make_item())

        assert document.permalink == "https://example.com/blog/en/hello-world/"

    def test_passthrough_permalink_policy(self, make_item: Callable[..., ContentItem]) -> None:
        transformer = DocumentTransformer(profile=IndexProfile(permalink_policy="passthrough"))

        document = transformer.transform(make_item())

        assert document.permalink == "https://example.com/en/hello-world/"

    def test_author_from_item(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        assert transformer.transform(make_item(author="Ada")).author == "Ada"

    def test_author_falls_back_to_default(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        assert transformer.transform(make_item(author=None)).author == "Site Team"

    def test_lang_from_item(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        assert transformer.transform(make_item(lang="de")).lang == "de"

    def test_lang_falls_back_to_path_prefix(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        assert transformer.transform(make_item(path="ru/privet/")).lang == "ru"

    def test_absent_taxonomies_omitted(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        """Test that pages without categories/tags get no such fields."""
        record = transformer.transform(make_item(categories=None, tags=None)).to_dict()

        assert "categories" not in record
        assert "tags" not in record

    def test_present_taxonomies_reduced(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        record = transformer.transform(make_item()).to_dict()

        assert record["categories"] == [{"name": "News", "path": "categories/news/"}]
        assert record["tags"] == []

    def test_item_not_mutated(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        item = make_item()

        transformer.transform(item)

        assert item == make_item()

    def test_transform_all_keeps_order(
        self, transformer: DocumentTransformer, make_item: Callable[..., ContentItem]
    ) -> None:
        items = [make_item(path=f"en/post-{i}/") for i in range(3)]

        documents = transformer.transform_all(items)

        assert [d.object_id for d in documents] == [
            hashlib.sha1(f"en/post-{i}/".encode()).hexdigest() for i in range(3)
        ]
