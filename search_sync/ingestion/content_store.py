"""Site content store: posts and pages read from a static-site source tree.

Loads markdown files with YAML front matter, renders their bodies to HTML
with markdown-it and exposes them as ContentItem objects, the way a static
site generator's database would.
"""

import re
from collections.abc import Iterable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import structlog
import yaml
from markdown_it import MarkdownIt

from search_sync.ingestion.models import ContentItem, DateValue, TaxonomyTerm
from search_sync.utils.config import SiteSettings
from search_sync.utils.exceptions import ContentLoadError

logger = structlog.get_logger(__name__)

MARKDOWN_EXTENSIONS = {".md", ".markdown"}
POSTS_DIR = "_posts"
DRAFTS_DIR = "_drafts"
EXCERPT_MARKER = re.compile(r"<!--\s*more\s*-->", re.IGNORECASE)
PERMALINK_TOKEN = re.compile(r":(\w+)")


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    return re.sub(r"-+", "-", text).strip("-")


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return [str(v) for v in value if v is not None]
    return [str(value)]


class SiteContentStore:
    """Content store backed by a site source directory.

    Layout:
    - ``<source>/_posts/**``: posts
    - ``<source>/_drafts/**``: unpublished posts
    - any other markdown file outside ``_``-prefixed directories: pages

    Example:
        >>> store = SiteContentStore(Path("my-site"), settings)
        >>> items = store.load_all()
        >>> print(f"{len(items)} published posts and pages")
    """

    def __init__(self, site_dir: str | Path, settings: SiteSettings) -> None:
        """Initialize content store.

        Args:
            site_dir: Root directory of the site
            settings: Site settings (url, permalink pattern, taxonomy dirs)
        """
        self.site_dir = Path(site_dir)
        self.settings = settings
        self.source_path = self.site_dir / settings.source_dir
        self.markdown = MarkdownIt("commonmark").enable("table")
        self.logger = logger.bind(component="content_store")

    def load_all(self) -> list[ContentItem]:
        """Load published posts followed by pages.

        Raises:
            ContentLoadError: If the source directory is missing or a file cannot be parsed
        """
        posts = self.find_posts(published=True)
        pages = self.find_pages()
        self.logger.info("content_loaded", posts=len(posts), pages=len(pages))
        return posts + pages

    def find_posts(self, published: bool | None = True) -> list[ContentItem]:
        """Load posts.

        Args:
            published: True for published posts only, False for unpublished
                posts only (drafts included), None for everything

        Returns:
            Posts in source file order
        """
        self._check_source()
        files = [(p, False) for p in self._markdown_files(self.source_path / POSTS_DIR)]
        if published is not True:
            files += [(p, True) for p in self._markdown_files(self.source_path / DRAFTS_DIR)]

        posts = [self._load_post(path, is_draft) for path, is_draft in files]
        if published is None:
            return posts
        return [post for post in posts if post.published is published]

    def find_pages(self, layouts: Iterable[str] = ("page",)) -> list[ContentItem]:
        """Load pages whose layout is one of ``layouts``."""
        self._check_source()
        wanted = set(layouts)
        pages = []
        for path in self._markdown_files(self.source_path):
            relative = path.relative_to(self.source_path)
            if any(part.startswith("_") for part in relative.parts):
                continue
            page = self._load_page(path)
            if page.layout in wanted:
                pages.append(page)
        return pages

    def _check_source(self) -> None:
        if not self.source_path.is_dir():
            raise ContentLoadError(f"Source directory not found: {self.source_path}")

    @staticmethod
    def _markdown_files(root: Path) -> list[Path]:
        if not root.is_dir():
            return []
        return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix in MARKDOWN_EXTENSIONS)

    def _read(self, path: Path) -> tuple[dict[str, Any], str]:
        try:
            text = path.read_text(encoding="utf-8")
            return self._parse_frontmatter(text)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as e:
            self.logger.error(
                "file_load_error",
                file_path=str(path),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ContentLoadError(f"Failed to load {path}: {e}") from e

    def _parse_frontmatter(self, content: str) -> tuple[dict[str, Any], str]:
        """Split YAML front matter from the markdown body.

        Front matter is optional; a file without the opening ``---`` is all body.

        Raises:
            ValueError: If the front matter is unterminated or not a mapping
        """
        lines = content.split("\n")
        if not lines or lines[0].rstrip("\r") != "---":
            return {}, content.strip()

        closing_index = None
        for i in range(1, len(lines)):
            if lines[i].rstrip("\r") == "---":
                closing_index = i
                break

        if closing_index is None:
            raise ValueError("Invalid YAML front matter (missing closing '---')")

        frontmatter_str = "\n".join(line.rstrip("\r") for line in lines[1:closing_index])
        frontmatter = yaml.safe_load(frontmatter_str) or {}

        if not isinstance(frontmatter, dict):
            raise ValueError("YAML front matter must be a dictionary")

        body = "\n".join(line.rstrip("\r") for line in lines[closing_index + 1 :]).strip()
        return frontmatter, body

    def _render(self, body: str) -> tuple[str, str]:
        """Render body to HTML; returns (content, excerpt)."""
        parts = EXCERPT_MARKER.split(body, maxsplit=1)
        excerpt = self.markdown.render(parts[0]) if len(parts) > 1 else ""
        return self.markdown.render(EXCERPT_MARKER.sub("", body)), excerpt

    @staticmethod
    def _file_time(path: Path) -> datetime:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)

    def _permalink(self, path: str) -> str:
        return f"{self.settings.url.rstrip('/')}/{path}"

    def _terms(self, names: list[str], base_dir: str) -> tuple[TaxonomyTerm, ...]:
        terms = []
        for name in names:
            slug = slugify(name)
            path = f"{base_dir.strip('/')}/{slug}/"
            terms.append(TaxonomyTerm(name=name, slug=slug, path=path, permalink=self._permalink(path)))
        return tuple(terms)

    def _post_path(self, slug: str, name: str, moment: DateValue, lang: str | None) -> str:
        if not isinstance(moment, date):
            moment = None
        values = {
            "year": f"{moment.year:04d}" if moment else "",
            "month": f"{moment.month:02d}" if moment else "",
            "day": f"{moment.day:02d}" if moment else "",
            "i_month": str(moment.month) if moment else "",
            "i_day": str(moment.day) if moment else "",
            "title": slug,
            "name": name,
            "lang": lang or "",
        }
        path = PERMALINK_TOKEN.sub(lambda m: values.get(m.group(1), m.group(0)), self.settings.permalink)
        return re.sub(r"/{2,}", "/", path).lstrip("/")

    def _load_post(self, path: Path, is_draft: bool) -> ContentItem:
        frontmatter, body = self._read(path)
        base = self.source_path / (DRAFTS_DIR if is_draft else POSTS_DIR)
        relative = path.relative_to(base).with_suffix("").as_posix()

        modified = self._file_time(path)
        moment = frontmatter.get("date", modified)
        slug = str(frontmatter.get("slug") or relative)
        lang = frontmatter.get("lang")
        post_path = self._post_path(slug, path.stem, moment, lang)
        content, excerpt = self._render(body)

        return ContentItem(
            path=post_path,
            title=frontmatter.get("title", ""),
            date=moment,
            updated=frontmatter.get("updated", modified),
            slug=slug,
            excerpt=excerpt,
            layout=frontmatter.get("layout", "post"),
            content=content,
            permalink=self._permalink(post_path),
            published=not is_draft and frontmatter.get("published", True) is not False,
            indexable=frontmatter.get("indexable"),
            categories=self._terms(_as_list(frontmatter.get("categories")), self.settings.category_dir),
            tags=self._terms(_as_list(frontmatter.get("tags")), self.settings.tag_dir),
            author=frontmatter.get("author"),
            lang=lang,
            source=path,
        )

    def _load_page(self, path: Path) -> ContentItem:
        frontmatter, body = self._read(path)
        relative = path.relative_to(self.source_path)
        page_path = relative.with_suffix(".html").as_posix()

        modified = self._file_time(path)
        content, excerpt = self._render(body)

        return ContentItem(
            path=page_path,
            title=frontmatter.get("title", ""),
            date=frontmatter.get("date", modified),
            updated=frontmatter.get("updated", modified),
            slug=frontmatter.get("slug"),
            excerpt=excerpt,
            layout=frontmatter.get("layout", "page"),
            content=content,
            permalink=self._permalink(page_path),
            published=frontmatter.get("published", True) is not False,
            indexable=frontmatter.get("indexable"),
            author=frontmatter.get("author"),
            lang=frontmatter.get("lang"),
            source=path,
        )
