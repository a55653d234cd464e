"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from search_sync.ingestion.models import BatchAction, ContentItem, IndexDocument, TaxonomyTerm

SITE_CONFIG = """\
title: Example Blog
url: https://example.com
permalink: :title/
author: Site Team
search_sync:
  index_name: blog
  service_url: https://search.example.com:9200
"""

HELLO_POST = """\
---
title: Hello World
date: 2024-01-15 10:30:00
updated: 2024-02-01 08:00:00
tags: [Python, Search Engines]
categories: News
lang: en
---
Intro paragraph.

<!-- more -->

More **content** here.
"""

HELP_POST = """\
---
title: Connecting accounts
date: 2024-03-01
author: Support
---
Open <em>Settings</em> and press *Connect*.
"""

HIDDEN_POST = """\
---
title: Hidden
date: 2024-03-02
indexable: false
---
Not for search.
"""

UNPUBLISHED_POST = """\
---
title: Not yet
date: 2024-03-03
published: false
---
Coming soon.
"""

DRAFT_POST = """\
---
title: Work in progress
---
Draft body.
"""

ABOUT_PAGE = """\
---
title: About
date: 2023-12-01
---
We write about <strong>search</strong>.
"""

RAW_PAGE = """\
---
title: Landing
layout: landing
---
Custom layout page.
"""


def write_site(root: Path, files: dict[str, str], config: str = SITE_CONFIG) -> Path:
    """Write a site directory: _config.yml plus files relative to source/."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "_config.yml").write_text(config, encoding="utf-8")
    for relative, content in files.items():
        path = root / "source" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a small site with posts, a draft and pages."""
    return write_site(
        tmp_path / "site",
        {
            "_posts/en/hello-world.md": HELLO_POST,
            "_posts/en/help/connecting-accounts.md": HELP_POST,
            "_posts/en/hidden.md": HIDDEN_POST,
            "_posts/en/not-yet.md": UNPUBLISHED_POST,
            "_drafts/wip.md": DRAFT_POST,
            "about/index.md": ABOUT_PAGE,
            "landing.md": RAW_PAGE,
            "_data/notes.md": "ignored",
        },
    )


@pytest.fixture
def make_item() -> Callable[..., ContentItem]:
    """Factory for ContentItem with sensible defaults."""

    def _make(**overrides: Any) -> ContentItem:
        values: dict[str, Any] = {
            "path": "en/hello-world/",
            "title": "Hello World",
            "date": "2024-01-15T10:30:00Z",
            "updated": "2024-02-01T08:00:00Z",
            "slug": "en/hello-world",
            "excerpt": "",
            "layout": "post",
            "content": "<p>Hello <em>search</em> world</p>",
            "permalink": "https://example.com/en/hello-world/",
            "categories": (
                TaxonomyTerm(
                    name="News",
                    slug="news",
                    path="categories/news/",
                    permalink="https://example.com/categories/news/",
                ),
            ),
            "tags": (),
        }
        values.update(overrides)
        return ContentItem(**values)

    return _make


@pytest.fixture
def make_action() -> Callable[[int], BatchAction]:
    """Factory for BatchAction with a numbered document."""

    def _make(number: int, index_name: str = "blog") -> BatchAction:
        document = IndexDocument(
            object_id=f"id-{number}",
            title=f"Post {number}",
            date="2024-01-15",
            updated="2024-01-15",
            slug=f"post-{number}",
            excerpt="",
            layout="post",
            date_as_int=1705276800,
            updated_as_int=1705276800,
            permalink=f"https://example.com/post-{number}/",
            content=f"Body {number}",
            author="Site Team",
            lang="po",
        )
        return BatchAction(index_name=index_name, document=document)

    return _make
