"""Per-index profiles: which items an index receives and how permalinks are written."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from search_sync.ingestion.models import ContentItem
from search_sync.utils.config import ProfileSettings
from search_sync.utils.exceptions import ConfigurationError

DEFAULT_PERMALINK_POLICY = "locale-prefix"


@dataclass(frozen=True)
class IndexProfile:
    """Indexing rules for one target index.

    Attributes:
        required_path_fragment: When set, only items whose path contains it are indexed
        permalink_policy: Name of the permalink policy in PERMALINK_POLICIES
        permalink_prefix: Prefix inserted before locale segments by "locale-prefix"
        locales: Locale path segments rewritten by "locale-prefix"
    """

    required_path_fragment: str | None = None
    permalink_policy: str = DEFAULT_PERMALINK_POLICY
    permalink_prefix: str = "/blog"
    locales: tuple[str, ...] = ("ru", "en")

    def accepts(self, item: ContentItem) -> bool:
        """Return True if the item belongs in this index."""
        if item.indexable is False:
            return False
        if self.required_path_fragment is not None:
            return self.required_path_fragment in item.path
        return True

    def normalize_permalink(self, permalink: str) -> str:
        """Rewrite a permalink with this profile's policy."""
        return PERMALINK_POLICIES[self.permalink_policy](permalink, self)


def locale_prefix_policy(permalink: str, profile: IndexProfile) -> str:
    """Move every locale segment under the profile prefix: /en/foo -> /blog/en/foo."""
    if not profile.locales:
        return permalink
    locales = "|".join(re.escape(locale) for locale in profile.locales)
    prefix = profile.permalink_prefix.rstrip("/")
    return re.sub(rf"/({locales})/", lambda m: f"{prefix}/{m.group(1)}/", permalink)


def passthrough_policy(permalink: str, profile: IndexProfile) -> str:
    """Keep the permalink unchanged."""
    return permalink


PERMALINK_POLICIES: dict[str, Callable[[str, IndexProfile], str]] = {
    "locale-prefix": locale_prefix_policy,
    "passthrough": passthrough_policy,
}

DEFAULT_PROFILE = IndexProfile()

# Built-in profiles keyed by index name; site config may add or override entries
BUILTIN_PROFILES: dict[str, IndexProfile] = {
    # Help center: help articles only, permalinks already point at the right host
    "amplifr-static": IndexProfile(
        required_path_fragment="help",
        permalink_policy="passthrough",
    ),
}


def profile_from_settings(settings: ProfileSettings) -> IndexProfile:
    """Build an IndexProfile from its site config section.

    Raises:
        ConfigurationError: If the permalink policy is unknown
    """
    if settings.permalink_policy not in PERMALINK_POLICIES:
        raise ConfigurationError(
            f"Unknown permalink policy '{settings.permalink_policy}', "
            f"expected one of: {', '.join(sorted(PERMALINK_POLICIES))}"
        )
    return IndexProfile(
        required_path_fragment=settings.required_path_fragment,
        permalink_policy=settings.permalink_policy,
        permalink_prefix=settings.permalink_prefix,
        locales=tuple(settings.locales),
    )


def resolve_profile(
    index_name: str,
    overrides: Mapping[str, ProfileSettings] | None = None,
) -> IndexProfile:
    """Look up the profile for an index.

    Site config overrides win over built-in profiles; unknown indexes get
    the default profile.
    """
    if overrides and index_name in overrides:
        return profile_from_settings(overrides[index_name])
    return BUILTIN_PROFILES.get(index_name, DEFAULT_PROFILE)
