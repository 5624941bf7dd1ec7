from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .normalizer import DEFAULT_SEPARATOR, normalize
from .resolver import SlugResolver

DEFAULTS = {
    "slug_field": "slug",
    "sequence_separator": DEFAULT_SEPARATOR,
}

# Project-wide overrides read from settings.SLUGGED
SETTINGS_KEYS = {
    "slug_field": "SLUG_FIELD",
    "sequence_separator": "SEQUENCE_SEPARATOR",
}

# SlugField only accepts these besides letters and digits.
_SEPARATOR_RE = re.compile(r"^[-_]+$")


@dataclass(frozen=True)
class SlugConfig:
    """Slug settings for one model, resolved once when the model is declared."""

    candidate_source: Optional[str] = None
    slug_field: str = DEFAULTS["slug_field"]
    sequence_separator: str = DEFAULTS["sequence_separator"]
    normalizer: Callable[..., str] = normalize
    resolver_class: Optional[type] = None
    scope: Optional[Callable[[Any], Any]] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.candidate_source:
            raise ImproperlyConfigured("SlugConfig requires a candidate_source.")
        if not self.slug_field:
            raise ImproperlyConfigured("SlugConfig requires a slug_field.")
        if not isinstance(self.sequence_separator, str) or not _SEPARATOR_RE.match(
            self.sequence_separator
        ):
            raise ImproperlyConfigured(
                f"sequence_separator must be made of '-' or '_', "
                f"got {self.sequence_separator!r}"
            )

    @classmethod
    def build(cls, **local) -> "SlugConfig":
        """
        Resolve options as ``local ?? settings.SLUGGED ?? DEFAULTS``.

        Options passed explicitly (and not ``None``) win; otherwise the
        project setting is used, then the built-in default.
        """
        project = getattr(settings, "SLUGGED", {})
        options = {key: value for key, value in local.items() if value is not None}
        for name, setting_key in SETTINGS_KEYS.items():
            if name not in options:
                options[name] = project.get(setting_key, DEFAULTS[name])
        return cls(**options)

    def normalize(self, value) -> str:
        return self.normalizer(value, separator=self.sequence_separator)

    def make_resolver(self, oracle=None):
        resolver_class = self.resolver_class or SlugResolver
        return resolver_class(self, oracle=oracle)
