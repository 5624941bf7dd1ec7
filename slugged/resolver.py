from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional, Tuple

from .candidates import Candidates
from .exceptions import UnresolvableInput
from .oracle import QuerySetOracle

logger = logging.getLogger(__name__)


def resolve_conflict(first_slug: str, separator: str = "-") -> str:
    """
    Last resort when every candidate is taken: append a random UUID.

    The result is not checked against the database again. A collision is
    possible in theory and is left to the unique constraint to catch.
    """
    return f"{first_slug}{separator}{uuid.uuid4()}"


class SlugResolver:
    """Picks the first normalized candidate that no other row is using."""

    def __init__(self, config, oracle=None):
        self.config = config
        self.oracle = oracle or QuerySetOracle(config.slug_field)

    def attempt(
        self, candidates: Iterable, scope, exclude=None
    ) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(winner, first)``; ``winner`` is None when all are taken."""
        first = None
        for raw in candidates:
            slug = self.config.normalize(raw)
            if not slug:
                continue
            if first is None:
                first = slug
            if not self.oracle.exists(scope, slug, exclude):
                return slug, first
            logger.debug("Slug candidate %r is taken", slug)
        return None, first

    def generate(self, candidates: Iterable, scope, exclude=None) -> Optional[str]:
        slug, _ = self.attempt(candidates, scope, exclude)
        return slug


def generate_slug(candidates: Candidates, scope, exclude, config, oracle=None) -> str:
    """
    Return a free slug for ``candidates`` or a random fallback based on the first one.

    ``candidates`` must be a ``Candidates`` sequence bound to the instance; a raw
    list of entries would be normalized as text. Raises ``UnresolvableInput``
    when no candidate produces any slug text.
    """
    if not isinstance(candidates, Candidates):
        raise TypeError(
            f"generate_slug expects a Candidates sequence, got {type(candidates).__name__}"
        )
    resolver = config.make_resolver(oracle=oracle)
    slug, first = resolver.attempt(candidates, scope, exclude)
    if slug:
        return slug
    if first is None:
        raise UnresolvableInput("None of the slug candidates produced any slug text.")
    slug = resolve_conflict(first, config.sequence_separator)
    logger.info(f"All slug candidates taken, falling back to {slug}")
    return slug
