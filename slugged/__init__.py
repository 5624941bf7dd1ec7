from __future__ import annotations

from .candidates import Candidates, Compound, Literal, Ref, Thunk
from .config import SlugConfig
from .exceptions import SlugConflict, SlugError, UnresolvableInput
from .hooks import persist, prepare_save, set_slug, should_generate_slug
from .normalizer import normalize
from .resolver import SlugResolver, generate_slug, resolve_conflict

__all__ = [
    "Candidates",
    "Compound",
    "Literal",
    "Ref",
    "Thunk",
    "SlugConfig",
    "SlugConflict",
    "SlugError",
    "UnresolvableInput",
    "persist",
    "prepare_save",
    "set_slug",
    "should_generate_slug",
    "normalize",
    "SlugResolver",
    "generate_slug",
    "resolve_conflict",
]
