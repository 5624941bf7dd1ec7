"""
Pre-persist slug assignment for Django models.

Slugs are write-once: a slug is only generated while the slug field is empty,
so later edits to the source fields keep existing URLs stable. To regenerate,
clear the field and save again.

    class Restaurant(models.Model):
        name = models.CharField(max_length=200)
        city = models.CharField(max_length=200, blank=True)
        slug = models.SlugField(max_length=255, unique=True, null=True, blank=True)

        slug_config = SlugConfig.build(candidate_source="slug_candidates")

        def slug_candidates(self):
            return [Ref("name"), [Ref("name"), Ref("city")]]

        def save(self, *args, **kwargs):
            prepare_save(self, self.slug_config, kwargs)
            super().save(*args, **kwargs)

``prepare_save`` also adds the slug field to ``update_fields`` when it assigns
a slug during a partial save.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, models, transaction

from .candidates import Candidates
from .exceptions import SlugConflict
from .oracle import QuerySetOracle, scope_for
from .resolver import generate_slug

logger = logging.getLogger(__name__)

_UNSET = object()


def is_absent(value) -> bool:
    if value is None:
        return True
    return isinstance(value, (str, list, tuple)) and len(value) == 0


def resolve_source(instance: models.Model, config):
    """Read the configured candidate source, calling it if it is a method."""
    value = getattr(instance, config.candidate_source)
    if callable(value):
        value = value()
    return value


def should_generate_slug(instance: models.Model, config, base=_UNSET) -> bool:
    """True when the slug field is empty and there is something to build a slug from."""
    if not is_absent(getattr(instance, config.slug_field)):
        return False
    if base is _UNSET:
        base = resolve_source(instance, config)
    return not is_absent(base)


def set_slug(instance: models.Model, config, base=None) -> Optional[str]:
    """
    Generate and assign a slug if the instance needs one; return the current slug.

    ``base`` replaces the configured candidate source for this call.
    Raises ``UnresolvableInput`` (leaving the field untouched) when no
    candidate produces slug text.
    """
    if not is_absent(getattr(instance, config.slug_field)):
        return getattr(instance, config.slug_field)
    if base is None:
        base = resolve_source(instance, config)
    if not should_generate_slug(instance, config, base):
        return getattr(instance, config.slug_field)

    slug = generate_slug(
        Candidates(instance, base),
        scope_for(instance, config),
        instance.pk,
        config,
    )
    setattr(instance, config.slug_field, slug)
    return slug


def prepare_save(instance: models.Model, config, save_kwargs: dict) -> Optional[str]:
    """
    Run ``set_slug`` from inside ``save()`` and keep ``update_fields`` in step.

    When a slug is assigned during a save limited by ``update_fields``, the slug
    field is added so the new slug is written along with the other fields.
    """
    was_absent = is_absent(getattr(instance, config.slug_field))
    slug = set_slug(instance, config)
    update_fields = save_kwargs.get("update_fields")
    if was_absent and slug and update_fields is not None:
        if config.slug_field not in update_fields:
            save_kwargs["update_fields"] = [*update_fields, config.slug_field]
    return slug


def persist(instance: models.Model, config, **save_kwargs) -> models.Model:
    """
    Assign a slug if needed and save, reporting lost slug races as ``SlugConflict``.

    Another writer may claim the same slug between the uniqueness check and
    this save. The unique constraint rejects the write; this is raised as
    ``SlugConflict`` and is not retried here.
    """
    prepare_save(instance, config, save_kwargs)
    try:
        with transaction.atomic():
            instance.save(**save_kwargs)
    except IntegrityError as exc:
        slug = getattr(instance, config.slug_field)
        oracle = QuerySetOracle(config.slug_field)
        if slug and oracle.exists(scope_for(instance, config), slug, instance.pk):
            logger.warning(f"Slug {slug} was claimed by another row before save")
            raise SlugConflict(slug, type(instance)) from exc
        raise
    return instance
