from __future__ import annotations

from django.db import models


def scope_for(instance: models.Model, config) -> models.QuerySet:
    """
    Rows whose slugs ``instance`` must not collide with.

    Defaults to every row of the concrete model that declares the slug field,
    through its unfiltered base manager, so multi-table children are checked
    against the parent table.
    """
    if config.scope is not None:
        return config.scope(instance)
    owner = instance._meta.get_field(config.slug_field).model._meta.concrete_model
    return owner._base_manager.all()


class QuerySetOracle:
    """Answers "is this slug taken?" against a queryset."""

    def __init__(self, slug_field: str = "slug"):
        self.slug_field = slug_field

    def exists(self, scope: models.QuerySet, slug: str, exclude=None) -> bool:
        queryset = scope.filter(**{self.slug_field: slug})
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude)
        return queryset.exists()
