"""
Management command to assign slugs to existing rows that have none.

Usage:
    python manage.py backfill_slugs blog.Post                  # Use the config registered for blog.Post
    python manage.py backfill_slugs blog.Post --source title   # Build slugs from the title field
    python manage.py backfill_slugs blog.Post --dry-run        # Preview without saving
"""
from __future__ import annotations

from dataclasses import replace

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import Q

from slugged.config import SlugConfig
from slugged.exceptions import UnresolvableInput
from slugged.hooks import set_slug
from slugged.signals import config_for


class Command(BaseCommand):
    help = "Generate slugs for rows whose slug field is empty."

    def add_arguments(self, parser):
        parser.add_argument("model", help="Model label, e.g. blog.Post.")
        parser.add_argument(
            "--source",
            default=None,
            help="Attribute or method to build slugs from (default: registered config).",
        )
        parser.add_argument(
            "--slug-field",
            default=None,
            help="Field holding the slug (default: registered config or 'slug').",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Preview changes without making them.",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Limit number of rows to process.",
        )

    def handle(self, *args, **options):
        try:
            model = apps.get_model(options["model"])
        except (LookupError, ValueError) as exc:
            raise CommandError(f"Unknown model {options['model']!r}") from exc

        config = self._config(model, options["source"], options["slug_field"])
        dry_run = options["dry_run"]
        limit = options["limit"]

        field = config.slug_field
        rows = model._base_manager.filter(
            Q(**{f"{field}__isnull": True}) | Q(**{field: ""})
        ).order_by("pk")
        if limit:
            rows = rows[:limit]
        rows = list(rows)

        self.stdout.write(f"Processing {len(rows)} rows without a slug...")

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN - no changes will be made"))
            # Rows are not saved, so two rows with the same source preview the same slug.
            for obj in rows:
                self.stdout.write(f"  [{obj.pk}] -> {self._assign(obj, config) or '(skipped)'}")
            return

        updated_count = 0
        with transaction.atomic():
            for obj in rows:
                slug = self._assign(obj, config)
                if slug:
                    obj.save(update_fields=[field])
                    updated_count += 1
                else:
                    self.stdout.write(f"  [{obj.pk}] skipped")

        self.stdout.write(self.style.SUCCESS(f"Updated {updated_count} slugs"))

    def _assign(self, obj, config):
        try:
            return set_slug(obj, config)
        except UnresolvableInput:
            self.stdout.write(
                self.style.WARNING(f"  [{obj.pk}] no candidate produced slug text")
            )
            return None

    def _config(self, model, source, slug_field):
        registered = config_for(model)
        if registered is None:
            if source is None:
                raise CommandError(
                    f"{model._meta.label} has no registered slug config; pass --source."
                )
            return SlugConfig.build(candidate_source=source, slug_field=slug_field)

        overrides = {}
        if source is not None:
            overrides["candidate_source"] = source
        if slug_field is not None:
            overrides["slug_field"] = slug_field
        return replace(registered, **overrides)
