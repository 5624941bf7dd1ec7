class SlugError(Exception):
    """Base class for slug generation failures."""


class UnresolvableInput(SlugError, ValueError):
    """No candidate normalized to a usable slug, so there is nothing to fall back on."""


class SlugConflict(SlugError):
    """
    The database rejected a generated slug because another row claimed it first.

    Retryable: clear the slug field and persist again to generate a new one.
    """

    def __init__(self, slug: str, model=None):
        self.slug = slug
        self.model = model
        label = model._meta.label if model is not None else "model"
        super().__init__(f"Slug {slug!r} is already taken on {label}")
