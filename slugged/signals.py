from django.db.models.signals import pre_save

from .hooks import set_slug

_registry = {}


def register(model, config):
    """
    Assign slugs to ``model`` instances from a ``pre_save`` receiver.

    A receiver cannot change ``update_fields``, so partial saves that leave out
    the slug field do not generate a slug. Registering a model again replaces
    its previous config.
    """

    def assign_slug_on_save(sender, instance, raw=False, update_fields=None, **kwargs):
        # Fixture loading saves rows exactly as serialized.
        if raw:
            return
        if update_fields is not None and config.slug_field not in update_fields:
            return
        set_slug(instance, config)

    dispatch_uid = f"slugged:{model._meta.label}"
    pre_save.disconnect(sender=model, dispatch_uid=dispatch_uid)
    pre_save.connect(
        assign_slug_on_save,
        sender=model,
        weak=False,
        dispatch_uid=dispatch_uid,
    )
    _registry[model] = config
    return model


def config_for(model):
    return _registry.get(model)
