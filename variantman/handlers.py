"""
Variantman signal receivers.

Connected in VariantmanConfig.ready().
"""

import logging

from django.db.models.signals import pre_delete
from django.dispatch import receiver

from variantman.models import DisabledCombination, OptionValue

logger = logging.getLogger(__name__)


@receiver(pre_delete, sender=OptionValue, dispatch_uid="variantman_drop_dangling_combinations")
def drop_dangling_combinations(sender, instance, **kwargs):
    """
    Delete every DisabledCombination that references a deleted value.

    Runs for cascaded deletes too, so removing an OptionGroup drops the
    combinations of all its values.
    """
    deleted, _ = DisabledCombination.objects.filter(values=instance).delete()
    if deleted:
        logger.info(
            "Deleted %d row(s) of disabled combinations referencing value %s",
            deleted,
            instance.pk,
        )
