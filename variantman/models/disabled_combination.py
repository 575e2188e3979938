"""DisabledCombination model."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class DisabledCombination(models.Model):
    """
    Option values that may never be selected together.

    One value disables it on its own; two values disable the pair.
    Deleting any of its values deletes the whole combination
    (see variantman.handlers).
    """

    product_sku = models.CharField(_("SKU do produto"), max_length=100, db_index=True)
    values = models.ManyToManyField(
        "variantman.OptionValue",
        related_name="disabled_combinations",
        verbose_name=_("valores"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("criado em"))

    class Meta:
        verbose_name = _("Combinação Desativada")
        verbose_name_plural = _("Combinações Desativadas")
        ordering = ["product_sku", "id"]

    def __str__(self):
        labels = ", ".join(str(value) for value in self.values.all())
        return f"{self.product_sku}: {labels}"
