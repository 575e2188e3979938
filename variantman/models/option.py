"""OptionGroup and OptionValue models."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _


class OptionGroup(models.Model):
    """
    Axis of variation of a product (e.g. "Tamanho", "Cor").

    Convention: product_sku = catalog Product.sku (loose coupling)
    """

    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True, verbose_name=_("UUID"))

    product_sku = models.CharField(_("SKU do produto"), max_length=100, db_index=True)
    name = models.CharField(_("nome"), max_length=100)

    # Selection precedence: lower is chosen first
    sort_order = models.IntegerField(default=0, verbose_name=_("ordem"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("criado em"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("atualizado em"))

    class Meta:
        verbose_name = _("Grupo de Opções")
        verbose_name_plural = _("Grupos de Opções")
        ordering = ["product_sku", "sort_order", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product_sku", "name"],
                name="unique_product_option_group",
            ),
        ]

    def __str__(self):
        return f"{self.product_sku} - {self.name}"


class OptionValue(models.Model):
    """Concrete choice within an OptionGroup (e.g. "G", "Azul")."""

    group = models.ForeignKey(
        OptionGroup,
        on_delete=models.CASCADE,
        related_name="values",
        verbose_name=_("grupo"),
    )
    label = models.CharField(_("valor"), max_length=100)
    sort_order = models.IntegerField(default=0, verbose_name=_("ordem"))

    class Meta:
        verbose_name = _("Valor de Opção")
        verbose_name_plural = _("Valores de Opção")
        ordering = ["group", "sort_order", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "label"],
                name="unique_group_value_label",
            ),
        ]

    def __str__(self):
        return f"{self.group.name}: {self.label}"
