"""Variant model."""

import uuid as uuid_lib
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class VariantQuerySet(models.QuerySet):
    """Custom QuerySet for Variant."""

    def for_product(self, product_sku: str):
        return self.filter(product_sku=product_sku)

    def available(self):
        """Variants that can be matched and sold."""
        return self.filter(is_available=True)


class Variant(models.Model):
    """Sellable combination of one value per option group of a product."""

    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True, verbose_name=_("UUID"))

    product_sku = models.CharField(_("SKU do produto"), max_length=100, db_index=True)
    sku = models.CharField(_("SKU"), max_length=100, blank=True)

    # Price in cents (None = use product base price)
    price_q = models.BigIntegerField(
        _("preço"),
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text=_("Preço em centavos. Vazio = preço base do produto"),
    )
    image_url = models.URLField(_("imagem"), max_length=500, blank=True)

    is_available = models.BooleanField(
        _("disponível"),
        default=True,
        db_index=True,
        help_text=_("Disponível para venda (Não = não pode ser selecionada)"),
    )

    values = models.ManyToManyField(
        "variantman.OptionValue",
        related_name="variants",
        verbose_name=_("valores"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("criado em"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("atualizado em"))

    # History tracking (price and availability audit)
    history = HistoricalRecords()

    objects = VariantQuerySet.as_manager()

    class Meta:
        verbose_name = _("Variante")
        verbose_name_plural = _("Variantes")
        ordering = ["product_sku", "id"]
        indexes = [
            models.Index(fields=["product_sku", "is_available"], name="variantman_variant_avail_idx"),
        ]

    def __str__(self):
        return f"{self.product_sku} / {self.sku or self.pk}"

    @property
    def price(self) -> Decimal | None:
        """Price in currency units."""
        if self.price_q is None:
            return None
        return Decimal(self.price_q) / 100
