"""
Initial variantman schema:
- OptionGroup / OptionValue (ordered options per product)
- Variant (+ history)
- DisabledCombination
"""

import uuid

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="OptionGroup",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID")),
                ("product_sku", models.CharField(db_index=True, max_length=100, verbose_name="SKU do produto")),
                ("name", models.CharField(max_length=100, verbose_name="nome")),
                ("sort_order", models.IntegerField(default=0, verbose_name="ordem")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
            ],
            options={
                "verbose_name": "Grupo de Opções",
                "verbose_name_plural": "Grupos de Opções",
                "ordering": ["product_sku", "sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="OptionValue",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("label", models.CharField(max_length=100, verbose_name="valor")),
                ("sort_order", models.IntegerField(default=0, verbose_name="ordem")),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="values",
                        to="variantman.optiongroup",
                        verbose_name="grupo",
                    ),
                ),
            ],
            options={
                "verbose_name": "Valor de Opção",
                "verbose_name_plural": "Valores de Opção",
                "ordering": ["group", "sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Variant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID")),
                ("product_sku", models.CharField(db_index=True, max_length=100, verbose_name="SKU do produto")),
                ("sku", models.CharField(blank=True, max_length=100, verbose_name="SKU")),
                (
                    "price_q",
                    models.BigIntegerField(
                        blank=True,
                        help_text="Preço em centavos. Vazio = preço base do produto",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="preço",
                    ),
                ),
                ("image_url", models.URLField(blank=True, max_length=500, verbose_name="imagem")),
                (
                    "is_available",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Disponível para venda (Não = não pode ser selecionada)",
                        verbose_name="disponível",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "values",
                    models.ManyToManyField(
                        related_name="variants",
                        to="variantman.optionvalue",
                        verbose_name="valores",
                    ),
                ),
            ],
            options={
                "verbose_name": "Variante",
                "verbose_name_plural": "Variantes",
                "ordering": ["product_sku", "id"],
            },
        ),
        migrations.CreateModel(
            name="DisabledCombination",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_sku", models.CharField(db_index=True, max_length=100, verbose_name="SKU do produto")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                (
                    "values",
                    models.ManyToManyField(
                        related_name="disabled_combinations",
                        to="variantman.optionvalue",
                        verbose_name="valores",
                    ),
                ),
            ],
            options={
                "verbose_name": "Combinação Desativada",
                "verbose_name_plural": "Combinações Desativadas",
                "ordering": ["product_sku", "id"],
            },
        ),
        migrations.CreateModel(
            name="HistoricalVariant",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("uuid", models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")),
                ("product_sku", models.CharField(db_index=True, max_length=100, verbose_name="SKU do produto")),
                ("sku", models.CharField(blank=True, max_length=100, verbose_name="SKU")),
                (
                    "price_q",
                    models.BigIntegerField(
                        blank=True,
                        help_text="Preço em centavos. Vazio = preço base do produto",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="preço",
                    ),
                ),
                ("image_url", models.URLField(blank=True, max_length=500, verbose_name="imagem")),
                (
                    "is_available",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Disponível para venda (Não = não pode ser selecionada)",
                        verbose_name="disponível",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="atualizado em")),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Variante",
                "verbose_name_plural": "historical Variantes",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.AddConstraint(
            model_name="optiongroup",
            constraint=models.UniqueConstraint(
                fields=("product_sku", "name"),
                name="unique_product_option_group",
            ),
        ),
        migrations.AddConstraint(
            model_name="optionvalue",
            constraint=models.UniqueConstraint(
                fields=("group", "label"),
                name="unique_group_value_label",
            ),
        ),
        migrations.AddIndex(
            model_name="variant",
            index=models.Index(fields=["product_sku", "is_available"], name="variantman_variant_avail_idx"),
        ),
    ]
