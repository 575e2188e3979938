from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class VariantmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "variantman"
    verbose_name = _("Variantes de Produtos")

    def ready(self):
        from variantman import handlers  # noqa: F401
