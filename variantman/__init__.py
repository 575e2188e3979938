"""
Django Variantman - Product Variant Availability.

Usage:
    from variantman import VariantService, VariantError

    session = VariantService.open_session("CAMISETA")
    session.choose_value(size_id, small_id)
    variant = session.matched_variant
"""


def __getattr__(name):
    if name == "VariantService":
        from variantman.service import VariantService

        return VariantService
    elif name == "VariantSession":
        from variantman.session import VariantSession

        return VariantSession
    elif name == "VariantError":
        from variantman.exceptions import VariantError

        return VariantError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["VariantService", "VariantSession", "VariantError"]
__version__ = "0.1.0"
