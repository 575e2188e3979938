"""
Variantman configuration.

Usage in settings.py:
    VARIANTMAN = {
        "STORAGE_BACKEND": "variantman.adapters.orm.OrmVariantStorage",
        "MATRIX_GROUP_COUNT": 2,
        "MAX_COMBINATION_SIZE": None,  # e.g. 2 to match the editor
        "HISTORY_LIMIT": 100,  # None keeps every session event
    }
"""

import threading
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string


@dataclass
class VariantmanSettings:
    """Variantman configuration settings."""

    STORAGE_BACKEND: str = "variantman.adapters.orm.OrmVariantStorage"
    MATRIX_GROUP_COUNT: int = 2
    MAX_COMBINATION_SIZE: int | None = None
    HISTORY_LIMIT: int | None = 100

    def __post_init__(self):
        if self.MATRIX_GROUP_COUNT < 1:
            raise ImproperlyConfigured("VARIANTMAN['MATRIX_GROUP_COUNT'] must be at least 1")
        for name in ("MAX_COMBINATION_SIZE", "HISTORY_LIMIT"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ImproperlyConfigured(f"VARIANTMAN[{name!r}] must be None or at least 1")


def get_variantman_settings() -> VariantmanSettings:
    """Build settings from the VARIANTMAN dict; unknown keys are a configuration error."""
    user_settings: dict[str, Any] = getattr(settings, "VARIANTMAN", {})
    try:
        return VariantmanSettings(**user_settings)
    except TypeError as exc:
        raise ImproperlyConfigured(f"Invalid VARIANTMAN setting: {exc}") from exc


class _LazySettings:
    """Attribute access reads the current Django settings (override_settings friendly)."""

    def __getattr__(self, name):
        return getattr(get_variantman_settings(), name)


variantman_settings = _LazySettings()


# Storage backend, built once from STORAGE_BACKEND
_storage_lock = threading.Lock()
_storage_instance = None


def get_storage_backend():
    """
    Return the shared VariantStorage instance.

    Tests may assign `_storage_instance` directly to inject a backend.
    """
    global _storage_instance
    backend = _storage_instance
    if backend is None:
        with _storage_lock:
            if _storage_instance is None:
                _storage_instance = import_string(variantman_settings.STORAGE_BACKEND)()
            backend = _storage_instance
    return backend


def reset_storage_backend():
    """Drop the shared backend so the next call rebuilds it."""
    global _storage_instance
    _storage_instance = None
