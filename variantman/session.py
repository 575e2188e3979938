"""
Variant selection session.

Owns the selection of one editing/shopping session. All transitions go
through the entry points below, which delegate to `variantman.resolver`
and fire `variantman.signals`:

    session = VariantService.open_session("CAMISETA")
    session.get_selectable_values(size_id)
    session.choose_value(size_id, small_id)
    session.matched_variant
    session.toggle_combination({size_id: small_id, color_id: red_id})
"""

import logging
from collections import deque
from collections.abc import Mapping

from variantman import resolver
from variantman.conf import variantman_settings
from variantman.exceptions import VariantError
from variantman.protocols import (
    DisabledCombination,
    OptionValue,
    PriceRange,
    Snapshot,
    Variant,
    VariantModel,
)

logger = logging.getLogger(__name__)


class VariantSession:
    """
    Explicit state container for a selection over a VariantModel.

    The stored selection is always valid: every entry is selectable given
    the entries before it. `selection` returns a copy; there is no setter.
    """

    def __init__(
        self,
        model: VariantModel,
        product_sku: str | None = None,
        selection: Mapping[str, str] | None = None,
    ) -> None:
        self.product_sku = product_sku
        self._model = model
        if selection is None:
            self._selection = resolver.initial_selection(model)
        else:
            self._selection = resolver.repair_selection(model, selection)
        self._variant = resolver.match_variant(model, self._selection)
        self._history: deque[tuple[str, dict[str, str]]] = deque(
            [("init", dict(self._selection))],
            maxlen=variantman_settings.HISTORY_LIMIT,
        )
        # (combination, disabled set before, selection before) of the last toggle
        self._last_toggle: tuple[DisabledCombination, frozenset, dict[str, str]] | None = None
        self._check_integrity()

    def __repr__(self):
        return f"<VariantSession {self.product_sku or '-'} {self._selection}>"

    # ======================================================================
    # STATE
    # ======================================================================

    @property
    def model(self) -> VariantModel:
        return self._model

    @property
    def selection(self) -> dict[str, str]:
        return dict(self._selection)

    @property
    def snapshot(self) -> Snapshot:
        return Snapshot(
            groups=self._model.groups,
            disabled=self._model.disabled,
            selection=dict(self._selection),
        )

    @property
    def history(self) -> list[tuple[str, dict[str, str]]]:
        """Audit trail of (event, selection) pairs, oldest first."""
        return [(event, dict(selection)) for event, selection in self._history]

    @property
    def is_complete(self) -> bool:
        return bool(self._model.groups) and len(self._selection) == len(self._model.groups)

    # ======================================================================
    # SHOPPER API
    # ======================================================================

    def get_selectable_values(self, group_id: str) -> list[OptionValue]:
        return resolver.available_values(self._model, self._selection, group_id)

    def is_value_available(self, group_id: str, value_id: str) -> bool:
        return resolver.is_value_available(self._model, self._selection, group_id, value_id)

    def choose_value(self, group_id: str, value_id: str) -> dict[str, str]:
        """
        Choose a value and cascade to later groups.

        Always sends `selection_changed`; sends `variant_changed` if the
        match changed.

        Raises:
            VariantError: unknown group/value, or value not selectable
        """
        selection = resolver.choose_value(self._model, self._selection, group_id, value_id)
        self._commit(self._model, selection, "choose_value", force_notify=True)
        return self.selection

    @property
    def matched_variant(self) -> Variant | None:
        return self._variant

    def get_matched_variant(self) -> Variant | None:
        return self._variant

    def price_q(self, default: int | None = None) -> int | None:
        """Price of the matched variant, `default` when none or unpriced."""
        if self._variant is None or self._variant.price_q is None:
            return default
        return self._variant.price_q

    def image_url(self, fallback: str | None = None) -> str | None:
        """Image of the matched variant, else `fallback` (e.g. product cover)."""
        if self._variant is not None and self._variant.image_url:
            return self._variant.image_url
        return fallback

    def price_range(self, base_price_q: int | None = None, only_available: bool = True) -> PriceRange:
        return resolver.price_range(self._model.variants, base_price_q, only_available)

    # ======================================================================
    # EDITOR API
    # ======================================================================

    def remove_group(self, group_id: str) -> Snapshot:
        model, selection = resolver.remove_group(self._model, self._selection, group_id)
        self._commit(model, selection, "remove_group")
        return self.snapshot

    def remove_value(self, group_id: str, value_id: str) -> Snapshot:
        model, selection = resolver.remove_value(self._model, self._selection, group_id, value_id)
        self._commit(model, selection, "remove_value")
        return self.snapshot

    def toggle_combination(self, combination: DisabledCombination | Mapping[str, str]) -> Snapshot:
        """
        Disable/enable a combination.

        Toggling the same combination twice in a row restores both the
        disabled set and the selection held before the first toggle, even
        when the first toggle forced a repair.

        Raises:
            VariantError: malformed combination, or larger than MAX_COMBINATION_SIZE
        """
        combination = resolver.coerce_combination(self._model, combination)
        max_size = variantman_settings.MAX_COMBINATION_SIZE
        if max_size is not None and len(combination) > max_size:
            raise VariantError(
                "INVALID_COMBINATION",
                message=f"Combinations are limited to {max_size} option(s)",
                combination=combination.as_dict(),
            )
        disabled_before = frozenset(self._model.disabled)
        selection_before = dict(self._selection)
        model, selection = resolver.toggle_combination(self._model, self._selection, combination)

        undo = self._last_toggle
        if undo is not None and undo[0] == combination and frozenset(model.disabled) == undo[1]:
            # Back to the previous disabled set: the earlier selection is valid again
            selection = resolver.repair_selection(model, undo[2])
            self._commit(model, selection, "toggle_combination")
        else:
            self._commit(model, selection, "toggle_combination")
            self._last_toggle = (combination, disabled_before, selection_before)
        return self.snapshot

    def toggle_value(self, group_id: str, value_id: str) -> Snapshot:
        return self.toggle_combination({group_id: value_id})

    def is_combination_disabled(self, combination: DisabledCombination | Mapping[str, str]) -> bool:
        return resolver.is_combination_disabled(self._model, combination)

    def combination_matrix(self) -> list[tuple[DisabledCombination, bool]]:
        """
        Every combination of the product's groups with its disabled flag.

        Only offered when the product has exactly MATRIX_GROUP_COUNT
        groups; returns [] otherwise.
        """
        groups = self._model.ordered_groups
        if len(groups) != variantman_settings.MATRIX_GROUP_COUNT:
            return []
        if len(groups) == 2:
            combinations = resolver.all_combinations(*groups)
        else:
            combinations = [
                DisabledCombination.from_mapping(c)
                for c in resolver.enumerate_combinations(groups)
            ]
        return [(c, c in self._model.disabled) for c in combinations]

    def missing_combinations(self) -> list[dict[str, str]]:
        return resolver.missing_combinations(self._model)

    # ======================================================================
    # INTERNAL
    # ======================================================================

    def _commit(
        self,
        model: VariantModel,
        selection: dict[str, str],
        event: str,
        force_notify: bool = False,
    ) -> None:
        from variantman.signals import selection_changed, variant_changed

        previous_selection = self._selection
        previous_variant = self._variant

        self._model = model
        self._selection = selection
        self._variant = resolver.match_variant(model, selection)
        self._history.append((event, dict(selection)))
        self._last_toggle = None
        logger.debug("%s: %s -> %s", event, previous_selection, selection)

        if force_notify or selection != previous_selection:
            selection_changed.send(
                sender=self.__class__,
                session=self,
                product_sku=self.product_sku,
                selection=dict(selection),
                previous=dict(previous_selection),
            )
        if self._variant != previous_variant:
            variant_changed.send(
                sender=self.__class__,
                session=self,
                product_sku=self.product_sku,
                variant=self._variant,
                previous=previous_variant,
            )

    def _check_integrity(self) -> None:
        from variantman.signals import integrity_warning

        for duplicates in resolver.duplicate_variants(self._model.variants):
            variant_ids = [variant.id for variant in duplicates]
            logger.warning(
                "Product %s has variants sharing one combination: %s",
                self.product_sku,
                variant_ids,
            )
            integrity_warning.send(
                sender=self.__class__,
                product_sku=self.product_sku,
                code="DUPLICATE_VARIANT",
                variant_ids=variant_ids,
            )

        for value_id, group_ids in self._model.shared_value_ids().items():
            logger.warning(
                "Product %s uses value id %s in groups %s; variant matching is ambiguous",
                self.product_sku,
                value_id,
                group_ids,
            )
            integrity_warning.send(
                sender=self.__class__,
                product_sku=self.product_sku,
                code="SHARED_VALUE_ID",
                variant_ids=[],
                value_id=value_id,
                group_ids=group_ids,
            )
