"""
Variant availability resolver.

Pure functions over a VariantModel and a selection (dict group_id -> value_id).
Inputs are never mutated; every mutation returns new objects.

AVAILABILITY:
    is_value_available(model, selection, group_id, value_id)
    available_values(model, selection, group_id)

SELECTION:
    initial_selection(model)
    choose_value(model, selection, group_id, value_id)
    repair_selection(model, selection, start=0)

MATCHING:
    match_variant(model, selection)
    matching_variants(model, selection)
    duplicate_variants(variants)

STRUCTURE (editor):
    remove_group(model, selection, group_id)
    remove_value(model, selection, group_id, value_id)
    toggle_combination(model, selection, combination)
    toggle_value(model, selection, group_id, value_id)

ENUMERATION:
    all_combinations(group_a, group_b)
    enumerate_combinations(groups)
    missing_combinations(model)
    price_range(variants, base_price_q)
"""

import itertools
import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace

from variantman.exceptions import VariantError
from variantman.protocols import (
    DisabledCombination,
    OptionGroup,
    OptionValue,
    PriceRange,
    Variant,
    VariantModel,
)

logger = logging.getLogger(__name__)

Selection = dict[str, str]


# ======================================================================
# AVAILABILITY
# ======================================================================


def is_value_available(
    model: VariantModel,
    selection: Mapping[str, str],
    group_id: str,
    value_id: str,
) -> bool:
    """
    Check if a value can be selected for a group.

    Only groups before `group_id` (in selection order) constrain it:
    the candidate plus those upstream choices must not contain any
    disabled combination, and (except for the first group) some
    available variant must carry all of them. A catalog without any
    available variant does not narrow anything.
    """
    ordered = model.ordered_groups
    index = model.index_of(group_id)
    if index < 0 or ordered[index].value(value_id) is None:
        return False

    context = {g.id: selection[g.id] for g in ordered[:index] if g.id in selection}
    context[group_id] = value_id

    if any(combination.matches(context) for combination in model.disabled):
        return False

    stocked = [variant for variant in model.variants if variant.is_available]
    if index == 0 or not stocked:
        return True

    wanted = set(context.values())
    return any(wanted <= variant.value_ids for variant in stocked)


def available_values(
    model: VariantModel,
    selection: Mapping[str, str],
    group_id: str,
) -> list[OptionValue]:
    """Selectable values of a group, in catalog order."""
    group = _require_group(model, group_id)
    return [
        value
        for value in group.values
        if is_value_available(model, selection, group_id, value.id)
    ]


# ======================================================================
# SELECTION
# ======================================================================


def repair_selection(
    model: VariantModel,
    selection: Mapping[str, str],
    start: int = 0,
) -> Selection:
    """
    Left-to-right repair pass.

    Entries for unknown groups or values are dropped. From position
    `start` on, each group keeps its value if still available, otherwise
    takes the first selectable value, otherwise loses its entry. Each
    group is visited once.
    """
    ordered = model.ordered_groups
    known = {group.id: group for group in ordered}
    repaired = {
        group_id: value_id
        for group_id, value_id in selection.items()
        if group_id in known and known[group_id].value(value_id) is not None
    }

    for group in ordered[max(start, 0):]:
        current = repaired.get(group.id)
        if current is not None and is_value_available(model, repaired, group.id, current):
            continue
        choices = available_values(model, repaired, group.id)
        if choices:
            repaired[group.id] = choices[0].id
        else:
            repaired.pop(group.id, None)

    return repaired


def initial_selection(model: VariantModel) -> Selection:
    """Default selection: first selectable value of every group, in order."""
    return repair_selection(model, {})


def choose_value(
    model: VariantModel,
    selection: Mapping[str, str],
    group_id: str,
    value_id: str,
) -> Selection:
    """
    Select a value and cascade to the groups after it.

    Raises:
        VariantError: unknown group/value, or value not selectable
    """
    group = _require_group(model, group_id)
    if group.value(value_id) is None:
        raise VariantError("VALUE_NOT_FOUND", group_id=group_id, value_id=value_id)
    if not is_value_available(model, selection, group_id, value_id):
        raise VariantError("VALUE_UNAVAILABLE", group_id=group_id, value_id=value_id)

    updated = dict(selection)
    updated[group_id] = value_id
    return repair_selection(model, updated, start=model.index_of(group_id) + 1)


# ======================================================================
# MATCHING
# ======================================================================


def matching_variants(model: VariantModel, selection: Mapping[str, str]) -> list[Variant]:
    """All available variants whose values equal a complete selection."""
    if not model.groups or set(selection) != {group.id for group in model.groups}:
        return []
    wanted = frozenset(selection.values())
    return [
        variant
        for variant in model.variants
        if variant.is_available and variant.value_ids == wanted
    ]


def match_variant(model: VariantModel, selection: Mapping[str, str]) -> Variant | None:
    """
    Variant for a complete selection, or None.

    Duplicated combinations are upstream data corruption: the first
    variant in storage order wins and a warning is logged.
    """
    matches = matching_variants(model, selection)
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "Variants %s share the same combination %s; using %s",
            [variant.id for variant in matches],
            dict(selection),
            matches[0].id,
        )
    return matches[0]


def duplicate_variants(variants: Iterable[Variant]) -> list[list[Variant]]:
    """Groups of variants sharing identical value ids, in storage order."""
    seen: dict[frozenset[str], list[Variant]] = {}
    for variant in variants:
        seen.setdefault(variant.value_ids, []).append(variant)
    return [group for group in seen.values() if len(group) > 1]


# ======================================================================
# STRUCTURE
# ======================================================================


def remove_group(
    model: VariantModel,
    selection: Mapping[str, str],
    group_id: str,
) -> tuple[VariantModel, Selection]:
    """Remove a group, its values and every combination referencing it."""
    _require_group(model, group_id)

    groups = tuple(group for group in model.groups if group.id != group_id)
    disabled = _prune_disabled(
        groups,
        (c for c in model.disabled if not c.references_group(group_id)),
    )
    new_model = model.with_changes(groups=groups, disabled=disabled)

    remaining = {g: v for g, v in selection.items() if g != group_id}
    return new_model, repair_selection(new_model, remaining)


def remove_value(
    model: VariantModel,
    selection: Mapping[str, str],
    group_id: str,
    value_id: str,
) -> tuple[VariantModel, Selection]:
    """Remove a value and every combination containing it."""
    group = _require_group(model, group_id)
    if group.value(value_id) is None:
        raise VariantError("VALUE_NOT_FOUND", group_id=group_id, value_id=value_id)

    trimmed = replace(group, values=tuple(v for v in group.values if v.id != value_id))
    groups = tuple(trimmed if g.id == group_id else g for g in model.groups)
    disabled = _prune_disabled(
        groups,
        (c for c in model.disabled if not c.references_value(group_id, value_id)),
    )
    new_model = model.with_changes(groups=groups, disabled=disabled)

    if selection.get(group_id) != value_id:
        return new_model, dict(selection)

    remaining = {g: v for g, v in selection.items() if g != group_id}
    return new_model, repair_selection(new_model, remaining, start=new_model.index_of(group_id))


def toggle_combination(
    model: VariantModel,
    selection: Mapping[str, str],
    combination: DisabledCombination | Mapping[str, str],
) -> tuple[VariantModel, Selection]:
    """
    Disable a combination if enabled, enable it if disabled.

    The selection is re-validated from the first group: a toggle can
    both invalidate and re-enable entries.
    """
    combination = coerce_combination(model, combination)

    if combination in model.disabled:
        disabled = tuple(c for c in model.disabled if c != combination)
    else:
        disabled = model.disabled + (combination,)

    new_model = model.with_changes(disabled=_prune_disabled(model.groups, disabled))
    return new_model, repair_selection(new_model, selection)


def toggle_value(
    model: VariantModel,
    selection: Mapping[str, str],
    group_id: str,
    value_id: str,
) -> tuple[VariantModel, Selection]:
    """Disable/enable a single value on its own."""
    return toggle_combination(model, selection, {group_id: value_id})


def is_combination_disabled(
    model: VariantModel,
    combination: DisabledCombination | Mapping[str, str],
) -> bool:
    if not isinstance(combination, DisabledCombination):
        combination = DisabledCombination.from_mapping(combination)
    return combination in model.disabled


def coerce_combination(
    model: VariantModel,
    combination: DisabledCombination | Mapping[str, str],
) -> DisabledCombination:
    """
    Validate a combination against the model.

    Raises:
        VariantError: empty, unknown group/value, or two values for one group
    """
    if not isinstance(combination, DisabledCombination):
        combination = DisabledCombination.from_mapping(combination)

    if not combination.pairs or len(combination.group_ids) != len(combination.pairs):
        raise VariantError("INVALID_COMBINATION", combination=sorted(combination.pairs))

    for group_id, value_id in combination.pairs:
        group = _require_group(model, group_id)
        if group.value(value_id) is None:
            raise VariantError("VALUE_NOT_FOUND", group_id=group_id, value_id=value_id)

    return combination


# ======================================================================
# ENUMERATION
# ======================================================================


def all_combinations(group_a: OptionGroup, group_b: OptionGroup) -> list[DisabledCombination]:
    """Every (a, b) pair, `group_a` values outer, `group_b` values inner."""
    return [
        DisabledCombination.from_mapping({group_a.id: a.id, group_b.id: b.id})
        for a in group_a.values
        for b in group_b.values
    ]


def enumerate_combinations(groups: Iterable[OptionGroup]) -> list[Selection]:
    """Every complete selection over `groups`. Empty if any group has no values."""
    ordered = sorted(groups, key=lambda group: group.order)
    if not ordered or any(not group.values for group in ordered):
        return []
    group_ids = [group.id for group in ordered]
    return [
        dict(zip(group_ids, value_ids))
        for value_ids in itertools.product(*(group.value_ids for group in ordered))
    ]


def missing_combinations(model: VariantModel) -> list[Selection]:
    """Complete selections that no variant (available or not) materializes."""
    existing = {variant.value_ids for variant in model.variants}
    return [
        combination
        for combination in enumerate_combinations(model.groups)
        if frozenset(combination.values()) not in existing
    ]


def price_range(
    variants: Iterable[Variant],
    base_price_q: int | None = None,
    only_available: bool = True,
) -> PriceRange:
    """Min/max price in cents. Variants without a price fall back to `base_price_q`."""
    prices = [
        variant.price_q if variant.price_q is not None else base_price_q
        for variant in variants
        if variant.is_available or not only_available
    ]
    prices = [price for price in prices if price is not None]
    if not prices:
        return PriceRange(min_q=base_price_q, max_q=base_price_q, has_range=False)
    low, high = min(prices), max(prices)
    return PriceRange(min_q=low, max_q=high, has_range=low != high)


# ======================================================================
# INTERNAL
# ======================================================================


def _require_group(model: VariantModel, group_id: str) -> OptionGroup:
    group = model.group(group_id)
    if group is None:
        raise VariantError("GROUP_NOT_FOUND", group_id=group_id)
    return group


def _prune_disabled(
    groups: Iterable[OptionGroup],
    disabled: Iterable[DisabledCombination],
) -> tuple[DisabledCombination, ...]:
    """Drop combinations pointing at groups or values that no longer exist."""
    known = {(group.id, value.id) for group in groups for value in group.values}
    kept = []
    for combination in disabled:
        if combination.pairs <= known:
            kept.append(combination)
        else:
            logger.debug("Dropping dangling combination %s", combination.as_dict())
    return tuple(kept)
