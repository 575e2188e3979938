"""Variant data types shared by the resolver, sessions and storage backends."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class OptionValue:
    """One concrete choice within an option group (e.g. "Large")."""

    id: str
    group_id: str
    label: str


@dataclass(frozen=True)
class OptionGroup:
    """A named axis of variation (e.g. "Size").

    Lower `order` is selected first: the first group is never narrowed by
    other groups, later groups are filtered by earlier choices.
    """

    id: str
    name: str
    order: int = 0
    values: tuple[OptionValue, ...] = ()

    def value(self, value_id: str) -> OptionValue | None:
        for value in self.values:
            if value.id == value_id:
                return value
        return None

    @property
    def value_ids(self) -> list[str]:
        return [value.id for value in self.values]


@dataclass(frozen=True)
class Variant:
    """Sellable combination of exactly one value per option group.

    Unavailable variants behave as if they did not exist. `value_ids`
    carries no group ids, so value ids must be unique within a product
    (see VariantModel.shared_value_ids).
    """

    id: str
    value_ids: frozenset[str]
    price_q: int | None = None
    image_url: str | None = None
    is_available: bool = True
    sku: str | None = None


@dataclass(frozen=True)
class DisabledCombination:
    """
    Denylist entry: a set of (group_id, value_id) pairs that may never be
    selected together.

    One pair is "this value is off", two pairs is "this pair is off".
    Equality is exact pair-set equality.
    """

    pairs: frozenset[tuple[str, str]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "DisabledCombination":
        return cls(pairs=frozenset(mapping.items()))

    def as_dict(self) -> dict[str, str]:
        return dict(sorted(self.pairs))

    @property
    def group_ids(self) -> frozenset[str]:
        return frozenset(group_id for group_id, _ in self.pairs)

    def matches(self, context: Mapping[str, str]) -> bool:
        """True if every pair of this combination is present in `context`."""
        if not self.pairs:
            return False
        return all(context.get(group_id) == value_id for group_id, value_id in self.pairs)

    def references_group(self, group_id: str) -> bool:
        return group_id in self.group_ids

    def references_value(self, group_id: str, value_id: str) -> bool:
        return (group_id, value_id) in self.pairs

    def __len__(self) -> int:
        return len(self.pairs)


@dataclass(frozen=True)
class VariantModel:
    """In-memory model of one product's options, variants and disabled combinations."""

    groups: tuple[OptionGroup, ...] = ()
    variants: tuple[Variant, ...] = ()
    disabled: tuple[DisabledCombination, ...] = ()

    @classmethod
    def build(
        cls,
        groups: Iterable[OptionGroup] = (),
        variants: Iterable[Variant] = (),
        disabled: Iterable[DisabledCombination] = (),
    ) -> "VariantModel":
        return cls(groups=tuple(groups), variants=tuple(variants), disabled=tuple(disabled))

    @property
    def ordered_groups(self) -> list[OptionGroup]:
        """Groups in selection order (`order`, then catalog position)."""
        return sorted(self.groups, key=lambda group: group.order)

    def group(self, group_id: str) -> OptionGroup | None:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def index_of(self, group_id: str) -> int:
        for index, group in enumerate(self.ordered_groups):
            if group.id == group_id:
                return index
        return -1

    def shared_value_ids(self) -> dict[str, list[str]]:
        """Value ids used by more than one group, mapped to those group ids."""
        owners: dict[str, list[str]] = {}
        for group in self.groups:
            for value in group.values:
                owners.setdefault(value.id, []).append(group.id)
        return {value_id: group_ids for value_id, group_ids in owners.items() if len(group_ids) > 1}

    def with_changes(self, **changes) -> "VariantModel":
        return replace(self, **changes)


@dataclass(frozen=True)
class Snapshot:
    """Result of a structural edit, handed to the host for persistence."""

    groups: tuple[OptionGroup, ...]
    disabled: tuple[DisabledCombination, ...]
    selection: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PriceRange:
    """Price range in cents over a product's variants."""

    min_q: int | None
    max_q: int | None
    has_range: bool = False
