"""Pytest fixtures for Variantman tests."""

import pytest

from variantman.adapters.memory import InMemoryVariantStorage
from variantman.conf import reset_storage_backend
from variantman.protocols import (
    DisabledCombination,
    OptionGroup,
    OptionValue,
    Variant,
    VariantModel,
)


def make_group(group_id: str, name: str, labels: list[str], order: int = 0) -> OptionGroup:
    """Build an OptionGroup whose value ids are '<group_id>-<label>'."""
    return OptionGroup(
        id=group_id,
        name=name,
        order=order,
        values=tuple(
            OptionValue(id=f"{group_id}-{label.lower()}", group_id=group_id, label=label)
            for label in labels
        ),
    )


def make_variant(variant_id: str, *value_ids: str, price_q=None, is_available=True, image_url=None) -> Variant:
    return Variant(
        id=variant_id,
        value_ids=frozenset(value_ids),
        price_q=price_q,
        image_url=image_url,
        is_available=is_available,
    )


def off(**pairs) -> DisabledCombination:
    """Disabled combination from keyword pairs: off(size="size-s", color="color-red")."""
    return DisabledCombination.from_mapping(pairs)


@pytest.fixture(autouse=True)
def _reset_backend():
    reset_storage_backend()
    yield
    reset_storage_backend()


# ═══════════════════════════════════════════════════════════════════
# In-memory models
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def size():
    return make_group("size", "Size", ["S", "M", "L"], order=0)


@pytest.fixture
def color():
    return make_group("color", "Color", ["Red", "Blue"], order=1)


@pytest.fixture
def model(size, color):
    """Size x Color, no variants, nothing disabled."""
    return VariantModel.build(groups=[size, color])


@pytest.fixture
def variants():
    """Every Size x Color combination except L/Blue, M/Red unavailable."""
    return [
        make_variant("v-s-red", "size-s", "color-red", price_q=1000, image_url="https://img/s-red.jpg"),
        make_variant("v-s-blue", "size-s", "color-blue", price_q=1000),
        make_variant("v-m-red", "size-m", "color-red", price_q=1200, is_available=False),
        make_variant("v-m-blue", "size-m", "color-blue", price_q=1200),
        make_variant("v-l-red", "size-l", "color-red", price_q=1500),
    ]


@pytest.fixture
def stocked_model(size, color, variants):
    return VariantModel.build(groups=[size, color], variants=variants)


@pytest.fixture
def memory_storage(size, color, variants):
    storage = InMemoryVariantStorage()
    storage.add_product(
        "CAMISETA",
        groups=[size, color],
        variants=variants,
        disabled=[off(size="size-s", color="color-red")],
    )
    return storage


# ═══════════════════════════════════════════════════════════════════
# ORM data
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def orm_product(db):
    """
    CAMISETA: Tamanho (P, M) x Cor (Vermelho, Azul).

    Returns dict with groups, values and variants by short name.
    """
    from variantman.models import OptionGroup as Group
    from variantman.models import OptionValue as Value
    from variantman.models import Variant as VariantRow

    tamanho = Group.objects.create(product_sku="CAMISETA", name="Tamanho", sort_order=0)
    cor = Group.objects.create(product_sku="CAMISETA", name="Cor", sort_order=1)

    p = Value.objects.create(group=tamanho, label="P", sort_order=0)
    m = Value.objects.create(group=tamanho, label="M", sort_order=1)
    vermelho = Value.objects.create(group=cor, label="Vermelho", sort_order=0)
    azul = Value.objects.create(group=cor, label="Azul", sort_order=1)

    p_vermelho = VariantRow.objects.create(product_sku="CAMISETA", sku="CAM-P-VRM", price_q=4990)
    p_vermelho.values.set([p, vermelho])
    m_azul = VariantRow.objects.create(product_sku="CAMISETA", sku="CAM-M-AZL", price_q=5490)
    m_azul.values.set([m, azul])

    return {
        "tamanho": tamanho,
        "cor": cor,
        "p": p,
        "m": m,
        "vermelho": vermelho,
        "azul": azul,
        "p_vermelho": p_vermelho,
        "m_azul": m_azul,
    }
