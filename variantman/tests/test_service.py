"""Tests for VariantService, storage backends and configuration."""

import pytest
from django.core.exceptions import ImproperlyConfigured

from variantman import conf
from variantman.adapters.memory import InMemoryVariantStorage
from variantman.adapters.orm import OrmVariantStorage
from variantman.exceptions import VariantError
from variantman.models import DisabledCombination, OptionGroup, OptionValue, Variant
from variantman.protocols import Snapshot, VariantStorage
from variantman.service import VariantService

pytestmark = pytest.mark.django_db


def ids(*objects):
    return {name: str(obj.pk) for name, obj in objects}


# ═══════════════════════════════════════════════════════════════════
# ORM storage
# ═══════════════════════════════════════════════════════════════════


class TestOrmLoad:
    """Tests for VariantService.load() with OrmVariantStorage."""

    def test_groups_and_values(self, orm_product):
        model = VariantService.load("CAMISETA")

        assert [g.name for g in model.groups] == ["Tamanho", "Cor"]
        assert [g.order for g in model.groups] == [0, 1]
        assert [v.label for v in model.groups[0].values] == ["P", "M"]
        assert model.groups[1].values[0].group_id == str(orm_product["cor"].pk)

    def test_variants(self, orm_product):
        model = VariantService.load("CAMISETA")
        first = model.variants[0]

        assert first.id == str(orm_product["p_vermelho"].pk)
        assert first.value_ids == frozenset({str(orm_product["p"].pk), str(orm_product["vermelho"].pk)})
        assert first.price_q == 4990
        assert first.sku == "CAM-P-VRM"
        assert first.image_url is None

    def test_disabled_combinations(self, orm_product):
        stored = DisabledCombination.objects.create(product_sku="CAMISETA")
        stored.values.set([orm_product["p"], orm_product["azul"]])

        (combination,) = VariantService.load("CAMISETA").disabled

        assert combination.pairs == frozenset(
            {
                (str(orm_product["tamanho"].pk), str(orm_product["p"].pk)),
                (str(orm_product["cor"].pk), str(orm_product["azul"].pk)),
            }
        )

    def test_empty_combination_skipped(self, orm_product, caplog):
        DisabledCombination.objects.create(product_sku="CAMISETA")
        assert VariantService.load("CAMISETA").disabled == ()
        assert "Skipping empty disabled combination" in caplog.text

    def test_unknown_product(self, db):
        model = VariantService.load("NOPE")
        assert model.groups == ()
        assert model.variants == ()


class TestOpenSession:
    """Tests for VariantService.open_session()."""

    def test_shopper_flow(self, orm_product):
        tamanho = str(orm_product["tamanho"].pk)
        cor = str(orm_product["cor"].pk)

        session = VariantService.open_session("CAMISETA")
        assert session.product_sku == "CAMISETA"
        assert session.selection == {tamanho: str(orm_product["p"].pk), cor: str(orm_product["vermelho"].pk)}
        assert session.matched_variant.sku == "CAM-P-VRM"

        session.choose_value(tamanho, str(orm_product["m"].pk))
        assert session.selection[cor] == str(orm_product["azul"].pk)
        assert session.matched_variant.sku == "CAM-M-AZL"
        assert session.price_q() == 5490

    def test_restore_selection(self, orm_product):
        tamanho = str(orm_product["tamanho"].pk)
        session = VariantService.open_session("CAMISETA", selection={tamanho: str(orm_product["m"].pk)})
        assert session.matched_variant.sku == "CAM-M-AZL"

    def test_memory_storage_argument(self, memory_storage):
        session = VariantService.open_session("CAMISETA", storage=memory_storage)
        assert session.selection == {"size": "size-s", "color": "color-blue"}
        assert session.matched_variant.id == "v-s-blue"

    def test_configured_instance(self, memory_storage):
        conf._storage_instance = memory_storage
        session = VariantService.open_session("CAMISETA")
        assert session.matched_variant.id == "v-s-blue"


# ═══════════════════════════════════════════════════════════════════
# Snapshots
# ═══════════════════════════════════════════════════════════════════


class TestSaveSnapshot:
    """Tests for VariantService.save_snapshot()."""

    def test_toggle_persists(self, orm_product):
        pair = ids(("tamanho", orm_product["tamanho"]), ("cor", orm_product["cor"]))
        combination = {pair["tamanho"]: str(orm_product["p"].pk), pair["cor"]: str(orm_product["azul"].pk)}

        session = VariantService.open_session("CAMISETA")
        VariantService.save_snapshot("CAMISETA", session.toggle_combination(combination))

        stored = DisabledCombination.objects.get(product_sku="CAMISETA")
        assert set(stored.values.all()) == {orm_product["p"], orm_product["azul"]}
        assert VariantService.open_session("CAMISETA").is_combination_disabled(combination)

        VariantService.save_snapshot("CAMISETA", session.toggle_combination(combination))
        assert not DisabledCombination.objects.filter(product_sku="CAMISETA").exists()

    def test_unchanged_combinations_kept(self, orm_product):
        stored = DisabledCombination.objects.create(product_sku="CAMISETA")
        stored.values.set([orm_product["m"]])

        session = VariantService.open_session("CAMISETA")
        VariantService.save_snapshot("CAMISETA", session.snapshot)

        assert list(DisabledCombination.objects.values_list("pk", flat=True)) == [stored.pk]

    def test_remove_group_persists(self, orm_product):
        stored = DisabledCombination.objects.create(product_sku="CAMISETA")
        stored.values.set([orm_product["p"], orm_product["vermelho"]])

        session = VariantService.open_session("CAMISETA")
        snapshot = session.remove_group(str(orm_product["cor"].pk))
        VariantService.save_snapshot("CAMISETA", snapshot)

        assert list(OptionGroup.objects.filter(product_sku="CAMISETA")) == [orm_product["tamanho"]]
        assert not OptionValue.objects.filter(label__in=["Vermelho", "Azul"]).exists()
        assert not DisabledCombination.objects.exists()

    def test_remove_value_persists(self, orm_product):
        session = VariantService.open_session("CAMISETA")
        snapshot = session.remove_value(str(orm_product["tamanho"].pk), str(orm_product["p"].pk))
        VariantService.save_snapshot("CAMISETA", snapshot)

        assert list(orm_product["tamanho"].values.all()) == [orm_product["m"]]

    def test_foreign_ids_rejected(self, orm_product, size):
        with pytest.raises(VariantError) as exc:
            VariantService.save_snapshot("CAMISETA", Snapshot(groups=(size,), disabled=()))
        assert exc.value.code == "STORAGE_UNSUPPORTED"
        assert OptionGroup.objects.filter(product_sku="CAMISETA").count() == 2

    def test_memory_storage(self, memory_storage):
        session = VariantService.open_session("CAMISETA", storage=memory_storage)
        VariantService.save_snapshot("CAMISETA", session.remove_group("color"), storage=memory_storage)

        model = VariantService.load("CAMISETA", storage=memory_storage)
        assert [g.id for g in model.groups] == ["size"]
        assert model.disabled == ()

    def test_read_only_backend(self, memory_storage):
        class ReadOnlyStorage:
            def load_option_groups(self, product_sku):
                return []

            def load_variants(self, product_sku):
                return []

            def load_disabled_combinations(self, product_sku):
                return []

        storage = ReadOnlyStorage()
        assert isinstance(storage, VariantStorage)
        with pytest.raises(VariantError) as exc:
            VariantService.save_snapshot("CAMISETA", Snapshot(groups=(), disabled=()), storage=storage)
        assert exc.value.code == "STORAGE_UNSUPPORTED"
        assert exc.value.data["backend"] == "ReadOnlyStorage"


# ═══════════════════════════════════════════════════════════════════
# Variant matrix
# ═══════════════════════════════════════════════════════════════════


class TestGenerateVariants:
    """Tests for VariantService.generate_variants()."""

    def test_creates_missing(self, orm_product):
        created = VariantService.generate_variants("CAMISETA")

        assert len(created) == 2
        assert all(not variant.is_available for variant in created)
        combos = {frozenset(v.values.values_list("label", flat=True)) for v in created}
        assert combos == {frozenset({"P", "Azul"}), frozenset({"M", "Vermelho"})}
        assert Variant.objects.for_product("CAMISETA").count() == 4

    def test_idempotent(self, orm_product):
        VariantService.generate_variants("CAMISETA")
        assert VariantService.generate_variants("CAMISETA") == []

    def test_generated_variants_do_not_widen_choices(self, orm_product):
        VariantService.generate_variants("CAMISETA")
        session = VariantService.open_session("CAMISETA")
        cor = str(orm_product["cor"].pk)
        assert [v.label for v in session.get_selectable_values(cor)] == ["Vermelho"]

    def test_fresh_product_keeps_choices(self, db):
        """Generated variants start unavailable and must not hide any value."""
        tamanho = OptionGroup.objects.create(product_sku="CALCA", name="Tamanho", sort_order=0)
        cor = OptionGroup.objects.create(product_sku="CALCA", name="Cor", sort_order=1)
        m = OptionValue.objects.create(group=tamanho, label="M")
        OptionValue.objects.create(group=cor, label="Preto")
        OptionValue.objects.create(group=cor, label="Branco")

        assert len(VariantService.generate_variants("CALCA")) == 2

        session = VariantService.open_session("CALCA")
        session.choose_value(str(tamanho.pk), str(m.pk))
        assert [v.label for v in session.get_selectable_values(str(cor.pk))] == ["Preto", "Branco"]
        assert session.is_complete is True
        assert session.matched_variant is None

    def test_product_without_groups(self, db):
        with pytest.raises(VariantError) as exc:
            VariantService.generate_variants("NOPE")
        assert exc.value.code == "PRODUCT_NOT_FOUND"


class TestSetAvailability:
    """Tests for VariantService.set_availability()."""

    def test_all_variants(self, orm_product):
        VariantService.generate_variants("CAMISETA")
        assert VariantService.set_availability("CAMISETA", True) == 2
        assert Variant.objects.for_product("CAMISETA").available().count() == 4

    def test_selected_variants(self, orm_product):
        variant = orm_product["m_azul"]
        assert VariantService.set_availability("CAMISETA", False, variant_ids=[str(variant.pk)]) == 1

        variant.refresh_from_db()
        assert variant.is_available is False
        assert variant.history.count() == 2
        assert variant.history.first().is_available is False

        session = VariantService.open_session("CAMISETA")
        session.choose_value(str(orm_product["tamanho"].pk), str(orm_product["m"].pk))
        assert session.matched_variant is None

    def test_no_change(self, orm_product):
        assert VariantService.set_availability("CAMISETA", True) == 0
        assert orm_product["p_vermelho"].history.count() == 1


class TestPriceRange:
    """Tests for VariantService.price_range()."""

    def test_orm(self, orm_product):
        price = VariantService.price_range("CAMISETA")
        assert (price.min_q, price.max_q, price.has_range) == (4990, 5490, True)

    def test_unavailable_ignored(self, orm_product):
        VariantService.set_availability("CAMISETA", False, variant_ids=[str(orm_product["m_azul"].pk)])
        price = VariantService.price_range("CAMISETA", base_price_q=3990)
        assert (price.min_q, price.max_q, price.has_range) == (4990, 4990, False)

    def test_include_unavailable(self, orm_product):
        VariantService.set_availability("CAMISETA", False, variant_ids=[str(orm_product["m_azul"].pk)])
        price = VariantService.price_range("CAMISETA", only_available=False)
        assert (price.min_q, price.max_q, price.has_range) == (4990, 5490, True)

    def test_no_variants(self, db):
        price = VariantService.price_range("NOPE", base_price_q=3990)
        assert (price.min_q, price.max_q) == (3990, 3990)


# ═══════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════


class TestStorageBackend:
    """Tests for get_storage_backend()/reset_storage_backend()."""

    def test_default_backend(self):
        backend = conf.get_storage_backend()
        assert isinstance(backend, OrmVariantStorage)
        assert conf.get_storage_backend() is backend

    def test_reset(self):
        first = conf.get_storage_backend()
        conf.reset_storage_backend()
        assert conf.get_storage_backend() is not first

    def test_settings_path(self, settings):
        settings.VARIANTMAN = {"STORAGE_BACKEND": "variantman.adapters.memory.InMemoryVariantStorage"}
        assert isinstance(conf.get_storage_backend(), InMemoryVariantStorage)

    def test_settings_defaults(self, settings):
        settings.VARIANTMAN = {}
        assert conf.variantman_settings.MATRIX_GROUP_COUNT == 2
        assert conf.variantman_settings.MAX_COMBINATION_SIZE is None
        assert conf.variantman_settings.STORAGE_BACKEND.endswith("OrmVariantStorage")
        assert conf.variantman_settings.HISTORY_LIMIT == 100

    @pytest.mark.parametrize(
        "value",
        [
            {"MATRIX_GROUP_COUNT": 0},
            {"MAX_COMBINATION_SIZE": 0},
            {"HISTORY_LIMIT": -1},
            {"AUTO_SELECT": True},
        ],
    )
    def test_invalid_settings(self, settings, value):
        settings.VARIANTMAN = value
        with pytest.raises(ImproperlyConfigured):
            conf.get_variantman_settings()

    def test_bad_backend_path(self, settings):
        settings.VARIANTMAN = {"STORAGE_BACKEND": "variantman.adapters.memory.Missing"}
        with pytest.raises(ImportError):
            conf.get_storage_backend()
