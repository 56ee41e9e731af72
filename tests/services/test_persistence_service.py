"""PersistenceService 테스트 (인메모리 SQLite)"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.core.brewing.models import ItemType, PotionEffect
from src.db.models import Base, CauldronSnapshotModel
from src.services.persistence_service import SCHEMA_VERSION, PersistenceService


@pytest.fixture()
def setup(brewing):
    """인메모리 DB + BrewingService + PersistenceService"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine)
    db = session_factory()

    service, store, bus = brewing
    persistence = PersistenceService(db, store)
    yield service, persistence, db
    db.close()


def _half_brewed(service):
    cauldron = service.create_cauldron()
    service.record_heat(cauldron, 100)
    service.advance(cauldron, 2000)
    service.record_ingredient(
        cauldron, service.create_ingredient(ItemType.COFFEE_BEANS, amount=5, fineness=1.0)
    )
    service.record_ingredient(
        cauldron, service.create_ingredient(ItemType.MAGICAL_FRUIT, amount=3, fineness=0.0)
    )
    service.advance(cauldron, 300)
    return cauldron


class TestSaveLoad:
    def test_roundtrip_extracts_same_potion(self, setup):
        service, persistence, _ = setup
        cauldron = _half_brewed(service)

        assert persistence.save_cauldron("slot1", cauldron) is True
        restored = persistence.load_cauldron("slot1")
        assert restored is not None
        assert restored != cauldron

        original_state = service.cauldron_state(cauldron)
        restored_state = service.cauldron_state(restored)
        assert restored_state.actions == original_state.actions
        assert restored_state.color == original_state.color
        assert restored_state.ms_since_last_action == original_state.ms_since_last_action

        expected = service.extract(cauldron)
        assert service.extract(restored) == expected
        assert expected.effect == PotionEffect.SPEED

    def test_restored_cauldron_keeps_brewing(self, setup):
        """복원 후 이어서 조작해도 원본과 같은 결과"""
        service, persistence, _ = setup
        cauldron = _half_brewed(service)
        persistence.save_cauldron("slot1", cauldron)
        restored = persistence.load_cauldron("slot1")

        for handle in (cauldron, restored):
            service.record_stir(handle, 3)
            service.advance(handle, 6000)

        assert service.extract(restored) == service.extract(cauldron)

    def test_save_overwrites(self, setup):
        service, persistence, db = setup
        cauldron = _half_brewed(service)
        persistence.save_cauldron("slot1", cauldron)
        service.record_stir(cauldron, 1)
        persistence.save_cauldron("slot1", cauldron)

        rows = db.query(CauldronSnapshotModel).all()
        assert len(rows) == 1
        assert rows[0].schema_version == SCHEMA_VERSION
        assert rows[0].state["cauldron"]["actions"][-1] == {"kind": "stir", "value": 1}

    def test_fineness_preserved(self, setup):
        service, persistence, _ = setup
        cauldron = service.create_cauldron()
        service.record_ingredient(
            cauldron, service.create_ingredient(ItemType.GLOWSHROOM, fineness=0.5)
        )
        persistence.save_cauldron("s", cauldron)
        restored = persistence.load_cauldron("s")

        [(_, ing)] = service.held_ingredients(restored)
        assert ing.item_type == ItemType.GLOWSHROOM
        assert ing.fineness == 0.5

    def test_restored_ingredients_stay_in_cauldron(self, setup):
        service, persistence, _ = setup
        persistence.save_cauldron("slot1", _half_brewed(service))
        restored = persistence.load_cauldron("slot1")
        mortar = service.create_mortar()

        for handle, _ in service.held_ingredients(restored):
            assert service.store_in_mortar(mortar, handle) is False
        assert service.store.mortars.get(mortar).items == []

    def test_load_missing_slot(self, setup):
        _, persistence, _ = setup
        assert persistence.load_cauldron("nope") is None

    def test_save_stale_cauldron(self, setup):
        service, persistence, _ = setup
        cauldron = service.create_cauldron()
        service.store.destroy(cauldron)
        assert persistence.save_cauldron("slot1", cauldron) is False


class TestSlots:
    def test_list_and_delete(self, setup):
        service, persistence, _ = setup
        persistence.save_cauldron("b", service.create_cauldron())
        persistence.save_cauldron("a", service.create_cauldron())
        assert persistence.list_slots() == ["a", "b"]

        assert persistence.delete_slot("a") is True
        assert persistence.delete_slot("a") is False
        assert persistence.list_slots() == ["b"]
