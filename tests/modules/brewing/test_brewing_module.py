"""BrewingModule 테스트"""

import pytest

from src.core.brewing.models import Action, ActionKind
from src.modules.base import GameContext
from src.modules.brewing.module import BrewingModule
from src.modules.module_manager import ModuleManager


@pytest.fixture()
def setup(brewing):
    service, store, bus = brewing
    module = BrewingModule(service)
    manager = ModuleManager(bus)
    manager.register(module)
    manager.enable("brewing")
    return service, store, module, manager


class TestTick:
    def test_tick_records_idle_wait(self, setup):
        service, _, module, manager = setup
        cauldron = service.create_cauldron()
        module.track_cauldron(cauldron)
        service.record_heat(cauldron, 70)

        manager.process_tick(1500)
        assert service.cauldron_state(cauldron).actions == [
            Action(ActionKind.MODIFY_HEAT, 70),
            Action(ActionKind.WAIT, 1),
        ]

    def test_stale_cauldron_dropped(self, setup):
        service, store, module, manager = setup
        cauldron = service.create_cauldron()
        module.track_cauldron(cauldron)
        store.destroy(cauldron)

        manager.process_tick(100)
        assert module.cauldrons == []

    def test_disabled_module_does_not_tick(self, setup):
        service, _, module, manager = setup
        cauldron = service.create_cauldron()
        module.track_cauldron(cauldron)
        service.record_heat(cauldron, 70)
        manager.disable("brewing")

        manager.process_tick(5000)
        assert len(service.cauldron_state(cauldron).actions) == 1

    def test_track_is_idempotent(self, setup):
        service, _, module, _ = setup
        cauldron = service.create_cauldron()
        module.track_cauldron(cauldron)
        module.track_cauldron(cauldron)
        assert module.cauldrons == [cauldron]
        module.untrack_cauldron(cauldron)
        assert module.cauldrons == []


class TestActions:
    def test_no_actions_without_cauldron(self, setup):
        _, _, module, _ = setup
        assert module.get_available_actions(GameContext(tick=1, elapsed_ms=16)) == []

    def test_actions_with_cauldron_and_mortar(self, setup):
        service, _, module, manager = setup
        module.track_cauldron(service.create_cauldron())
        module.track_mortar(service.create_mortar())
        names = [a.name for a in manager.get_all_actions(GameContext(tick=1, elapsed_ms=16))]
        assert names == ["heat", "stir", "add_ingredient", "bottle", "grind"]
