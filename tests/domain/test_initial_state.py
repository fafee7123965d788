from aetheria_engine.domain.entities import LogSender
from aetheria_engine.domain.initial_state import STARTING_LOCATION, create_initial_state
from aetheria_engine.domain.value_objects import TerrainType


def test_create_initial_state_starting_loadout():
    state = create_initial_state("Ayla")

    assert state.player.name == "Ayla"
    assert state.player.gold == 10
    assert state.player.stats.hp == state.player.stats.max_hp == 20
    assert state.player.stats.supplies == 5
    assert [item.name for item in state.player.inventory] == [
        "Rusted Dagger", "Torn Tunic", "Dried Biscuit", "Flint & Steel",
    ]
    assert [item.name for item in state.player.inventory if item.equipped] == ["Rusted Dagger", "Torn Tunic"]
    assert state.turn_count == 0
    assert state.is_game_over is False
    assert state.combat.is_active is False


def test_create_initial_state_world_and_welcome():
    state = create_initial_state("Ayla")

    assert state.world.location_name == STARTING_LOCATION
    assert state.world.map.tiles["0,0"].type == TerrainType.PLAINS
    assert state.world.map.tiles["0,0"].visited is True
    assert len(state.game_log) == 1
    assert state.game_log[0].sender == LogSender.NARRATOR
    assert state.game_log[0].content.startswith("Welcome, Ayla.")


def test_each_new_state_gets_its_own_id():
    assert create_initial_state("Ayla").id != create_initial_state("Ayla").id
