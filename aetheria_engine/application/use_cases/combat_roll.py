import random
from typing import Optional

from aetheria_engine.application.commands.turn import CombatRollCommand, SubmitActionCommand
from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.application.use_cases.resolve_turn import TurnResolver, TurnResult
from aetheria_engine.domain.entities import GameState
from aetheria_engine.domain.rules import ability_modifier, equipped_weapon
from aetheria_engine.domain.value_objects import StatName

DIE_SIDES = 20
UNARMED = "Fists"


def build_combat_action(state: GameState, roll: int) -> str:
    """
    Describes an attack roll for the narrator. The total only biases the
    narration; hit and damage are decided by the narrator's response.
    """
    stats = state.player.stats
    weapon = equipped_weapon(state.player.inventory)
    weapon_name = weapon.name if weapon else UNARMED
    weapon_bonus = 0
    if weapon and weapon.effect and weapon.effect.stat == StatName.STRENGTH:
        weapon_bonus = weapon.effect.value

    total = roll + weapon_bonus + ability_modifier(stats.strength)
    text = (
        f"[Combat Round] I attack the {state.combat.enemy_name} with {weapon_name}. "
        f"I rolled a {roll} (Total: {total})."
    )
    if roll == DIE_SIDES:
        text += " Critical success!"
    elif roll == 1:
        text += " Critical failure!"
    return text


class CombatRollHandler:
    """
    Handles the CombatRollCommand use case.
    During combat the player's only move is a d20 roll, which is turned into
    an action text and resolved like any other turn.
    """

    def __init__(
        self,
        game_store: GameStore,
        turn_resolver: TurnResolver,
        rng: Optional[random.Random] = None,
    ):
        self._store = game_store
        self._resolver = turn_resolver
        self._rng = rng or random.Random()

    async def execute(self, command: CombatRollCommand) -> TurnResult:
        state = self._store.state
        if not state.combat.is_active:
            raise ValueError("There is no enemy to attack.")

        roll = command.roll if command.roll is not None else self._rng.randint(1, DIE_SIDES)
        action_text = build_combat_action(state, roll)
        return await self._resolver.execute(SubmitActionCommand(text=action_text))
