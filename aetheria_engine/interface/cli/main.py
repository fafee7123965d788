import asyncio

from aetheria_engine.container import container, wire_dependencies
from aetheria_engine.application.commands.inventory import ItemOperation, ManageItemCommand
from aetheria_engine.application.commands.session import LoadSessionCommand, StartSessionCommand
from aetheria_engine.application.commands.turn import CombatRollCommand, SubmitActionCommand
from aetheria_engine.application.use_cases.resolve_turn import TurnStatus
from aetheria_engine.domain import rules
from aetheria_engine.domain.entities import GameState, LogSender
from aetheria_engine.domain.reducer import DEFAULT_CHARACTER_NAME
from aetheria_engine.domain.value_objects import StatName, TerrainType, coordinate_key

# --- Constants ---
COMMANDS = ["roll", "equip", "unequip", "drop", "inv", "stats", "journal", "quests", "map",
            "saves", "load", "new", "help", "quit"]
MAP_RADIUS = 2
TERRAIN_GLYPHS = {
    TerrainType.TOWN: "T",
    TerrainType.FOREST: "f",
    TerrainType.MOUNTAIN: "^",
    TerrainType.DUNGEON: "D",
    TerrainType.PLAINS: ".",
    TerrainType.WATER: "~",
    TerrainType.UNKNOWN: "?",
}
SENDER_PREFIXES = {
    LogSender.PLAYER: "> ",
    LogSender.NARRATOR: "",
    LogSender.SYSTEM: "* ",
}
REJECTION_MESSAGES = {
    TurnStatus.REJECTED_EMPTY: "Type what you want to do.",
    TurnStatus.REJECTED_BUSY: "The narrator is still speaking...",
    TurnStatus.REJECTED_GAME_OVER: "Your adventure is over. Type 'new <name>' to begin again.",
}
ITEM_OPERATIONS = {
    "equip": ItemOperation.EQUIP,
    "unequip": ItemOperation.UNEQUIP,
    "drop": ItemOperation.DROP,
}


def print_help():
    """Prints available commands."""
    print("\n--- Help ---")
    print("  <anything else>                 - Describe your action; the narrator resolves it.")
    print("  roll [1-20]                     - Attack during combat (rolls a d20 if no number).")
    print("  equip | unequip | drop <item>   - Manage your inventory.")
    print("  inv | stats | journal | quests  - Review your character.")
    print("  map                             - Show the explored area around you.")
    print("  saves                           - List saved adventures.")
    print("  load <save id>                  - Resume a saved adventure.")
    print("  new <name>                      - Start a new adventure.")
    print("  quit                            - Exit the game.")
    print("---")


def print_inventory(state: GameState):
    inventory = state.player.inventory
    stats = state.player.stats
    print("\n--- Inventory ---")
    for item in inventory:
        equipped = " [E]" if item.equipped else ""
        effect = f" ({item.effect.stat.value} {item.effect.value:+d})" if item.effect else ""
        print(f"  {item.name} x{item.quantity}{equipped}{effect} - {item.weight * item.quantity:.1f}kg")
    weight = rules.carried_weight(inventory)
    capacity = rules.carry_capacity(stats, inventory)
    warning = "  OVERENCUMBERED!" if rules.is_overencumbered(stats, inventory) else ""
    print(f"  Weight: {weight:.1f}/{capacity}{warning}")
    print(f"  Gold: {state.player.gold}  Supplies: {stats.supplies}")


def print_stats(state: GameState):
    player = state.player
    stats = player.stats
    inventory = player.inventory
    print(f"\n--- {player.name}, Level {stats.level} {player.character_class} ---")
    print(f"  HP {stats.hp}/{stats.max_hp}  XP {stats.xp}/{rules.xp_threshold(stats.level)}  "
          f"AC {rules.armor_class(stats, inventory)}  Reputation {player.reputation}")
    for stat in (StatName.STRENGTH, StatName.DEXTERITY, StatName.CONSTITUTION,
                 StatName.INTELLIGENCE, StatName.WISDOM, StatName.CHARISMA):
        value = rules.effective_stat(stats, inventory, stat)
        print(f"  {stat.value[:3].upper()} {value:>3} ({rules.ability_modifier(value):+d})")


def print_journal(state: GameState):
    print("\n--- Journal ---")
    if not state.player.journal:
        print("  (empty)")
    for entry in state.player.journal:
        print(f"  - {entry}")


def print_quests(state: GameState):
    print("\n--- Quests ---")
    if not state.player.active_quests:
        print("  (none)")
    for quest in state.player.active_quests:
        mark = "x" if quest.completed else " "
        print(f"  [{mark}] {quest.title}: {quest.description}")


def print_map(state: GameState):
    """Prints the tiles around the player, north at the top. '@' marks the player."""
    position = state.player.position
    tiles = state.world.map.tiles
    print()
    for y in range(position.y + MAP_RADIUS, position.y - MAP_RADIUS - 1, -1):
        row = []
        for x in range(position.x - MAP_RADIUS, position.x + MAP_RADIUS + 1):
            if (x, y) == (position.x, position.y):
                row.append("@")
            else:
                tile = tiles.get(coordinate_key(x, y))
                row.append(TERRAIN_GLYPHS[tile.type] if tile else " ")
        print("  " + " ".join(row))
    print(f"  ({position.x},{position.y}) {state.world.location_name}")


def print_log(state: GameState, start: int) -> int:
    """Prints the log entries added since `start` and returns the new log length."""
    for entry in state.game_log[start:]:
        print(f"{SENDER_PREFIXES[entry.sender]}{entry.content}")
    return len(state.game_log)


def print_status(state: GameState):
    stats = state.player.stats
    print("\n" + "=" * 40)
    print(f"{state.world.location_name} | {state.world.time_of_day} | Turn {state.turn_number}")
    print(f"HP {stats.hp}/{stats.max_hp}  Supplies {stats.supplies}  Gold {state.player.gold}")
    if state.combat.is_active:
        print(f"COMBAT: {state.combat.enemy_name} ({state.combat.enemy_hp}/{state.combat.enemy_max_hp} HP)"
              " - type 'roll' to attack.")


async def _choose_session(start_handler, list_saves_handler, load_handler) -> GameState:
    saves = await list_saves_handler.execute()
    if saves:
        print("Saved adventures:")
        for save in saves:
            print(f"  {save.id}  {save.player.name}, level {save.player.stats.level}, turn {save.turn_number}")
        save_id = input("Enter a save id to resume, or press Enter for a new adventure: ").strip()
        if save_id:
            try:
                return await load_handler.execute(LoadSessionCommand(save_id=save_id))
            except ValueError as e:
                print(e)
    name = input("What is your name, traveler? ").strip() or DEFAULT_CHARACTER_NAME
    return await start_handler.execute(StartSessionCommand(character_name=name))


async def main():
    """The main game loop."""
    wire_dependencies()

    # Resolve handlers from container
    store = container.game_store()
    resolver = container.turn_resolver()
    start_handler = container.start_session_handler()
    load_handler = container.load_session_handler()
    list_saves_handler = container.list_saves_handler()
    combat_handler = container.combat_roll_handler()
    item_handler = container.manage_item_handler()

    print("\n--- Aetheria Chronicles ---")
    if store.is_offline:
        print("(Offline mode: your progress will not be saved.)")

    state = await _choose_session(start_handler, list_saves_handler, load_handler)
    shown = print_log(state, 0)
    print("Type 'help' for commands.")

    while True:
        try:
            print_status(store.state)
            if resolver.suggestions:
                print(f"Suggestions: {' | '.join(resolver.suggestions)}")

            resolver.input_buffer = input("> ").strip()
            command_str = resolver.input_buffer
            parts = command_str.split()
            verb = parts[0].lower() if parts else ""
            argument = " ".join(parts[1:])

            # --- Command Parsing ---
            if verb not in COMMANDS:
                result = await resolver.execute(SubmitActionCommand(text=command_str))
                if result.status == TurnStatus.REJECTED_COOLDOWN:
                    print(f"Catch your breath... ({resolver.cooldown_remaining:.0f}s)")
                elif not result.accepted:
                    print(REJECTION_MESSAGES[result.status])

            elif verb == "quit":
                print("Goodbye!")
                break

            elif verb == "help":
                print_help()

            elif verb == "roll":
                roll = int(argument) if argument.isdigit() else None
                result = await combat_handler.execute(CombatRollCommand(roll=roll))
                if result.status == TurnStatus.REJECTED_COOLDOWN:
                    print(f"Catch your breath... ({resolver.cooldown_remaining:.0f}s)")
                elif not result.accepted:
                    print(REJECTION_MESSAGES[result.status])

            elif verb in ITEM_OPERATIONS:
                if argument:
                    item = next((i for i in store.state.player.inventory if i.name.lower() == argument.lower()), None)
                    item_name = item.name if item else argument
                    await item_handler.execute(ManageItemCommand(item_name=item_name, operation=ITEM_OPERATIONS[verb]))
                    if verb != "drop":
                        print(f"You {verb} the {item_name}.")
                else:
                    print(f"Usage: {verb} <item name>")

            elif verb == "inv":
                print_inventory(store.state)

            elif verb == "stats":
                print_stats(store.state)

            elif verb == "journal":
                print_journal(store.state)

            elif verb == "quests":
                print_quests(store.state)

            elif verb == "map":
                print_map(store.state)

            elif verb == "saves":
                saves = await list_saves_handler.execute()
                if not saves:
                    print("No saved adventures.")
                for save in saves:
                    print(f"  {save.id}  {save.player.name}, turn {save.turn_number}")

            elif verb == "load":
                if argument:
                    await load_handler.execute(LoadSessionCommand(save_id=argument))
                    shown = 0
                else:
                    print("Usage: load <save id>")

            elif verb == "new":
                name = argument or DEFAULT_CHARACTER_NAME
                await start_handler.execute(StartSessionCommand(character_name=name))
                shown = 0

            shown = print_log(store.state, shown)

        except ValueError as e:
            print(e)
        except Exception as e:
            print(f"ERROR: An unexpected error occurred: {e}")
            import traceback
            traceback.print_exc()


if __name__ == "__main__":
    asyncio.run(main())
