#!/usr/bin/env python3
"""CLI tool for tournament bank administration."""
import json
import sys

from tourney_bank.bank.controller import BankLedgerController
from tourney_bank.bank.report import format_payouts_table, format_players_table, format_summary
from tourney_bank.protocol.intents import parse_intent
from tourney_bank.state.backends import create_backend
from tourney_bank.state.player_store import PlayerStore
from tourney_bank.state.redis_client import redis_client
from tourney_bank.state.tournament_settings import TournamentSettings

SETTING_SETTERS = {
    "player_count": "set_player_count",
    "buy_in": "set_buy_in",
    "food_per_player": "set_food_per_player",
    "bounty_per_player": "set_bounty_per_player",
    "rebuy_per_player": "set_rebuy_per_player",
    "addon_per_player": "set_addon_per_player",
    "payout_weights": "set_payout_weights",
}


def open_controller() -> BankLedgerController:
    """Build a controller over the configured backend."""
    backend = create_backend()
    return BankLedgerController(PlayerStore(backend), TournamentSettings(backend))


def show_summary():
    """Print the pool totals."""
    controller = open_controller()
    print(format_summary(controller.state))


def show_payouts():
    """Print the payout positions."""
    controller = open_controller()
    print(format_payouts_table(controller.state))


def show_players():
    """Print the players in display order."""
    controller = open_controller()
    print(format_players_table(controller.state))


def dump_json():
    """Print the full snapshot as JSON."""
    controller = open_controller()
    print(json.dumps(controller.state.to_dict(), indent=2))


def replay(path: str):
    """Apply settings and intents from a JSON file, then print the result.

    The file holds either a list of intents or an object with optional
    "settings" and "intents" keys.
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: Could not read {path}: {e}")
        sys.exit(1)

    if isinstance(data, list):
        data = {"intents": data}

    controller = open_controller()

    for name, value in data.get("settings", {}).items():
        setter = SETTING_SETTERS.get(name)
        if setter is None:
            print(f"Error: Unknown setting '{name}'.")
            sys.exit(1)
        getattr(controller.settings, setter)(value)

    for index, raw in enumerate(data.get("intents", []), start=1):
        try:
            intent = parse_intent(raw)
        except ValueError as e:
            print(f"Error: Intent #{index} is invalid: {e}")
            sys.exit(1)
        controller.dispatch(intent)

    snapshot = controller.state
    print(format_summary(snapshot))
    print()
    print(format_players_table(snapshot))
    print()
    print(format_payouts_table(snapshot))
    if snapshot.pending_action is not None:
        pending = snapshot.pending_action
        print(f"\nPending: {pending.action_type.value} for player {pending.player_id} (apply={pending.apply})")


def reset(include_settings: bool = False):
    """Reset player data, and optionally the tournament settings."""
    backend = create_backend()
    PlayerStore(backend).reset_all()
    if include_settings:
        TournamentSettings(backend).reset_all()
        print("Success: Bank data and tournament settings reset.")
    else:
        print("Success: Bank data reset.")


def print_usage():
    """Print usage information."""
    print("""
Tournament Bank CLI

Usage:
  python -m tourney_bank.cli <command> [args]

Commands:
  summary               Show pool totals
  payouts               Show payout positions
  players               Show players, placements and net pay
  json                  Dump the full ledger snapshot as JSON
  replay <file.json>    Apply settings and intents from a file
  reset [--all]         Reset player data (--all also resets settings)

Examples:
  python -m tourney_bank.cli summary
  python -m tourney_bank.cli replay night.json
  STORE_BACKEND=redis python -m tourney_bank.cli reset --all
""")


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1].lower()

    try:
        run_command(command)
    finally:
        redis_client.disconnect()


def run_command(command: str):
    """Dispatch a CLI command."""
    if command == "summary":
        show_summary()

    elif command == "payouts":
        show_payouts()

    elif command == "players":
        show_players()

    elif command == "json":
        dump_json()

    elif command == "replay":
        if len(sys.argv) < 3:
            print("Error: File path required.")
            print("Usage: python -m tourney_bank.cli replay <file.json>")
            sys.exit(1)
        replay(sys.argv[2])

    elif command == "reset":
        reset(include_settings="--all" in sys.argv[2:])

    elif command in ("help", "-h", "--help"):
        print_usage()

    else:
        print(f"Unknown command: {command}")
        print_usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
