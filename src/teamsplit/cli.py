"""Command-line interface for splitting a roster file into teams."""

from __future__ import annotations

import argparse
import random
from pathlib import Path
from typing import Optional, Sequence

from teamsplit.config import DEFAULT_TEAM_SIZE
from teamsplit.config_loader import SettingsProfile
from teamsplit.engine import summarize_validations
from teamsplit.state import (
    AppState,
    add_player,
    add_skill_category,
    parse_player_list,
    randomize,
    set_composition_rule,
    set_event_info,
    set_max_teams,
    set_naming_category,
    set_reserve_players_enabled,
    set_skill_balancing,
    set_team_size,
)
from teamsplit.transfer import export_configuration, team_list_text, teams_to_csv


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Split a roster into randomized, balanced teams")
    parser.add_argument(
        "roster",
        type=Path,
        help="Roster text file: one player per line, optionally 'Name, Skill'",
    )
    parser.add_argument("--team-size", type=int, default=None, help="Players per team")
    parser.add_argument("--max-teams", type=int, default=None, help="Team cap (0 = no cap)")
    parser.add_argument("--reserves", action="store_true", help="Send players beyond the cap to the reserve list")
    parser.add_argument(
        "--rule",
        action="append",
        default=[],
        help="Per-team composition rule by category name (e.g., Expert=1)",
    )
    parser.add_argument("--name-by", default=None, help="Name teams after their player of this category")
    parser.add_argument("--event", default="", help="Event name")
    parser.add_argument("--organizer", default="", help="Organizer name")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible split")
    parser.add_argument("--load-profile", type=Path, help="Load settings profile JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save settings profile JSON", default=None)
    parser.add_argument("--output", type=Path, default=None, help="Optional CSV path for the teams")
    parser.add_argument("--export", type=Path, default=None, help="Optional configuration JSON path")
    parser.add_argument("--names-only", action="store_true", help="Print team names without players")
    return parser.parse_args(argv)


def _parse_rules(entries: list[str]) -> dict[str, int]:
    rules: dict[str, int] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid rule entry '{entry}', expected category=count")
        key, value = entry.split("=", 1)
        rules[key.strip()] = int(value.strip())
    return rules


def parse_roster_line(line: str) -> tuple[str, Optional[str]]:
    name, _, skill = line.partition(",")
    return name.strip(), (skill.strip() or None)


def build_state(entries: Sequence[tuple[str, Optional[str]]], profile: SettingsProfile) -> AppState:
    """Assemble an application state from parsed roster entries and a profile."""

    state = AppState()
    state = set_team_size(state, profile.team_size or DEFAULT_TEAM_SIZE)
    state = set_max_teams(state, profile.max_teams or 0)
    state = set_reserve_players_enabled(state, profile.reserve_players_enabled)

    category_names = list(profile.skill_categories)
    for _, skill in entries:
        if skill and skill.lower() not in {name.lower() for name in category_names}:
            category_names.append(skill)
    for name in category_names:
        state = add_skill_category(state, name)
    if category_names:
        state = set_skill_balancing(state, True)

    ids_by_name = {category.name.lower(): category.id for category in state.skill_categories}
    seen: set[str] = set()
    for name, skill in entries:
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        state = add_player(state, name, ids_by_name.get(skill.lower()) if skill else None)

    for name, count in profile.composition_rules.items():
        if name.lower() not in ids_by_name:
            raise ValueError(f"Unknown skill category '{name}' in rule")
        state = set_composition_rule(state, ids_by_name[name.lower()], count)

    if profile.naming_category:
        if profile.naming_category.lower() not in ids_by_name:
            raise ValueError(f"Unknown skill category '{profile.naming_category}' for team naming")
        state = set_naming_category(state, ids_by_name[profile.naming_category.lower()])
    return state


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)

    profile = SettingsProfile(
        team_size=args.team_size,
        max_teams=args.max_teams,
        reserve_players_enabled=args.reserves,
        composition_rules=_parse_rules(args.rule),
        naming_category=args.name_by,
    )
    if args.load_profile:
        profile = SettingsProfile.load(args.load_profile).merged(profile)
    if args.save_profile:
        profile.save(args.save_profile)
        print(f"Saved settings profile to {args.save_profile}")

    lines = parse_player_list(args.roster.read_text(encoding="utf-8"))
    state = build_state([parse_roster_line(line) for line in lines], profile)
    state = set_event_info(state, args.event, args.organizer)

    rng = random.Random(args.seed) if args.seed is not None else None
    state, result = randomize(state, rng)

    for notice in result.notices:
        print(f"Note: {notice}")
    print(team_list_text(result.teams, include_players=not args.names_only))

    if result.unassigned_players:
        preview = ", ".join(player.name for player in result.unassigned_players[:5])
        more = len(result.unassigned_players) - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Unassigned players: {preview}{suffix}")
    if state.reserve_players:
        print(f"Reserves: {', '.join(player.name for player in state.reserve_players)}")

    settings = state.settings()
    summary = summarize_validations(
        result.teams,
        state.players,
        state.skill_categories,
        settings.active_rules,
        settings.skill_balancing_active,
    )
    if not summary.all_valid:
        print(f"{summary.invalid_team_count} team(s) break composition rules:")
        for team, validation in zip(result.teams, summary.validations):
            for violation in validation.violations:
                print(f"  {team.name}: {violation}")

    if args.output:
        args.output.write_text(teams_to_csv(result.teams, categories=state.skill_categories), encoding="utf-8")
        print(f"Wrote teams to {args.output}")
    if args.export:
        args.export.write_text(export_configuration(state), encoding="utf-8")
        print(f"Wrote configuration to {args.export}")


if __name__ == "__main__":
    main()
