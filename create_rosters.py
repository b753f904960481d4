"""
Build balanced division rosters and teams for a season and save them.

Reads the season's signups, captains, draft history and tryout evaluations,
splits the eligible players into divisions and teams, prints a summary, and
replaces the season's saved rosters.

Usage:
  python create_rosters.py --dry-run
  python create_rosters.py
  python create_rosters.py --db-path path/to/league_rosters.db --season-id 12
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from config import DB_PATH, LOG_LEVEL
from domain.models.roster_draft import RosterDraft
from domain.models.team import TeamBucket
from repositories.roster_repository import RosterRepository
from services.roster_service import RosterService

logger = logging.getLogger("roster.cli")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _print_divisions(service: RosterService, draft: RosterDraft) -> None:
    print(f"Season: {draft.season_label or draft.season_id}")
    print(
        f"Candidates: {len(draft.candidates)} "
        f"({draft.male_count} male, {draft.non_male_count} non-male)"
    )
    for summary in service.summarize_divisions(draft):
        marker = "" if summary.on_target else "  (off target)"
        print(
            f"- {summary.name}: {summary.size}/{summary.target_size} players, "
            f"male {summary.male_count}/{summary.target_male}, "
            f"non-male {summary.non_male_count}/{summary.target_non_male}, "
            f"new {summary.new_count}, captains {summary.captain_count}{marker}"
        )


def _print_teams(draft: RosterDraft, teams_by_division: dict[int, list[TeamBucket]], *, verbose: bool) -> None:
    names = {d.id: d.name for d in draft.divisions}
    for division_id, teams in teams_by_division.items():
        print(f"{names[division_id]}:")
        for team in teams:
            print(
                f"  Team {team.number}: {team.size} players, score {team.score_sum:.0f}, "
                f"male {team.male_count}, non-male {team.non_male_count}, new {team.new_count}"
            )
            if verbose:
                for player in team.players:
                    captain = " (C)" if player.is_captain else ""
                    print(f"    - {player.display_name}{captain} [{player.placement_score:.0f}]")


def _print_excluded(draft: RosterDraft) -> None:
    if not draft.excluded_players:
        return
    print(f"Excluded players: {len(draft.excluded_players)}")
    for excluded in draft.excluded_players:
        print(f"- {excluded.display_name}: {excluded.reason}")


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Create balanced division rosters for a season.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH or league_rosters.db)")
    parser.add_argument("--season-id", type=int, default=None, help="Season to build (default: current season)")
    parser.add_argument("--dry-run", action="store_true", help="Preview rosters without writing anything")
    parser.add_argument("--verbose", action="store_true", help="Print every team's players and debug logs")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    db_path = args.db_path
    if not os.path.exists(db_path):
        print(f"ERROR: Database file not found: {db_path}", file=sys.stderr)
        return 2

    # Note: the repository runs schema initialization/migrations (idempotent).
    service = RosterService(RosterRepository(db_path))

    prepared = service.prepare_draft(args.season_id)
    if not prepared.success:
        print(f"ERROR ({prepared.error_code}): {prepared.error}", file=sys.stderr)
        return 1
    draft = prepared.value

    _print_divisions(service, draft)
    _print_teams(draft, service.balancer.build_teams(draft.rosters, draft.divisions), verbose=args.verbose)
    _print_excluded(draft)

    if args.dry_run:
        print("Dry-run: no changes written.")
        return 0

    saved = service.save_draft(draft)
    if not saved.success:
        print(f"ERROR ({saved.error_code}): {saved.error}", file=sys.stderr)
        return 1

    print(f"Saved {saved.value} roster assignments.")
    return 0


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
