"""Lightweight REST client for the teamsplit API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the teamsplit REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("roster", type=Path, nargs="?", help="Roster text file, one player per line")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible split")
    parser.add_argument("--fill", action="store_true", help="Fill existing teams instead of re-randomizing")
    parser.add_argument("--list-history", action="store_true", help="List recent assignments and exit")
    parser.add_argument("--load-history", metavar="ENTRY_ID", help="Restore a history entry and exit")
    parser.add_argument("--export-csv", type=Path, help="Destination path for the teams CSV")
    parser.add_argument("--share", metavar="BASE_URL", help="Print a share link rooted at BASE_URL")
    args = parser.parse_args()

    if args.list_history or args.load_history:
        with httpx.Client(base_url=args.base_url) as client:
            if args.list_history:
                resp = client.get("/history")
                resp.raise_for_status()
                for entry in resp.json():
                    print(f"{entry['id']}  {entry['timestamp']}  {entry['eventName'] or '-'}  {len(entry['teams'])} teams")
            if args.load_history:
                resp = client.post(f"/history/{args.load_history}/load")
                if resp.status_code == 404:
                    raise SystemExit(f"history entry {args.load_history} not found")
                resp.raise_for_status()
                print(f"Restored {len(resp.json()['teams'])} teams")
        return

    with httpx.Client(base_url=args.base_url) as client:
        if args.roster is not None:
            resp = client.post("/players/bulk", json={"text": args.roster.read_text(encoding="utf-8")})
            resp.raise_for_status()
            print(f"Roster now has {len(resp.json()['players'])} players")

        endpoint = "/fill" if args.fill else "/randomize"
        resp = client.post(endpoint, json={"seed": args.seed})
        resp.raise_for_status()
        payload = resp.json()
        for notice in payload["notices"]:
            print(f"Note: {notice}")
        for team in payload["teams"]:
            print(f"{team['name']}: {', '.join(player['name'] for player in team['players'])}")

        resp = client.get("/validation")
        resp.raise_for_status()
        summary = resp.json()["summary"]
        if summary["invalidTeamCount"]:
            print("Validation:", json.dumps(summary, indent=2))

        if args.export_csv:
            resp = client.get("/teams/export.csv")
            resp.raise_for_status()
            args.export_csv.write_text(resp.text)
            print(f"CSV export saved to {args.export_csv}")
        if args.share:
            resp = client.get("/share", params={"base_url": args.share})
            resp.raise_for_status()
            print(resp.json()["url"])


if __name__ == "__main__":
    main()
