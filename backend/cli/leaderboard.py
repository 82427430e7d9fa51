#!/usr/bin/env python3
"""
Print the leaderboard from a running server.
"""

import argparse
import os
import sys
from typing import Any, Dict, List

from dotenv import load_dotenv

# Add backend to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.leaderboard_client import LeaderboardClient, LeaderboardClientError  # noqa: E402


def format_table(items: List[Dict[str, Any]]) -> str:
    if not items:
        return "No scores yet."

    lines = [f"{'#':>3}  {'Nickname':<16}  {'Score':>7}  Submitted"]
    for position, item in enumerate(items, start=1):
        lines.append(
            f"{position:>3}  {item['nickname']:<16}  {item['score']:>7}  {item['createdAt']}"
        )
    return "\n".join(lines)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Show the Snake leaderboard.")
    parser.add_argument("--range", dest="range_", choices=["all", "weekly"], default="all",
                        help="All-time or trailing 7 days (default: all)")
    parser.add_argument("--server-url", default=None, help="Leaderboard server (default: LEADERBOARD_URL or localhost)")
    args = parser.parse_args()

    client = LeaderboardClient(args.server_url)
    try:
        data = client.fetch_leaderboard(args.range_)
    except LeaderboardClientError as e:
        print(e.message)
        sys.exit(1)

    print(format_table(data.get("items", [])))
    print(f"\nGenerated at {data.get('generatedAt')}")


if __name__ == "__main__":
    main()
