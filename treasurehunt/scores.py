"""Per-user score totals of a treasure hunt."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

from treasurehunt.records import TREASURES_FILE, read_treasures


def calculate_scores(path: Union[str, "os.PathLike[str]"]) -> Dict[str, int]:
    """Sum treasure values per user for the hunt directory ``path``, in first-seen order."""
    scores: Dict[str, int] = {}
    for treasure in read_treasures(Path(path) / TREASURES_FILE):
        scores[treasure.user_name] = scores.get(treasure.user_name, 0) + treasure.value
    return scores


def format_scores(scores: Mapping[str, int]) -> str:
    """One "<user> score: <total>" line per user."""
    return "".join(f"{name} score: {score}\n" for name, score in scores.items())


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the scores of the hunt named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: ./calculate <hunt_id>")
        return 1
    try:
        scores = calculate_scores(args[0])
    except OSError:
        print("Error at opening file")
        return 1
    sys.stdout.write(format_scores(scores))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())