"""Command-line front end for managing treasure hunts."""

from __future__ import annotations

import sys
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from treasurehunt.manager import HuntError, HuntManager, prompt_treasure

PROG = "./exe"

_Action = Callable[[HuntManager, List[str]], object]


def _add(manager: HuntManager, args: List[str]) -> None:
    treasure = prompt_treasure()
    manager.add_treasure(args[0], treasure)


def _list(manager: HuntManager, args: List[str]) -> None:
    manager.list_treasures(args[0])


def _view(manager: HuntManager, args: List[str]) -> None:
    manager.view_treasure(args[0], args[1])


def _remove_treasure(manager: HuntManager, args: List[str]) -> None:
    manager.remove_treasure(args[0], args[1])


def _remove_hunt(manager: HuntManager, args: List[str]) -> None:
    manager.remove_treasure_hunt(args[0])


# operation -> (argument names, action)
_COMMANDS: Dict[str, Tuple[Tuple[str, ...], _Action]] = {
    "--add": (("<hunt_id>",), _add),
    "--list": (("<hunt_id>",), _list),
    "--view": (("<hunt_id>", "<treasure_id>"), _view),
    "--remove_treasure": (("<hunt_id>", "<treasure_id>"), _remove_treasure),
    "--remove_treasure_hunt": (("<hunt_id>",), _remove_hunt),
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one hunt operation given on the command line; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(f"usage: {PROG} <operation> <other arguments>")
        return 1
    operation, *rest = args
    command = _COMMANDS.get(operation)
    if command is None:
        print("The user introduced an invalid operation!")
        return 1
    names, action = command
    if len(rest) != len(names):
        print(f"usage: {PROG} {operation} {' '.join(names)}")
        return 1
    try:
        action(HuntManager(), rest)
    except HuntError as exc:
        print(exc)
        return 1
    finally:
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())