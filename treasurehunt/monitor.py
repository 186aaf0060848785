"""Background monitor answering hunt queries when signalled."""

from __future__ import annotations

import os
import signal
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple, Union

from treasurehunt.manager import HuntError, HuntManager
from treasurehunt.records import TREASURES_FILE, Treasure, count_treasures

PathLike = Union[str, "os.PathLike[str]"]


def list_hunts(root: PathLike = ".") -> List[Tuple[str, int]]:
    """Name and number of treasures of every hunt directory directly below ``root``."""
    hunts = []
    for entry in sorted(Path(root).iterdir()):
        if entry.is_symlink() or not entry.is_dir():
            continue
        treasure_file = entry / TREASURES_FILE
        if not os.path.exists(treasure_file):
            continue
        try:
            hunts.append((entry.name, count_treasures(treasure_file)))
        except OSError as exc:
            print(f"Error opening treasure file!: {exc.strerror or exc}", file=sys.stderr)
    return hunts


def format_hunts(hunts: Iterable[Tuple[str, int]]) -> str:
    """Text listing of hunts as printed by the monitor."""
    lines = ["Available hunts:\n"]
    lines.extend(f"- {name}: {count} treasures\n" for name, count in hunts)
    return "".join(lines)


class Monitor:
    """Answers list and view requests; requests arrive as signals, arguments on input."""

    exit_delay = 3.0

    def __init__(
        self,
        root: PathLike = ".",
        input_stream: Optional[TextIO] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.root = Path(root)
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.out = out if out is not None else sys.stdout
        self._manager = HuntManager(self.root, self.out)
        self._stopping = False

    def handle_list_hunts(self) -> List[Tuple[str, int]]:
        """Print every hunt with its treasure count."""
        hunts = list_hunts(self.root)
        self.out.write(format_hunts(hunts))
        self.out.flush()
        return hunts

    def handle_list_treasures(self, line: str) -> Optional[List[Treasure]]:
        """List the treasures of the hunt named on ``line``."""
        hunt_id = line.rstrip("\n") if line else ""
        if not hunt_id:
            print("Invalid format", file=sys.stderr)
            return None
        try:
            return self._manager.list_treasures(hunt_id)
        except HuntError as exc:
            self.out.write(f"{exc}\n")
            return None
        finally:
            self.out.flush()

    def handle_view_treasure(self, line: str) -> Optional[Treasure]:
        """Show the treasure given as "<hunt_id> <treasure_id>" on ``line``."""
        parts = line.split() if line else []
        if len(parts) < 2:
            print("Invalid format", file=sys.stderr)
            return None
        hunt_id, treasure_id = parts[:2]
        try:
            return self._manager.view_treasure(hunt_id, treasure_id)
        except HuntError as exc:
            self.out.write(f"{exc}\n")
            return None
        finally:
            self.out.flush()

    def _on_sigusr1(self, signum, frame) -> None:
        self.handle_list_hunts()

    def _on_sigusr2(self, signum, frame) -> None:
        self.handle_list_treasures(self.input_stream.readline())

    def _on_sigint(self, signum, frame) -> None:
        self.handle_view_treasure(self.input_stream.readline())

    def _on_sigterm(self, signum, frame) -> None:
        self._stopping = True

    def install_signal_handlers(self) -> None:
        """Route SIGUSR1, SIGUSR2, SIGINT and SIGTERM to this monitor."""
        signal.signal(signal.SIGUSR1, self._on_sigusr1)
        signal.signal(signal.SIGUSR2, self._on_sigusr2)
        signal.signal(signal.SIGINT, self._on_sigint)
        signal.signal(signal.SIGTERM, self._on_sigterm)
        for signum in (signal.SIGUSR1, signal.SIGUSR2, signal.SIGINT, signal.SIGTERM):
            signal.siginterrupt(signum, False)

    def run(self) -> int:
        """Serve signals until SIGTERM arrives; return the exit status."""
        self._stopping = False
        self.install_signal_handlers()
        while not self._stopping:
            signal.pause()
        time.sleep(self.exit_delay)
        self.out.flush()
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a monitor over the current directory, reading arguments from stdin."""
    return Monitor(".", sys.stdin, sys.stdout).run()


if __name__ == "__main__":
    sys.exit(main())