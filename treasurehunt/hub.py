"""Interactive hub that drives a monitor process and reports hunt scores."""

from __future__ import annotations

import os
import select
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Union

from treasurehunt.scores import calculate_scores, format_scores

PathLike = Union[str, "os.PathLike[str]"]

PROMPT = "treasure_hub > "

_MONITOR_COMMANDS = ("list_hunts", "list_treasures", "view_treasure")


def _default_monitor_command() -> List[str]:
    return [sys.executable, "-m", "treasurehunt.monitor"]


def _child_environment() -> dict:
    """Environment for the monitor, able to import this package."""
    env = dict(os.environ)
    package_parent = str(Path(__file__).resolve().parent.parent)
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = (
        os.pathsep.join([package_parent, existing]) if existing else package_parent
    )
    return env


class Hub:
    """Reads commands and forwards queries to a monitor child process."""

    startup_delay = 1.0
    response_delay = 0.2
    response_timeout = 5.0
    drain_timeout = 0.1

    def __init__(
        self,
        root: PathLike = ".",
        input_stream: Optional[TextIO] = None,
        out: Optional[TextIO] = None,
        monitor_command: Optional[Sequence[str]] = None,
    ) -> None:
        self.root = Path(root)
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.out = out if out is not None else sys.stdout
        self.monitor_command = (
            list(monitor_command)
            if monitor_command is not None
            else _default_monitor_command()
        )
        self._process: Optional[subprocess.Popen] = None
        self._exiting = False

    def _say(self, text: str) -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def _ask(self, prompt: str) -> str:
        self.out.write(prompt)
        self.out.flush()
        return self.input_stream.readline().rstrip("\n")

    def _send(self, data: str) -> None:
        assert self._process is not None and self._process.stdin is not None
        self._process.stdin.write(data.encode("utf-8"))
        self._process.stdin.flush()

    def _read_response(self) -> str:
        """Collect what the monitor writes in answer to a request and echo it."""
        assert self._process is not None and self._process.stdout is not None
        time.sleep(self.response_delay)
        fd = self._process.stdout.fileno()
        chunks = []
        timeout = self.response_timeout
        while True:
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                break
            data = os.read(fd, 1024)
            if not data:
                break
            chunks.append(data)
            timeout = self.drain_timeout
        text = b"".join(chunks).decode("utf-8", errors="replace")
        self.out.write(text)
        self.out.flush()
        return text

    def _signal_monitor(self, signum: int) -> None:
        assert self._process is not None
        os.kill(self._process.pid, signum)

    def _close_pipes(self) -> None:
        if self._process is None:
            return
        for stream in (self._process.stdin, self._process.stdout):
            if stream is not None:
                stream.close()

    def start_monitor(self) -> bool:
        """Launch the monitor unless one is already running; return whether it started."""
        if self._process is not None:
            self._say("Monitor is already running")
            return False
        try:
            self._process = subprocess.Popen(
                self.monitor_command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                cwd=self.root,
                env=_child_environment(),
                bufsize=0,
            )
        except OSError as exc:
            self._say(f"fork failed: {exc.strerror or exc}")
            return False
        self._exiting = False
        self._say(f"Monitor started (PID = {self._process.pid})")
        return True

    def stop_monitor(self) -> bool:
        """Ask the running monitor to terminate; return whether a request was sent."""
        if self._process is None:
            self._say("No monitor is running")
            return False
        if self._exiting:
            self._say("Monitor is already exiting...")
            return False
        self._exiting = True
        self._signal_monitor(signal.SIGTERM)
        self._say("Stopping monitor...")
        return True

    def poll_monitor(self) -> Optional[int]:
        """Reap a stopping monitor that has ended; return its exit status, else None."""
        if self._process is None or not self._exiting:
            return None
        code = self._process.poll()
        if code is None:
            return None
        status = code if code >= 0 else 0
        self._say(f"Monitor terminated with status {status}")
        self._close_pipes()
        self._process = None
        self._exiting = False
        return status

    def _monitor_running(self) -> bool:
        if self._process is None:
            self._say("Monitor not running")
            return False
        return True

    def list_hunts(self) -> str:
        """Have the monitor list every hunt; return its answer."""
        if not self._monitor_running():
            return ""
        self._signal_monitor(signal.SIGUSR1)
        return self._read_response()

    def list_treasures(self, hunt_id: str) -> str:
        """Have the monitor list the treasures of one hunt; return its answer."""
        if not self._monitor_running():
            return ""
        self._signal_monitor(signal.SIGUSR2)
        self._send(f"{hunt_id}\n")
        return self._read_response()

    def view_treasure(self, hunt_id: str, treasure_id: str) -> str:
        """Have the monitor show one treasure; return its answer."""
        if not self._monitor_running():
            return ""
        self._signal_monitor(signal.SIGINT)
        self._send(f"{hunt_id} {treasure_id}\n")
        return self._read_response()

    def calculate_score(self) -> str:
        """Print the per-user scores of every directory below the root; return the text."""
        try:
            entries = sorted(os.scandir(self.root), key=lambda e: e.name)
        except OSError:
            self._say("Cannot open the current directory")
            return ""
        parts = []
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            parts.append(f"Scores for {entry.name}:\n")
            try:
                parts.append(format_scores(calculate_scores(entry.path)))
            except OSError:
                parts.append("Error at opening file\n")
        text = "".join(parts)
        self.out.write(text)
        self.out.flush()
        return text

    def handle_command(self, command: str) -> bool:
        """Carry out one command; return False when the hub should stop."""
        if self._exiting and command not in ("exit", "start_monitor"):
            self._say("Cannot accept commands until monitor has exited.")
            return True
        if command == "start_monitor":
            if self.start_monitor():
                time.sleep(self.startup_delay)
        elif command == "stop_monitor":
            self.stop_monitor()
        elif command == "exit":
            if self._process is not None:
                print("Monitor is still running.", file=sys.stderr)
                return True
            self._say("Exiting treasure hub")
            return False
        elif command in _MONITOR_COMMANDS and not self._monitor_running():
            pass
        elif command == "list_hunts":
            self.list_hunts()
        elif command == "list_treasures":
            self.list_treasures(self._ask("Enter hunt id: "))
        elif command == "view_treasure":
            hunt_id = self._ask("Enter hunt ID: ")
            treasure_id = self._ask("Enter treasure ID: ")
            self.view_treasure(hunt_id, treasure_id)
        elif command == "calculate_score":
            self.calculate_score()
        else:
            self._say(f"Unknown command: {command}")
        return True

    def run(self) -> int:
        """Read and execute commands until exit or end of input; return the exit status."""
        while True:
            self.poll_monitor()
            self.out.write(PROMPT)
            self.out.flush()
            line = self.input_stream.readline()
            if not line:
                break
            if not self.handle_command(line.rstrip("\n")):
                break
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the interactive hub over the current directory."""
    return Hub(".", sys.stdin, sys.stdout).run()


if __name__ == "__main__":
    sys.exit(main())