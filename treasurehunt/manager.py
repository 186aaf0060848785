"""Management of treasure hunts: directories of treasure records plus an operation log."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path
from typing import List, Optional, TextIO, Union

from treasurehunt.records import (
    TREASURES_FILE,
    Treasure,
    append_treasure,
    pack_treasure,
    read_treasures,
)

LOG_FILE = "logged_treasure_hunt.txt"
LOGS_DIR = "logs"


class HuntError(Exception):
    """A hunt operation could not be carried out."""


def _os_error(message: str, exc: OSError) -> HuntError:
    return HuntError(f"{message}: {exc.strerror or exc}")


def format_treasure(treasure: Treasure) -> str:
    """Human-readable description of a treasure, one field per line."""
    return (
        f"Treasure Id: {treasure.treasure_id}\n"
        f"Treasure User Name: {treasure.user_name}\n"
        f"Treasure latitude: {treasure.latitude:.2f}\n"
        f"Treasure longitude: {treasure.longitude:.2f}\n"
        f"Treasure clue text: {treasure.clue_text}\n"
        f"Treasure value: {treasure.value}\n"
    )


def _ask(prompt: str, input_stream: TextIO, output_stream: TextIO) -> str:
    output_stream.write(prompt)
    output_stream.flush()
    line = input_stream.readline()
    if not line:
        raise HuntError("Unexpected end of input")
    return line.rstrip("\n")


def _ask_number(prompt, kind, input_stream, output_stream):
    text = _ask(prompt, input_stream, output_stream).strip()
    try:
        return kind(text)
    except ValueError:
        raise HuntError(f"Invalid number: {text!r}") from None


def prompt_treasure(
    input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None
) -> Treasure:
    """Ask for every field of a treasure interactively."""
    inp = input_stream if input_stream is not None else sys.stdin
    out = output_stream if output_stream is not None else sys.stdout
    treasure_id = _ask("Enter treasure id: ", inp, out)
    user_name = _ask("Enter treasure user name: ", inp, out)
    latitude = _ask_number("Enter treasure latitude: ", float, inp, out)
    longitude = _ask_number("Enter treasure longitude: ", float, inp, out)
    clue_text = _ask("Enter treasure clue text: ", inp, out)
    value = _ask_number("Enter treasure value: ", int, inp, out)
    return Treasure(treasure_id, user_name, latitude, longitude, clue_text, value)


class HuntManager:
    """Operations on the hunts kept as directories below ``root``."""

    def __init__(
        self,
        root: Union[str, "os.PathLike[str]"] = ".",
        out: Optional[TextIO] = None,
    ) -> None:
        self.root = Path(root)
        self.out = out if out is not None else sys.stdout

    def _hunt_dir(self, hunt_id: str) -> Path:
        return self.root / hunt_id

    def _treasure_file(self, hunt_id: str) -> Path:
        return self._hunt_dir(hunt_id) / TREASURES_FILE

    def _existing_treasure_file(self, hunt_id: str) -> Path:
        if not self._hunt_dir(hunt_id).is_dir():
            raise HuntError(f"The {hunt_id} treasure directory does not exist!")
        path = self._treasure_file(hunt_id)
        if not path.is_file():
            raise HuntError(
                f"The {hunt_id}/{TREASURES_FILE} treasure file does not exist!"
            )
        return path

    def log_operation(self, hunt_id: str, message: str) -> None:
        """Append a line to the hunt's log and make sure the log's symlink exists."""
        log_path = self._hunt_dir(hunt_id) / LOG_FILE
        try:
            with open(log_path, "a", encoding="utf-8") as handle:
                handle.write(message + "\n")
        except OSError as exc:
            raise _os_error("Error opening or creating log file!", exc) from exc
        link = self.root / f"logged_hunt-{hunt_id}"
        if not os.path.lexists(link):
            try:
                os.symlink(f"{hunt_id}/{LOG_FILE}", link)
            except OSError as exc:
                raise _os_error("Error creating symbolic link!", exc) from exc

    def add_treasure(self, hunt_id: str, treasure: Treasure) -> None:
        """Store a treasure in a hunt, creating the hunt if needed."""
        pack_treasure(treasure)  # validate before touching the disk
        hunt_dir = self._hunt_dir(hunt_id)
        if not hunt_dir.is_dir():
            try:
                hunt_dir.mkdir()
            except OSError as exc:
                raise _os_error("Error creating treasure_hunt_directory!", exc) from exc
            self.log_operation(hunt_id, f"Treasure hunt {hunt_id} was created")
        try:
            append_treasure(self._treasure_file(hunt_id), treasure)
        except OSError as exc:
            raise _os_error("Error creating or opening treasure file!", exc) from exc
        self.log_operation(
            hunt_id,
            f"Treasure {treasure.treasure_id} was added to treasure hunt {hunt_id}",
        )

    def list_treasures(self, hunt_id: str) -> List[Treasure]:
        """Print a hunt's file details and all its treasures; return the treasures."""
        path = self._existing_treasure_file(hunt_id)
        try:
            st = path.stat()
            treasures = list(read_treasures(path))
        except OSError as exc:
            raise _os_error("Error opening treasure file!", exc) from exc
        self.out.write(f"Treasure hunt name: {hunt_id}\n")
        self.out.write(f"Total treasure file size: {st.st_size} bytes\n")
        self.out.write(
            "Last modification time of tresure file: "
            f"{time.ctime(st.st_mtime)}\n\n"
        )
        self.out.write("The file contains the treasures:\n")
        for treasure in treasures:
            self.out.write("\n")
            self.out.write(format_treasure(treasure))
        self.log_operation(hunt_id, f"Listed all treasures from treasure hunt {hunt_id}")
        return treasures

    def view_treasure(self, hunt_id: str, treasure_id: str) -> Optional[Treasure]:
        """Print the first treasure with the given id; return it, or None if absent."""
        path = self._existing_treasure_file(hunt_id)
        try:
            found = next(
                (t for t in read_treasures(path) if t.treasure_id == treasure_id),
                None,
            )
        except OSError as exc:
            raise _os_error("Error opening treasure file!", exc) from exc
        if found is not None:
            self.out.write(format_treasure(found))
            message = f"Viewed treasure {treasure_id} from treasure hunt {hunt_id}"
        else:
            self.out.write(
                f"Treasure {treasure_id} was not found in the treasure hunt {hunt_id}!\n"
            )
            message = f"Failed to view treasure {treasure_id} from treasure hunt {hunt_id}"
        self.log_operation(hunt_id, message)
        return found

    def remove_treasure(self, hunt_id: str, treasure_id: str) -> bool:
        """Delete the treasure with the given id from a hunt; return whether one was removed."""
        path = self._existing_treasure_file(hunt_id)
        try:
            treasures = list(read_treasures(path))
        except OSError as exc:
            raise _os_error("Error opening treasure file!", exc) from exc
        kept = [t for t in treasures if t.treasure_id != treasure_id]
        removed = len(kept) < len(treasures)
        if removed:
            try:
                with open(path, "wb") as handle:
                    handle.writelines(pack_treasure(t) for t in kept)
            except OSError as exc:
                raise _os_error("Error writing to file!", exc) from exc
            message = f"The treasure {treasure_id} was removed from treasure hunt {hunt_id}"
        else:
            message = f"Failed to remove treasure {treasure_id}  from treasure hunt {hunt_id}!"
        self.log_operation(hunt_id, message)
        return removed

    def remove_treasure_hunt(self, hunt_id: str) -> Path:
        """Delete a hunt, keeping its log under logs/; return the saved log's path."""
        hunt_dir = self._hunt_dir(hunt_id)
        if not hunt_dir.is_dir():
            raise HuntError(f"The {hunt_id} treasure directory does not exist!")
        logs_dir = self.root / LOGS_DIR
        if not os.path.exists(logs_dir):
            try:
                logs_dir.mkdir()
            except OSError as exc:
                raise _os_error("Error creating logs directory!", exc) from exc
        name = hunt_id.rsplit("/", 1)[-1]
        relative_log = f"{LOGS_DIR}/{name}.log"
        new_log = self.root / relative_log
        treasure_file = hunt_dir / TREASURES_FILE
        if treasure_file.is_file():
            try:
                treasure_file.unlink()
            except OSError as exc:
                raise _os_error("Error removing treasure file!", exc) from exc
        old_log = hunt_dir / LOG_FILE
        if old_log.is_file():
            try:
                os.rename(old_log, new_log)
            except OSError as exc:
                raise _os_error("Error moving log file!", exc) from exc
        try:
            hunt_dir.rmdir()
        except OSError as exc:
            raise _os_error("Error removing hunt directory!", exc) from exc
        self.out.write(
            f"Treasure hunt {hunt_id} was removed successfully! Log saved to {relative_log}\n"
        )
        return new_log