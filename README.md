# treasurehunt

This package creates and manages treasure hunts that are kept in plain
directories on disk. Each hunt is a directory named after its hunt id and
holds two files:

- `treasures.dat` holds the treasures as fixed-size binary records.
- `logged_treasure_hunt.txt` holds a log with one line for every operation on the hunt.

Each logged operation checks for a symbolic link `logged_hunt-<hunt_id>` in
the root directory, which is the working directory for the commands, and
creates the link if it is missing. The link points at the hunt's log. When a
hunt is removed, its log is moved to `logs/<name>.log`. Here `<name>` is the
last `/`-separated part of the hunt id.

A treasure has these fields:

- an id
- a user name
- a latitude
- a longitude
- a clue text
- a value, which is a 32-bit signed integer

The text fields are truncated to fit their fixed-size fields: 63 bytes for the
id, 63 for the user name and 127 for the clue, all in UTF-8.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Managing treasures

```
treasure-manager --add <hunt_id>
treasure-manager --list <hunt_id>
treasure-manager --view <hunt_id> <treasure_id>
treasure-manager --remove_treasure <hunt_id> <treasure_id>
treasure-manager --remove_treasure_hunt <hunt_id>
```

- `--add` asks for each field of the new treasure on standard input. It creates the hunt directory if it does not exist yet.
- `--list` shows the hunt name, the size and last modification time of the treasure file, and then every treasure in the file.
- `--view` shows the first treasure that has the given id.
- `--remove_treasure` deletes every treasure that has the given id and keeps the others in their order.
- `--remove_treasure_hunt` deletes the treasure file and the hunt directory, and keeps the log.

The command exits with status 1 in these cases:

- The arguments are wrong. It then prints a usage line.
- The operation is unknown. It then prints `The user introduced an invalid operation!`.
- The hunt or its treasure file does not exist.
- A file operation fails.

## Scores

```
treasure-scores <hunt_id>
```

This adds up the values of the treasures in a hunt for each user. It prints one
line per user, in the order the users first appear:

```
alice score: 30
bob score: 5
```

## Monitor and hub

`treasure-hub` is an interactive prompt. It starts a monitor as a child
process (`python -m treasurehunt.monitor`, the same program as
`treasure-monitor`) in the current directory. It sends requests to the monitor
as signals, writes the arguments to the monitor's standard input, and reads
the answers from its standard output:

| request         | signal  | arguments on the monitor's input |
|-----------------|---------|----------------------------------|
| list hunts      | SIGUSR1 | none                             |
| list treasures  | SIGUSR2 | `<hunt_id>`                      |
| view treasure   | SIGINT  | `<hunt_id> <treasure_id>`        |
| stop            | SIGTERM | none                             |

After SIGTERM the monitor waits three seconds and then exits with status 0.

The hub accepts these commands:

| command           | what it does |
|-------------------|--------------|
| `start_monitor`   | Starts the monitor process. |
| `list_hunts`      | Lists every directory below the current directory that holds a `treasures.dat`, with its number of treasures. |
| `list_treasures`  | Asks for a hunt id and lists the treasures of that hunt. |
| `view_treasure`   | Asks for a hunt id and a treasure id and shows that treasure. |
| `calculate_score` | Prints the scores of every directory below the current directory. A directory without a treasure file shows `Error at opening file`. |
| `stop_monitor`    | Asks the monitor to stop. |
| `exit`            | Leaves the hub. This is refused while a monitor process still runs. |

While the monitor is stopping, the hub accepts only `start_monitor` and `exit`.
Before each prompt, the hub checks whether a stopping monitor has ended. If it
has, the hub reports the monitor's exit status.

```
$ treasure-hub
treasure_hub > start_monitor
Monitor started (PID = 4242)
treasure_hub > list_hunts
Available hunts:
- hunt1: 3 treasures
treasure_hub > stop_monitor
Stopping monitor...
treasure_hub > exit
Monitor is still running.
treasure_hub > exit
Monitor terminated with status 0
treasure_hub > exit
Exiting treasure hub
```

The first `exit` in this session is refused because the monitor is still
shutting down. By the time of the second `exit`, the monitor has ended, so the
hub reports its status before the prompt. Like every other command while the
monitor is stopping, that second `exit` is refused. The third `exit` leaves
the hub.

## Library use

The same operations are available from Python:

```python
from treasurehunt.manager import HuntManager
from treasurehunt.records import Treasure

manager = HuntManager(".", None)
manager.add_treasure(
    "hunt1",
    Treasure("t1", "alice", 45.75, 21.23, "under the old oak", 10),
)
found = manager.view_treasure("hunt1", "t1")       # the Treasure, or None
removed = manager.remove_treasure("hunt1", "t1")   # True if one was removed
```

`HuntManager` prints to its `out` stream, which is standard output by default.
When an operation fails, it raises `treasurehunt.manager.HuntError`.
`treasurehunt.manager` also provides `format_treasure` and `prompt_treasure`.

`treasurehunt.records` reads and writes the treasure file format. It provides:

- `Treasure`
- `pack_treasure` and `unpack_treasure`
- `read_treasures`, `append_treasure` and `count_treasures`

`treasurehunt.scores` provides `calculate_scores` and `format_scores`.

`treasurehunt.monitor` provides `list_hunts`, `format_hunts` and the `Monitor`
class. `treasurehunt.hub` provides the `Hub` class.

## Limitations

- The monitor and the hub depend on POSIX signals, so they do not work on Windows.
- Hunt logs depend on symbolic links, so they need a system that supports them.
- Files are not locked. Running several managers on one hunt at the same time can interleave their writes.