import io
import time

import pytest

from treasurehunt.hub import Hub
from treasurehunt.manager import HuntManager, format_treasure
from treasurehunt.records import Treasure
from treasurehunt.scores import calculate_scores, format_scores


T1 = Treasure("t1", "alice", 45.5, 21.25, "under the bridge", 10)
T2 = Treasure("t2", "bob", 46.0, 22.0, "behind the tree", 7)


@pytest.fixture
def populated(tmp_path):
    manager = HuntManager(tmp_path, io.StringIO())
    manager.add_treasure("h1", T1)
    manager.add_treasure("h1", T2)
    return tmp_path


@pytest.fixture
def make_hub(populated):
    hubs = []

    def make(lines=""):
        out = io.StringIO()
        hub = Hub(populated, io.StringIO(lines), out)
        hubs.append(hub)
        return hub, out

    yield make
    for hub in hubs:
        proc = hub._process
        if proc is not None and proc.poll() is None:
            proc.kill()
            proc.wait()


def test_unknown_command(make_hub):
    hub, out = make_hub()
    assert hub.handle_command("dance") is True
    assert out.getvalue() == "Unknown command: dance\n"


def test_commands_without_monitor(make_hub):
    hub, out = make_hub()
    assert hub.list_hunts() == ""
    assert hub.stop_monitor() is False
    assert hub.poll_monitor() is None
    assert out.getvalue() == "Monitor not running\nNo monitor is running\n"


def test_list_treasures_command_without_monitor_does_not_prompt(make_hub):
    hub, out = make_hub("h1\n")
    hub.handle_command("list_treasures")
    assert out.getvalue() == "Monitor not running\n"


def test_exit_without_monitor(make_hub):
    hub, out = make_hub()
    assert hub.handle_command("exit") is False
    assert out.getvalue() == "Exiting treasure hub\n"


def test_run_loop_until_exit(make_hub):
    hub, out = make_hub("dance\nexit\nnever_reached\n")
    assert hub.run() == 0
    text = out.getvalue()
    assert text.count("treasure_hub > ") == 2
    assert "Unknown command: dance\n" in text
    assert text.endswith("Exiting treasure hub\n")
    assert "never_reached" not in text


def test_run_stops_at_end_of_input(make_hub):
    hub, out = make_hub("")
    assert hub.run() == 0
    assert out.getvalue() == "treasure_hub > "


def test_calculate_score(make_hub, populated):
    hub, out = make_hub()
    text = hub.calculate_score()
    expected = "Scores for h1:\n" + format_scores(calculate_scores(populated / "h1"))
    assert expected in text
    assert "alice score: 10\n" in text
    assert "bob score: 7\n" in text
    assert out.getvalue() == text


def test_calculate_score_reports_missing_file(make_hub, populated):
    (populated / "empty").mkdir()
    hub, _ = make_hub()
    text = hub.calculate_score()
    assert "Scores for empty:\nError at opening file\n" in text


def test_monitor_queries(make_hub, capsys):
    hub, out = make_hub("h1\n")
    assert hub.start_monitor() is True
    assert out.getvalue().startswith("Monitor started (PID = ")
    time.sleep(1.5)

    assert hub.start_monitor() is False
    assert "Monitor is already running\n" in out.getvalue()

    hunts = hub.list_hunts()
    assert hunts.startswith("Available hunts:\n")
    assert "- h1: 2 treasures\n" in hunts

    viewed = hub.view_treasure("h1", "t2")
    assert format_treasure(T2) in viewed

    missing = hub.view_treasure("h1", "t9")
    assert "Treasure t9 was not found in the treasure hunt h1!" in missing

    hub.handle_command("list_treasures")
    text = out.getvalue()
    assert "Enter hunt id: " in text
    assert "Treasure hunt name: h1\n" in text
    assert format_treasure(T1) in text

    assert hub.handle_command("exit") is True
    assert "Monitor is still running." in capsys.readouterr().err


def test_stop_monitor(make_hub):
    hub, out = make_hub()
    hub.start_monitor()
    time.sleep(1.5)
    assert hub.stop_monitor() is True
    assert "Stopping monitor...\n" in out.getvalue()

    assert hub.stop_monitor() is False
    assert "Monitor is already exiting...\n" in out.getvalue()

    assert hub.handle_command("list_hunts") is True
    assert "Cannot accept commands until monitor has exited.\n" in out.getvalue()

    status = None
    deadline = time.monotonic() + 15
    while status is None and time.monotonic() < deadline:
        status = hub.poll_monitor()
        time.sleep(0.1)
    assert status == 0
    assert "Monitor terminated with status 0\n" in out.getvalue()

    assert hub.handle_command("exit") is False
    assert out.getvalue().endswith("Exiting treasure hub\n")