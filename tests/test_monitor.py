import io
import os
import signal
import threading
import time

import pytest

from treasurehunt.manager import HuntManager
from treasurehunt.monitor import Monitor, format_hunts, list_hunts
from treasurehunt.records import Treasure


def _treasure(tid, user="alice", value=1):
    return Treasure(tid, user, 1.5, 2.5, "clue", value)


@pytest.fixture
def root(tmp_path):
    manager = HuntManager(tmp_path, io.StringIO())
    manager.add_treasure("h1", _treasure("t1"))
    manager.add_treasure("h1", _treasure("t2"))
    manager.add_treasure("h2", _treasure("t3"))
    (tmp_path / "empty_dir").mkdir()
    return tmp_path


@pytest.fixture
def restore_signals():
    signums = (signal.SIGUSR1, signal.SIGUSR2, signal.SIGINT, signal.SIGTERM)
    saved = {signum: signal.getsignal(signum) for signum in signums}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)


def _wait_for(predicate):
    for _ in range(200):
        if predicate():
            break
        time.sleep(0.01)


def test_list_hunts_counts_treasures(root):
    assert list_hunts(root) == [("h1", 2), ("h2", 1)]


def test_list_hunts_skips_symlinks_and_plain_dirs(root):
    names = [name for name, _ in list_hunts(root)]
    assert "empty_dir" not in names
    assert all(not name.startswith("logged_hunt-") for name in names)


def test_format_hunts():
    assert format_hunts([("h1", 2)]) == "Available hunts:\n- h1: 2 treasures\n"
    assert format_hunts([]) == "Available hunts:\n"


def test_handle_list_hunts_writes_listing(root):
    out = io.StringIO()
    hunts = Monitor(root, io.StringIO(), out).handle_list_hunts()
    assert out.getvalue() == format_hunts(hunts)


def test_handle_list_treasures(root):
    out = io.StringIO()
    treasures = Monitor(root, io.StringIO(), out).handle_list_treasures("h1\n")
    assert [t.treasure_id for t in treasures] == ["t1", "t2"]
    assert "Treasure hunt name: h1" in out.getvalue()


def test_handle_list_treasures_missing_hunt(root):
    out = io.StringIO()
    assert Monitor(root, io.StringIO(), out).handle_list_treasures("ghost\n") is None
    assert "The ghost treasure directory does not exist!" in out.getvalue()


def test_handle_list_treasures_empty_line(root, capsys):
    assert Monitor(root, io.StringIO(), io.StringIO()).handle_list_treasures("") is None
    assert "Invalid format" in capsys.readouterr().err


def test_handle_view_treasure(root):
    out = io.StringIO()
    found = Monitor(root, io.StringIO(), out).handle_view_treasure("h1 t2\n")
    assert found == _treasure("t2")
    assert "Treasure Id: t2" in out.getvalue()


def test_handle_view_treasure_not_found(root):
    out = io.StringIO()
    assert Monitor(root, io.StringIO(), out).handle_view_treasure("h1 zz\n") is None
    assert "Treasure zz was not found in the treasure hunt h1!" in out.getvalue()


def test_handle_view_treasure_bad_format(root, capsys):
    assert Monitor(root, io.StringIO(), io.StringIO()).handle_view_treasure("h1\n") is None
    assert "Invalid format" in capsys.readouterr().err


def test_sigusr1_lists_hunts(root, restore_signals):
    out = io.StringIO()
    monitor = Monitor(root, io.StringIO(), out)
    monitor.install_signal_handlers()
    os.kill(os.getpid(), signal.SIGUSR1)
    _wait_for(lambda: out.getvalue())
    assert out.getvalue() == format_hunts([("h1", 2), ("h2", 1)])


def test_sigusr2_reads_hunt_from_input(root, restore_signals):
    out = io.StringIO()
    monitor = Monitor(root, io.StringIO("h2\n"), out)
    monitor.install_signal_handlers()
    os.kill(os.getpid(), signal.SIGUSR2)
    _wait_for(lambda: "Treasure Id" in out.getvalue())
    assert "Treasure Id: t3" in out.getvalue()


def test_run_stops_on_sigterm(root, restore_signals):
    monitor = Monitor(root, io.StringIO(), io.StringIO())
    monitor.exit_delay = 0
    timer = threading.Timer(0.2, os.kill, (os.getpid(), signal.SIGTERM))
    timer.start()
    try:
        assert monitor.run() == 0
    finally:
        timer.cancel()