from conftest import exited, killed

from smallsh.state import (
    BACKGROUND_DONE,
    MODE_CHANGED,
    ChildRecord,
    Role,
    describe_wait_status,
)


def test_initial_status_is_exit_zero(state):
    assert state.status_text() == "exit value 0"
    assert not state.foreground_running


def test_describe_wait_status():
    assert describe_wait_status(exited(7)) == "exit value 7"
    assert describe_wait_status(killed(9)) == "terminated by signal 9"


def test_foreground_exit_records_status_and_clears_slot(state):
    state.add_child(ChildRecord(100, Role.FOREGROUND))
    assert state.foreground_running
    state.child_reaped(100, exited(7))
    assert not state.foreground_running
    assert state.status_text() == "exit value 7"


def test_foreground_signal_replaces_exit_status(state):
    state.add_child(ChildRecord(100, Role.FOREGROUND))
    state.child_reaped(100, exited(3))
    state.add_child(ChildRecord(101, Role.FOREGROUND))
    state.child_reaped(101, killed(9))
    assert state.status_text() == "terminated by signal 9"
    # the previous value is kept but no longer reported
    assert state.exit_status == 3

    state.add_child(ChildRecord(102, Role.FOREGROUND))
    state.child_reaped(102, exited(0))
    assert state.status_text() == "exit value 0"


def test_background_exit_queues_notice_without_touching_status(state):
    state.add_child(ChildRecord(200, Role.BACKGROUND))
    state.child_reaped(200, exited(5))
    assert state.background == {}
    assert list(state.events) == [(BACKGROUND_DONE, 200, exited(5))]
    assert state.status_text() == "exit value 0"


def test_background_pid_reaped_only_once(state):
    state.add_child(ChildRecord(200, Role.BACKGROUND))
    state.child_reaped(200, exited(0))
    state.child_reaped(200, exited(0))
    assert len(state.events) == 1


def test_unknown_pid_is_ignored(state):
    state.add_child(ChildRecord(100, Role.FOREGROUND))
    state.child_reaped(999, exited(1))
    assert state.foreground_running
    assert not state.events


def test_toggle_foreground_only_queues_notices(state):
    state.toggle_foreground_only()
    assert state.foreground_only
    state.toggle_foreground_only()
    assert not state.foreground_only
    assert list(state.events) == [(MODE_CHANGED, True), (MODE_CHANGED, False)]


def test_tracked_pids_include_foreground(state):
    state.add_child(ChildRecord(1, Role.BACKGROUND))
    state.add_child(ChildRecord(2, Role.BACKGROUND))
    state.add_child(ChildRecord(3, Role.FOREGROUND))
    assert sorted(state.tracked_pids()) == [1, 2, 3]
