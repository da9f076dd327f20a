import pytest

from ossim.data_loader import (
    load_actions, load_processes, load_resources, parse_action_line, parse_process_line,
    parse_resource_line,
)
from ossim.errors import LoadError
from ossim.process_model import Action, ActionKind, Process, Resource


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_process_line_trims_whitespace():
    assert parse_process_line("  P1 , 4, 0 ,  2 ") == Process("P1", 4, 0, 2)


def test_parse_resource_line():
    assert parse_resource_line("R1, 3") == Resource("R1", 3)


def test_parse_action_line_is_case_insensitive():
    assert parse_action_line("P1, write, R1, 5") == Action("P1", ActionKind.WRITE, "R1", 5)


@pytest.mark.parametrize("line", [
    "P1, four, 0, 1",
    "P1, 4, 0",
    "P1, 0, 0, 1",
    "P1, 4, -2, 1",
    ", 4, 0, 1",
])
def test_parse_process_line_rejects_bad_input(line):
    with pytest.raises(LoadError):
        parse_process_line(line)


@pytest.mark.parametrize("line", ["R1, 0", "R1", "R1, x"])
def test_parse_resource_line_rejects_bad_input(line):
    with pytest.raises(LoadError):
        parse_resource_line(line)


@pytest.mark.parametrize("line", ["P1, LOCK, R1, 0", "P1, READ, R1, -1", "P1, READ, R1"])
def test_parse_action_line_rejects_bad_input(line):
    with pytest.raises(LoadError):
        parse_action_line(line)


def test_load_processes_skips_blank_and_comments(tmp_path):
    path = _write(tmp_path, "procs.txt", "# pid, burst, arrival, priority\nP1, 4, 0, 1\n\nP2, 2, 1, 2\n")
    assert load_processes(path) == [Process("P1", 4, 0, 1), Process("P2", 2, 1, 2)]


def test_load_error_reports_line_number(tmp_path):
    path = _write(tmp_path, "procs.txt", "P1, 4, 0, 1\nP2, x, 1, 2\n")
    with pytest.raises(LoadError) as excinfo:
        load_processes(path)
    assert excinfo.value.line_no == 2
    assert ":2:" in str(excinfo.value)


def test_load_processes_rejects_duplicate_pid(tmp_path):
    path = _write(tmp_path, "procs.txt", "P1, 4, 0, 1\nP1, 2, 1, 2\n")
    with pytest.raises(LoadError):
        load_processes(path)


def test_load_resources_rejects_duplicate_name(tmp_path):
    path = _write(tmp_path, "res.txt", "R1, 1\nR1, 2\n")
    with pytest.raises(LoadError):
        load_resources(path)


def test_load_actions(tmp_path):
    path = _write(tmp_path, "actions.txt", "P1, READ, R1, 0\nP2, WRITE, R1, 0\n")
    actions = load_actions(path)
    assert [a.kind for a in actions] == [ActionKind.READ, ActionKind.WRITE]


def test_missing_file(tmp_path):
    with pytest.raises(LoadError):
        load_resources(tmp_path / "nope.txt")


def test_load_actions_rejects_duplicate_key(tmp_path):
    path = _write(tmp_path, "actions.txt", "P1, READ, R1, 0\nP1, WRITE, R1, 0\n")
    with pytest.raises(LoadError):
        load_actions(path)
