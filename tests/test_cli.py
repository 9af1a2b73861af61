import pytest
from loguru import logger

import main
from secret_santa.services.output import read_summary


@pytest.fixture(autouse=True)
def cli_env(monkeypatch):
    monkeypatch.setenv("LOG_PATH", "")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("SANTA_SEED", "2024")
    monkeypatch.setenv("SANTA_SEARCH_TIMEOUT_S", "5")
    yield
    logger.remove()
    logger.add(main.sys.stderr)


def test_help_exits_with_failure(capsys):
    assert main.main(["--help"]) == main.EXIT_FAILURE
    assert "Usage:" in capsys.readouterr().out


def test_too_many_arguments(capsys, tmp_path):
    assert main.main(["a", "b", str(tmp_path / "c")]) == main.EXIT_FAILURE
    assert "Usage:" in capsys.readouterr().out


def test_builtin_roster_into_new_directory(tmp_path):
    out = tmp_path / "santas"
    assert main.main([str(out)]) == main.EXIT_SUCCESS
    assert read_summary(out / "details.txt") == [("p1", "p3"), ("p2", "p1"), ("p3", "p2")]
    assert (out / "p1").read_text(encoding="utf-8") == "p3\n"


def test_builtin_roster_into_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main.main([]) == main.EXIT_SUCCESS
    assert sorted(p.name for p in tmp_path.iterdir()) == ["details.txt", "p1", "p2", "p3"]


def test_existing_output_directory(tmp_path):
    assert main.main([str(tmp_path)]) == main.EXIT_FAILURE
    assert list(tmp_path.iterdir()) == []


def test_input_file(tmp_path):
    people = tmp_path / "people.txt"
    people.write_text("ann\nbea\n\nbea\n\n\ncid\nann\n\ndan\n\n", encoding="utf-8")
    out = tmp_path / "out"

    assert main.main([str(people), str(out)]) == main.EXIT_SUCCESS

    pairs = dict(read_summary(out / "details.txt"))
    assert sorted(pairs) == ["ann", "bea", "cid", "dan"]
    assert sorted(pairs.values()) == ["ann", "bea", "cid", "dan"]
    assert pairs["ann"] != "bea"
    assert pairs["cid"] != "ann"
    for giver, receiver in pairs.items():
        assert giver != receiver
        assert pairs[receiver] != giver


def test_duplicate_name_writes_nothing(tmp_path):
    people = tmp_path / "people.txt"
    people.write_text("ann\n\n\nbea\n\n\nann\n\n", encoding="utf-8")
    out = tmp_path / "out"

    assert main.main([str(people), str(out)]) == main.EXIT_FAILURE
    assert not out.exists()


def test_search_timeout_writes_nothing(tmp_path, monkeypatch):
    monkeypatch.setenv("SANTA_SEARCH_TIMEOUT_S", "1")
    monkeypatch.setenv("SANTA_ATTEMPT_TIMEOUT_MS", "10")
    people = tmp_path / "people.txt"
    people.write_text("ann\n\n\nbea\n\n", encoding="utf-8")
    out = tmp_path / "out"

    assert main.main([str(people), str(out)]) == main.EXIT_FAILURE
    assert not out.exists()


def test_output_directory_cannot_be_created(tmp_path):
    (tmp_path / "f").write_text("", encoding="utf-8")
    assert main.main([str(tmp_path / "f" / "out")]) == main.EXIT_FAILURE
    assert (tmp_path / "f").read_text(encoding="utf-8") == ""


def test_invalid_setting_exits_with_failure(tmp_path, monkeypatch):
    monkeypatch.setenv("SANTA_ATTEMPT_TIMEOUT_MS", "soon")
    assert main.main([str(tmp_path / "out")]) == main.EXIT_FAILURE
    assert not (tmp_path / "out").exists()


def test_invalid_log_level_exits_with_failure(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    assert main.main([str(tmp_path / "out")]) == main.EXIT_FAILURE
    assert not (tmp_path / "out").exists()


def test_output_directory_holding_log_file_is_refused(tmp_path, monkeypatch):
    out = tmp_path / "logs"
    monkeypatch.setenv("LOG_PATH", str(out / "secret_santa.log"))
    assert main.main([str(out)]) == main.EXIT_FAILURE
    assert not out.exists()


def test_log_file_beside_output_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_PATH", str(tmp_path / "logs" / "secret_santa.log"))
    out = tmp_path / "santas"
    assert main.main([str(out)]) == main.EXIT_SUCCESS
    assert (out / "details.txt").exists()
    assert (tmp_path / "logs" / "secret_santa.log").exists()
