from __future__ import annotations

import importlib
import json
import textwrap
from pathlib import Path

import pytest


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("analytics_manager.main")

    assert hasattr(module, "app")
    assert module.app is not None


def _write_manager_module(tmp_path: Path, monkeypatch) -> None:
    module_path = tmp_path / "replay_listeners.py"
    module_path.write_text(
        textwrap.dedent(
            """
            from analytics_manager import AnalyticsManager, dynamic, static

            def build():
                manager = AnalyticsManager()
                manager.register("ACTION1", static({"c": "Cat1"}))
                manager.register("ACTION2", dynamic(lambda event, pre, post: post["data"]))
                return manager
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))


def test_replay_writes_payloads_to_jsonl(tmp_path: Path, monkeypatch) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    _write_manager_module(tmp_path, monkeypatch)
    events = tmp_path / "events.jsonl"
    events.write_text(
        "\n".join(
            json.dumps(event)
            for event in (
                {"name": "ACTION1"},
                {"name": "ignored", "data": {"n": 0}},
                {"name": "ACTION2", "data": {"n": 2}},
            )
        ),
        encoding="utf-8",
    )
    output = tmp_path / "out.jsonl"

    result = typer_testing.CliRunner().invoke(
        app,
        ["replay", str(events), "--manager", "replay_listeners:build", "--output", str(output)],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "payloads" in result.stdout
    records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert records == [
        {"payload": {"c": "Cat1"}, "state": {}},
        {"payload": {"n": 2}, "state": {"data": {"n": 2}}},
    ]


def test_replay_rejects_bad_manager_path(tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    events = tmp_path / "events.jsonl"
    events.write_text('{"name": "ACTION1"}\n', encoding="utf-8")

    result = typer_testing.CliRunner().invoke(app, ["replay", str(events), "--manager", "no_colon_here"])

    assert result.exit_code != 0


def test_start_prints_settings() -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    result = typer_testing.CliRunner().invoke(app, ["start"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "snapshot_mode" in result.stdout


def test_replay_reports_malformed_event_line(tmp_path: Path, monkeypatch) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    _write_manager_module(tmp_path, monkeypatch)
    events = tmp_path / "events.jsonl"
    events.write_text('{"name": "ACTION1"}\n{not json\n', encoding="utf-8")

    result = typer_testing.CliRunner().invoke(app, ["replay", str(events), "--manager", "replay_listeners:build"])

    assert result.exit_code == 2
    assert not isinstance(result.exception, json.JSONDecodeError)


def test_replay_uses_custom_reducer_and_initial_state(tmp_path: Path, monkeypatch) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    _write_manager_module(tmp_path, monkeypatch)
    (tmp_path / "replay_reducers.py").write_text(
        textwrap.dedent(
            """
            def counting(state, event):
                return {"data": {"n": state["data"]["n"] + 1}}
            """
        ),
        encoding="utf-8",
    )
    events = tmp_path / "events.jsonl"
    events.write_text('{"name": "ACTION2"}\n{"name": "ACTION2"}\n', encoding="utf-8")
    output = tmp_path / "out.jsonl"

    result = typer_testing.CliRunner().invoke(
        app,
        [
            "replay",
            str(events),
            "--manager",
            "replay_listeners:build",
            "--reducer",
            "replay_reducers:counting",
            "--initial-state",
            '{"data": {"n": 10}}',
            "--output",
            str(output),
        ],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert [record["payload"] for record in records] == [{"n": 11}, {"n": 12}]


def test_replay_rejects_malformed_initial_state(tmp_path: Path, monkeypatch) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    _write_manager_module(tmp_path, monkeypatch)
    events = tmp_path / "events.jsonl"
    events.write_text('{"name": "ACTION1"}\n', encoding="utf-8")

    result = typer_testing.CliRunner().invoke(
        app, ["replay", str(events), "--manager", "replay_listeners:build", "--initial-state", "{oops"]
    )

    assert result.exit_code == 2


def test_replay_keeps_a_transport_the_manager_already_has(tmp_path: Path, monkeypatch) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from analytics_manager.main import app

    (tmp_path / "replay_preset.py").write_text(
        textwrap.dedent(
            """
            from analytics_manager import AnalyticsManager, static
            from analytics_manager.transports import RecordingTransport

            transport = RecordingTransport()
            manager = AnalyticsManager()
            manager.set_transport(transport)
            manager.register("ACTION1", static({"c": "Cat1"}))
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    events = tmp_path / "events.jsonl"
    events.write_text('{"name": "ACTION1"}\n{"name": "ACTION1"}\n', encoding="utf-8")
    output = tmp_path / "unused.jsonl"

    result = typer_testing.CliRunner().invoke(
        app,
        ["replay", str(events), "--manager", "replay_preset:manager", "--output", str(output)],
        catch_exceptions=False,
    )

    preset = importlib.import_module("replay_preset")
    assert result.exit_code == 0
    assert "'payloads': None" in result.stdout
    assert preset.transport.payloads == [{"c": "Cat1"}, {"c": "Cat1"}]
    assert not output.exists()
