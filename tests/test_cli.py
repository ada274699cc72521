import json
import logging

import pytest

from emltrust import cli
from emltrust.config import settings
from emltrust.services import storage


@pytest.fixture(autouse=True)
def local_history(monkeypatch, tmp_path):
    path = tmp_path / "history.json"
    monkeypatch.setattr(settings, "REDIS_URL", "")
    monkeypatch.setattr(settings, "HISTORY_PATH", str(path))
    monkeypatch.setattr(storage, "_backend", None)
    return path


@pytest.fixture
def mailbox(tmp_path, make_eml):
    folder = tmp_path / "mail"
    folder.mkdir()
    (folder / "b.eml").write_bytes(make_eml(auth_results="spf=pass dkim=pass dmarc=pass", subject="Second"))
    (folder / "a.eml").write_bytes(make_eml(auth_results="spf=fail", subject="First"))
    (folder / "notes.txt").write_text("not mail")
    return folder


def run(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_check_without_eml_files_exits_1(tmp_path, capsys):
    assert run(["check", str(tmp_path)]) == 1
    assert "No .eml files found." in capsys.readouterr().err


def test_check_directory_prints_report_and_records_history(zone, mailbox, capsys):
    assert run(["check", "--no-dns", str(mailbox)]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["files_analyzed"] == 2
    assert [r["file"] for r in report["results"]] == [str(mailbox / "a.eml"), str(mailbox / "b.eml")]
    assert report["results"][1]["security"]["score"] == 100
    assert zone.queries == []

    assert run(["history", "list"]) == 0
    entries = json.loads(capsys.readouterr().out)
    assert [e["subject"] for e in entries] == ["Second", "First"]


def test_check_no_history_leaves_store_empty(zone, mailbox, local_history, capsys):
    assert run(["check", "--no-dns", "--no-history", str(mailbox / "a.eml")]) == 0
    assert not local_history.exists()


def test_check_writes_report_file(zone, mailbox, tmp_path, capsys):
    out = tmp_path / "report.json"

    assert run(["check", "--no-dns", "-o", str(out), str(mailbox / "b.eml")]) == 0

    captured = capsys.readouterr()
    assert captured.out == ""
    assert f"Report written to {out}" in captured.err
    assert json.loads(out.read_text())["results"][0]["security"]["grade"] == "A"


def test_check_skips_other_paths_with_warning(zone, mailbox, caplog, capsys):
    with caplog.at_level(logging.WARNING, logger="emltrust.cli"):
        assert run(["check", "--no-dns", str(mailbox / "notes.txt"), str(mailbox / "a.eml")]) == 0

    assert "Skipping" in caplog.text
    assert json.loads(capsys.readouterr().out)["files_analyzed"] == 1


def test_check_counts_failed_files(monkeypatch, mailbox, capsys):
    async def broken(raw, **kwargs):
        raise ValueError("unparseable")

    monkeypatch.setattr(cli, "analyze_eml", broken)

    assert run(["check", str(mailbox)]) == 0

    captured = capsys.readouterr()
    assert "2 file(s) failed." in captured.err
    assert json.loads(captured.out)["files_analyzed"] == 0


def test_history_remove_and_clear(zone, mailbox, capsys):
    run(["check", "--no-dns", str(mailbox)])
    capsys.readouterr()
    run(["history", "list"])
    entries = json.loads(capsys.readouterr().out)

    assert run(["history", "remove", entries[0]["id"]]) == 0
    assert "1 history entries left." in capsys.readouterr().err

    assert run(["history", "clear"]) == 0
    run(["history", "list"])
    assert json.loads(capsys.readouterr().out) == []


def test_history_remove_needs_id(capsys):
    assert run(["history", "remove"]) == 2
    assert "remove needs an entry id" in capsys.readouterr().err
