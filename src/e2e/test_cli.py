import json
from pathlib import Path

import pytest

from namedir.__main__ import main


def _seed(tmp: Path) -> str:
    p = tmp / "users.txt"
    p.write_text("Ahmed Naciri\nAmine Tazi\nBrahim Idrissi\n", encoding="utf-8")
    return str(p)


def test_cli_letter_page_json(tmp_path: Path, capsys):
    rc = main(["--data", _seed(tmp_path), "--db", "memory://", "--letter", "A", "-k", "1", "--json"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["entries"][0]["displayName"] == "Ahmed Naciri"
    assert out["hasMore"] is True


def test_cli_search_then_reload_sqlite(tmp_path: Path, capsys):
    data = _seed(tmp_path)
    db = f"sqlite:///{tmp_path / 'indexes.sqlite'}"
    assert main(["--data", data, "--db", db, "--q", "tazi", "--json"]) == 0
    first = json.loads(capsys.readouterr().out)
    assert [e["id"] for e in first["entries"]] == [2]

    assert main(["--data", data, "--db", db, "--stats", "--json"]) == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats["B"] == {"count": 1, "start": 2}


def test_cli_missing_dataset_returns_error(tmp_path: Path, capsys):
    rc = main(["--data", str(tmp_path / "missing.txt"), "--db", "memory://"])
    assert rc == 2
    assert "data source unavailable" in capsys.readouterr().err


def test_cli_rejects_bad_page(tmp_path: Path):
    with pytest.raises(SystemExit):
        main(["--data", _seed(tmp_path), "--db", "memory://", "--page", "0"])
