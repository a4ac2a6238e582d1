from pathlib import Path

import pytest

from modrewrite.run import main


def test_transform_file_to_stdout(tmp_path: Path, capsys) -> None:
    src = tmp_path / "index.js"
    src.write_text('import { a } from "m";\n', encoding="utf-8")

    assert main(["transform", str(src)]) == 0

    assert capsys.readouterr().out == 'var mod$0 = require("m");\nvar a = mod$0.a;\n'


def test_transform_file_to_out_dir(tmp_path: Path) -> None:
    src = tmp_path / "index.js"
    src.write_text("export var x = 1;\n", encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    assert main(["transform", str(src), "--out", str(out_dir)]) == 0

    assert (out_dir / "index.js").read_text(encoding="utf-8") == "var x = module.exports.x = 1;\n"


def test_transform_file_failure_exits_non_zero(tmp_path: Path, capsys) -> None:
    src = tmp_path / "types.ts"
    src.write_text("export interface I {}\n", encoding="utf-8")

    assert main(["transform", str(src)]) == 1

    assert "interface_declaration" in capsys.readouterr().err


def test_transform_file_not_utf8_exits_non_zero(tmp_path: Path, capsys) -> None:
    src = tmp_path / "latin1.js"
    src.write_bytes(b'var s = "caf\xe9";\n')

    assert main(["transform", str(src)]) == 1

    assert "latin1.js" in capsys.readouterr().err


def test_transform_directory_reports_failures(tmp_path: Path, capsys) -> None:
    root = tmp_path / "repo"
    root.mkdir()
    (root / ".git").mkdir()
    (root / "ok.js").write_text('import "x";\n', encoding="utf-8")
    (root / "broken.js").write_text('import a, * as b from "m";\n', encoding="utf-8")

    assert main(["transform", str(root), "--workers", "1"]) == 1

    out = capsys.readouterr().out
    assert "1 transformed, 1 failed" in out


def test_missing_path_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["transform", str(tmp_path / "missing.js")])
