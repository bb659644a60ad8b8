from __future__ import annotations

from u8arc.__main__ import main


def test_pack(tmp_path, pkg_tree, capsys, parse_arc):
    out = tmp_path / "out" / "pkg.arc"
    assert main([str(pkg_tree), "-o", str(out)]) == 0
    assert "Packed 4 node(s)" in capsys.readouterr().out
    assert parse_arc(out).data_offset == 128


def test_dry_run_prints_layout(tmp_path, pkg_tree, capsys):
    assert main([str(pkg_tree), "--dry-run"]) == 0
    stdout = capsys.readouterr().out
    assert "4 node(s)" in stdout
    assert "0x00000080" in stdout
    assert list(tmp_path.rglob("*.arc")) == []


def test_missing_output_is_usage_error(pkg_tree, capsys):
    assert main([str(pkg_tree)]) == 1
    assert "--output" in capsys.readouterr().err


def test_missing_source_argument(capsys):
    assert main([]) == 1
    assert "source directory required" in capsys.readouterr().err


def test_missing_source_directory_reports_error(tmp_path, capsys):
    assert main([str(tmp_path / "nope"), "-o", str(tmp_path / "x.arc")]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error:")
    assert "nope" in err
