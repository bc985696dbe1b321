import json
import subprocess
import sys
from pathlib import Path

from commenttodo.cli import main

PKG = "commenttodo"
ROOT = Path(__file__).resolve().parents[1]


def _run_cli(args):
    exe = [sys.executable, "-m", PKG + ".cli"]
    cp = subprocess.run(exe + args, cwd=str(ROOT), capture_output=True, text=True)
    return cp.returncode, cp.stdout, cp.stderr


def _tree(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.ts").write_text("// FIXME(@bob): fix race\n", encoding="utf-8")
    (tmp_path / "src" / "b.py").write_text("# HACK: ugly workaround\n", encoding="utf-8")
    return tmp_path


def test_smoke_cli_json_dry_run(tmp_path):
    root = _tree(tmp_path)
    code, out, err = _run_cli(["--root", str(root), "--format", "json", "--dry-run"])
    assert code == 0, err
    data = json.loads(out)
    assert [(d["file"], d["tag"]) for d in data] == [("src/a.ts", "FIXME"), ("src/b.py", "HACK")]


def test_writes_markdown_file(tmp_path, capsys):
    root = _tree(tmp_path)
    out_file = tmp_path / "TODO.md"
    code = main(["-r", str(root), "-o", str(out_file), "-e", "ts,py"])
    assert code == 0
    text = out_file.read_text(encoding="utf-8")
    assert "## src/a.ts" in text
    assert "Wrote 2 item(s)" in capsys.readouterr().out


def test_missing_root_exits_2(tmp_path, capsys):
    code = main(["-r", str(tmp_path / "missing"), "--dry-run"])
    assert code == 2
    assert "root does not exist" in capsys.readouterr().err


def test_fail_on_findings(tmp_path):
    root = _tree(tmp_path)
    assert main(["-r", str(root), "-o", "-", "--fail-on-findings"]) == 1


def test_config_file_supplies_defaults(tmp_path, capsys):
    root = _tree(tmp_path)
    cfg = tmp_path / "pyproject.toml"
    cfg.write_text(
        "[tool.commenttodo]\n"
        f"root = {json.dumps(str(root))}\n"
        'ext = ["py"]\n'
        'format = "json"\n',
        encoding="utf-8",
    )
    code = main(["--config", str(cfg), "--dry-run"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert [d["file"] for d in data] == ["src/b.py"]
    # コマンドライン指定が設定ファイルより優先
    code = main(["--config", str(cfg), "--dry-run", "-e", "ts"])
    data = json.loads(capsys.readouterr().out)
    assert [d["file"] for d in data] == ["src/a.ts"]


def test_broken_config_is_a_warning(tmp_path, capsys):
    root = _tree(tmp_path)
    cfg = tmp_path / "bad.toml"
    cfg.write_text("not = [valid", encoding="utf-8")
    code = main(["--config", str(cfg), "-r", str(root), "--dry-run"])
    assert code == 0
    assert "[warn] failed to load config" in capsys.readouterr().err
