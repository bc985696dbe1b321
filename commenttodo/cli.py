from __future__ import annotations
import argparse
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List

from .errors import ConfigurationError
from .log import setup_logging
from .models import DEFAULT_IGNORE_GLOBS, DEFAULT_SUPPORTED_EXTS, ScanConfig
from .render import render_json, render_markdown
from .scanner import scan

FORMATS = ("markdown", "json")


def _comma_list(value: str) -> List[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="commenttodo",
        description="リポジトリ内の TODO/FIXME/HACK コメントを集めて TODO.md を生成します",
    )
    # 既定値は None にしておき、設定ファイル → 組込み既定値の順で補完する
    p.add_argument("-r", "--root", default=None, help="プロジェクトルート (既定: .)")
    p.add_argument("-o", "--out", default=None, help='出力ファイル ("-" で標準出力, 既定: TODO.md)')
    p.add_argument("-e", "--ext", type=_comma_list, default=None, metavar="LIST",
                   help=f"対象拡張子 (カンマ区切り, 既定: {','.join(DEFAULT_SUPPORTED_EXTS)})")
    p.add_argument("-i", "--ignore", type=_comma_list, default=None, metavar="LIST",
                   help=f"除外 glob (カンマ区切り, 既定: {','.join(DEFAULT_IGNORE_GLOBS)})")
    p.add_argument("-f", "--format", choices=FORMATS, default=None, help="出力形式 (既定: markdown)")
    p.add_argument("--dry-run", action="store_true", help="ファイルに書かず標準出力へ表示")
    p.add_argument("--concurrency", type=int, default=None, help="同時に読むファイル数の上限")
    p.add_argument("--verbose", action="store_true", default=None, help="詳細ログ")
    p.add_argument("--config", help="設定ファイル(TOML: pyproject.toml など)の [tool.commenttodo] を既定値として読む")
    p.add_argument("--fail-on-findings", action="store_true", help="1件でも見つかれば終了コード1")
    return p


def load_config(path: str) -> Dict[str, Any]:
    cfg_path = Path(path)
    with cfg_path.open("rb") as f:
        cfg = tomllib.load(f)
    tool = cfg.get("tool", {}) if isinstance(cfg, dict) else {}
    section = tool.get("commenttodo", {}) if isinstance(tool, dict) else {}
    return section if isinstance(section, dict) else {}


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return _comma_list(value)
    return [str(v) for v in value]


def resolve_options(args: argparse.Namespace) -> argparse.Namespace:
    cfg: Dict[str, Any] = {}
    if args.config:
        try:
            cfg = load_config(args.config)
        except (OSError, tomllib.TOMLDecodeError) as e:
            print(f"[warn] failed to load config {args.config}: {e}", file=sys.stderr)
    if args.root is None:
        args.root = str(cfg.get("root", "."))
    if args.out is None:
        args.out = str(cfg.get("out", "TODO.md"))
    if args.ext is None:
        args.ext = _as_list(cfg["ext"]) if "ext" in cfg else list(DEFAULT_SUPPORTED_EXTS)
    if args.ignore is None:
        args.ignore = _as_list(cfg["ignore"]) if "ignore" in cfg else list(DEFAULT_IGNORE_GLOBS)
    if args.format is None:
        args.format = str(cfg.get("format", "markdown")).lower()
    if args.concurrency is None and "concurrency" in cfg:
        args.concurrency = cfg["concurrency"]
    if args.verbose is None:
        args.verbose = bool(cfg.get("verbose", False))
    return args


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = resolve_options(parser.parse_args(argv))
    setup_logging(args.verbose)
    if args.format not in FORMATS:
        print(f"unknown format: {args.format} (choose from {', '.join(FORMATS)})", file=sys.stderr)
        return 2

    try:
        config = ScanConfig(
            root=args.root,
            exts=tuple(args.ext),
            ignore=tuple(args.ignore),
            concurrency=args.concurrency,
            verbose=args.verbose,
        )
        findings = scan(config)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 130

    output = render_json(findings) if args.format == "json" else render_markdown(findings)
    if args.dry_run or args.out == "-":
        sys.stdout.write(output)
    else:
        out_path = Path(args.out)
        out_path.write_text(output, encoding="utf-8")
        print(f"Wrote {len(findings)} item(s) to {out_path}")
    if args.fail_on_findings and findings:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
