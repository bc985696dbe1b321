"""高レベル API: ルート以下を走査して TODO/FIXME/HACK コメントを集める

- ファイル走査 (拡張子/除外 glob)
- 並列度の上限付きでファイルごとに抽出 (構造解析 or 行スキャン)
- 結果をファイルパス → 行番号の順に並べて返す

キャッシュは持たない。同じファイル群に対しては常に同じ結果になる。
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from .comments import StructuralBackend
from .dispatcher import extract_file
from .errors import FileReadError
from .file_scanner import iter_files, read_text
from .gate import ConcurrencyGate
from .models import Finding, ScanConfig

logger = logging.getLogger(__name__)


def _create_backend(verbose: bool) -> Optional[StructuralBackend]:
    try:
        return StructuralBackend.create()
    except ValueError as e:
        # 文法パッケージが使えなければ全ファイル行スキャンで続行
        if verbose:
            logger.warning("structural parsers unavailable, using line-scan only: %s", e)
        return None


def scan_file(path: str, root: str, backend: Optional[StructuralBackend], verbose: bool = False) -> List[Finding]:
    content = read_text(Path(path))
    return extract_file(path, content, root, backend, verbose=verbose).findings


def scan(config: ScanConfig) -> List[Finding]:
    root = os.path.abspath(config.root)
    files = iter_files(root, config.exts, config.ignore)
    gate = ConcurrencyGate(config.concurrency)
    backend = _create_backend(config.verbose)
    logger.debug("scanning %d file(s) under %s with %d worker(s)", len(files), root, gate.limit)

    results: List[Finding] = []
    for path, found, error in gate.run(lambda p: scan_file(p, root, backend, config.verbose), files):
        if error is not None:
            if config.verbose:
                if isinstance(error, FileReadError):
                    logger.warning("Failed to read %s: %s", path, error.reason)
                else:
                    logger.warning("Failed to scan %s: %s", path, error)
            continue
        results.extend(found or [])

    results.sort(key=Finding.sort_key)
    return results


__all__ = ["scan", "scan_file"]
