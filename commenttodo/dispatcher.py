"""拡張子ごとの抽出方式の選択と、構造解析失敗時の行スキャンへの切り替え。"""
from __future__ import annotations

import logging
import os
from typing import Literal, Optional

from .comments import StructuralBackend, extract_structural, grammar_for
from .fallback import scan_lines_for_tags
from .models import Extraction

logger = logging.getLogger(__name__)

Strategy = Literal["ecmascript", "php", "fallback"]

JS_TS_EXTS = frozenset({"js", "jsx", "ts", "tsx", "mjs", "cjs"})
PHP_EXTS = frozenset({"php"})


def file_ext(path: str) -> str:
    return os.path.splitext(path)[1].lstrip(".").lower()


def select_strategy(path: str) -> Strategy:
    ext = file_ext(path)
    if ext in JS_TS_EXTS:
        return "ecmascript"
    if ext in PHP_EXTS:
        return "php"
    return "fallback"


def extract_file(
    path: str,
    content: str,
    root: str,
    backend: Optional[StructuralBackend],
    verbose: bool = False,
) -> Extraction:
    """1ファイル分を抽出する。返り値の error は常に None。

    構造解析が失敗した(または解析器が無い)場合はそのファイルだけ行スキャンでやり直す。
    """
    strategy = select_strategy(path)
    if strategy != "fallback":
        grammar = grammar_for(file_ext(path))
        if backend is not None and grammar is not None:
            result = extract_structural(content, path, root, backend, grammar)
        else:
            result = Extraction(error=f"no {strategy} parser available")
        if result.ok:
            return result
        if verbose:
            logger.warning("%s parse failed for %s, falling back to line-scan: %s", strategy, path, result.error)
    return Extraction(findings=scan_lines_for_tags(content, path, root))


__all__ = ["Strategy", "select_strategy", "extract_file", "JS_TS_EXTS", "PHP_EXTS"]
