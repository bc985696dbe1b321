"""データモデル: Finding / ScanConfig と既定値。"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from .errors import ConfigurationError

Tag = Literal["TODO", "FIXME", "HACK"]

DEFAULT_SUPPORTED_EXTS: Tuple[str, ...] = ("js", "ts", "jsx", "tsx", "py", "sh", "php", "go")
DEFAULT_IGNORE_GLOBS: Tuple[str, ...] = ("node_modules/**", ".git/**", "dist/**")


def default_concurrency() -> int:
    return max(4, os.cpu_count() or 1)


@dataclass
class Finding:
    tag: Tag
    file: str  # スキャンルートからの相対パス (ルート自身は ".")
    line: Optional[int]  # 1始まり。位置不明なら None
    text: str
    raw: str
    meta: Optional[Dict[str, str]] = None

    def sort_key(self) -> Tuple[str, bool, int]:
        # 行番号不明は同一ファイル内で末尾に並べる
        return (self.file, self.line is None, self.line or 0)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tag": self.tag,
            "file": self.file,
            "line": self.line,
            "text": self.text,
            "raw": self.raw,
        }
        if self.meta is not None:
            data["meta"] = dict(self.meta)
        return data


@dataclass
class Extraction:
    """1ファイル分の抽出結果。error が入っていれば構造解析は失敗している。"""

    findings: List[Finding] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _normalize_exts(exts) -> Tuple[str, ...]:
    out = []
    for e in exts:
        e = str(e).strip().lstrip(".").lower()
        if e and e not in out:
            out.append(e)
    return tuple(out)


@dataclass(frozen=True)
class ScanConfig:
    """1回のスキャンの入力。スキャン中は不変。

    exts は先頭の "." を除いた小文字に正規化される。空なら既定の拡張子集合。
    concurrency が None のときは ``default_concurrency()`` を使う。
    """

    root: str = field(default_factory=os.getcwd)
    exts: Tuple[str, ...] = DEFAULT_SUPPORTED_EXTS
    ignore: Tuple[str, ...] = DEFAULT_IGNORE_GLOBS
    concurrency: Optional[int] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", str(self.root or os.getcwd()))
        exts = _normalize_exts(self.exts or ())
        object.__setattr__(self, "exts", exts or DEFAULT_SUPPORTED_EXTS)
        ignore = DEFAULT_IGNORE_GLOBS if self.ignore is None else self.ignore
        object.__setattr__(self, "ignore", tuple(str(g).strip() for g in ignore if str(g).strip()))
        c = self.concurrency
        if c is not None and (isinstance(c, bool) or not isinstance(c, int) or c < 1):
            raise ConfigurationError(f"concurrency must be a positive integer: {c!r}")


__all__ = [
    "Tag",
    "Finding",
    "Extraction",
    "ScanConfig",
    "DEFAULT_SUPPORTED_EXTS",
    "DEFAULT_IGNORE_GLOBS",
    "default_concurrency",
]
