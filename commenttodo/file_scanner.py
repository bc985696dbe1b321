"""スキャン対象ファイルの走査と読み込み。

- 拡張子フィルタ(大文字小文字無視) + 除外 glob (ルートからの相対パスで判定)
- 除外 glob は拡張子一致より優先。ディレクトリごと除外できる場合は降りない
- "." で始まる隠しファイル/ディレクトリは対象外
- バイナリらしいもの・デコードできないものは FileReadError
"""
from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Iterable, List

import pathspec

from .errors import ConfigurationError, FileReadError

logger = logging.getLogger(__name__)

BINARY_BYTES = set(range(0, 9)) | {11, 12} | set(range(14, 32))
ENCODING_CANDIDATES = ("utf-8", "utf-8-sig", "utf-16", "utf-16-le", "utf-16-be", "cp932", "shift_jis")


def is_probably_text(data: bytes, threshold: float = 0.30) -> bool:
    if not data:
        return True
    non_text = sum(b in BINARY_BYTES for b in data)
    ratio = non_text / len(data)
    return ratio < threshold


def read_text(path: Path, encoding_candidates=ENCODING_CANDIDATES) -> str:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileReadError(str(path), e.strerror or str(e)) from e
    if not is_probably_text(raw):
        raise FileReadError(str(path), "looks like a binary file")
    for enc in encoding_candidates:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    raise FileReadError(str(path), "unable to decode with tried encodings")


def relative_path(root: str, file: str) -> str:
    rel = os.path.relpath(file, root)
    if rel in ("", os.curdir):
        return "."
    return PurePosixPath(*Path(rel).parts).as_posix()


def _anchor(pattern: str) -> str:
    # glob はルート基準。gitwildmatch では "/" を付けないと任意の深さに一致してしまう
    neg = ""
    if pattern.startswith("!"):
        neg, pattern = "!", pattern[1:]
    if not pattern.startswith(("/", "**/")):
        pattern = "/" + pattern
    return neg + pattern


def build_ignore_spec(ignore: Iterable[str]) -> pathspec.PathSpec:
    """除外 glob からスキャン1回分の PathSpec を作る。

    "dist" はルート直下の dist とその中身、"**/node_modules" は任意の深さ、
    "*.min.js" はルート直下のファイルだけに一致する ("*" は "/" を越えない)。
    """
    patterns = [_anchor(p.strip()) for p in ignore if p.strip()]
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def is_ignored(rel_path: str, spec: pathspec.PathSpec) -> bool:
    """rel_path はルートからの POSIX 相対パス。ディレクトリは末尾に "/" を付けて渡す。"""
    return spec.match_file(rel_path)


def check_root(root: str) -> str:
    """ルートを絶対パスにして検証する。不正なら ConfigurationError。"""
    abs_root = os.path.abspath(root)
    if not os.path.exists(abs_root):
        raise ConfigurationError(f"root does not exist: {abs_root}")
    if not os.path.isdir(abs_root):
        raise ConfigurationError(f"root is not a directory: {abs_root}")
    try:
        with os.scandir(abs_root):
            pass
    except OSError as e:
        raise ConfigurationError(f"root is not readable: {abs_root}: {e}") from e
    return abs_root


def _log_walk_error(err: OSError) -> None:
    logger.debug("skip unreadable directory %s: %s", err.filename, err)


def iter_files(root: str, exts: Iterable[str], ignore: Iterable[str]) -> List[str]:
    """root 以下の対象ファイル(絶対パス)を重複なし・ソート済みで返す。"""
    abs_root = check_root(root)
    wanted = {e.lstrip(".").lower() for e in exts}
    spec = build_ignore_spec(ignore)
    found = set()
    for dirpath, dirnames, filenames in os.walk(abs_root, onerror=_log_walk_error):
        rel_dir = relative_path(abs_root, dirpath)
        prefix = "" if rel_dir == "." else rel_dir + "/"
        kept = []
        for d in dirnames:
            if d.startswith("."):
                continue
            if is_ignored(prefix + d + "/", spec):
                continue
            kept.append(d)
        dirnames[:] = sorted(kept)
        for f in filenames:
            if f.startswith("."):
                continue
            ext = os.path.splitext(f)[1].lstrip(".").lower()
            if ext not in wanted:
                continue
            if is_ignored(prefix + f, spec):
                continue
            found.add(os.path.join(dirpath, f))
    return sorted(found)


__all__ = [
    "iter_files",
    "read_text",
    "is_probably_text",
    "relative_path",
    "is_ignored",
    "build_ignore_spec",
    "check_root",
]
