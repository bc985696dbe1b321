"""行単位のヒューリスティックなタグ検出。

構文解析器の無い言語、または構文解析に失敗したファイルで使う。
タグ語の手前が一般的なコメント開始記号で終わる行だけを採用し、
文字列リテラル中のタグ語はなるべく拾わない (完全ではない)。
"""
from __future__ import annotations
import re
from typing import List

from .meta import parse_comment_meta
from .models import Finding
from .tags import TAG_WORD_RE, normalize_tag
from .file_scanner import relative_path

FALLBACK_PREFIXES = ("#", "//", "--", ";", "%")
BLOCK_MARKERS = ("/*", "*")

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_LEAD_RE = re.compile(r"^[:\-)\s]*")


def looks_like_comment(prefix: str) -> bool:
    stripped = prefix.strip()
    if any(stripped.endswith(p) for p in FALLBACK_PREFIXES):
        return True
    return any(marker in prefix for marker in BLOCK_MARKERS)


def scan_lines_for_tags(content: str, path: str, root: str) -> List[Finding]:
    findings: List[Finding] = []
    rel = relative_path(root, path)
    for i, line in enumerate(_LINE_SPLIT_RE.split(content)):
        m = TAG_WORD_RE.search(line)
        if not m:
            continue
        if not looks_like_comment(line[: m.start()]):
            # 文字列やコードの一部とみなす
            continue
        tag = normalize_tag(m.group(1))
        if tag is None:
            continue
        tail = _LEAD_RE.sub("", line[m.end():]).strip()
        text, meta = parse_comment_meta(tail)
        findings.append(Finding(
            tag=tag,
            file=rel,
            line=i + 1,
            text=text,
            raw=line.strip(),
            meta=meta,
        ))
    return findings


__all__ = ["scan_lines_for_tags", "looks_like_comment", "FALLBACK_PREFIXES"]
