"""タグ直後のテキスト(tail)からメッセージとメタデータを取り出す。

対応する書き方:

    TODO(@alice due:2025-09-01): implement X
    TODO (assignee: bob, due:2025-09-01) implement
    TODO: assignee:alice,due:2025-09-01 implement
    FIXME: remove hack

文法は寛容で、壊れた記述でも例外にはせず読めた分だけを返す。
meta は1件もキーが取れなかった場合 None (空 dict にはしない)。
"""
from __future__ import annotations

import re
from typing import Dict, List, NamedTuple, Optional

_PAREN_RE = re.compile(r"^\(([^)]*)\)\s*[:\-]?\s*(.*)$", re.DOTALL)
_INLINE_RE = re.compile(r"^([A-Za-z0-9_-]+:\S+)(?:\s+(.*))?$", re.DOTALL)
_SPLIT_RE = re.compile(r"[,|]+|\s{2,}")
_HANDLE_RE = re.compile(r"^@([A-Za-z0-9_\-.]+)$")


class CommentMeta(NamedTuple):
    text: str
    meta: Optional[Dict[str, str]]


def _is_pair(word: str) -> bool:
    key, sep, value = word.partition(":")
    return bool(sep and key.strip() and value.strip())


def _split_words(part: str) -> List[str]:
    """"@alice due:2025-09-01" のような空白区切りの並びを語ごとに分ける。

    全ての語が @handle か key:value と読める場合だけ分割し、
    それ以外 ("John Smith", "owner: John Smith") はパート全体を1つとして扱う。
    """
    words = part.split()
    merged: List[str] = []
    i = 0
    while i < len(words):
        w = words[i]
        # "assignee: bob" -> "assignee:bob"
        if w.endswith(":") and i + 1 < len(words) and ":" not in words[i + 1]:
            w = w + words[i + 1]
            i += 1
        merged.append(w)
        i += 1
    if merged and all(_HANDLE_RE.match(w) or _is_pair(w) for w in merged):
        return merged
    return [part]


def _apply_part(meta: Dict[str, str], part: str) -> None:
    m = _HANDLE_RE.match(part)
    if m:
        meta["assignee"] = m.group(1)
        return
    if ":" in part:
        key, _, value = part.partition(":")
        key, value = key.strip(), value.strip()
        if key and value:
            meta[key] = value
        return
    meta["assignee"] = part


def split_meta_parts(inside: str) -> List[str]:
    parts: List[str] = []
    for p in _SPLIT_RE.split(inside):
        p = p.strip()
        if p:
            parts.extend(_split_words(p))
    return parts


def parse_comment_meta(raw: str) -> CommentMeta:
    meta: Dict[str, str] = {}
    text = (raw or "").strip()

    m = _PAREN_RE.match(text)
    if m:
        for part in split_meta_parts(m.group(1)):
            _apply_part(meta, part)
        text = m.group(2).strip()
    else:
        m = _INLINE_RE.match(text)
        if m:
            for part in m.group(1).split(","):
                key, _, value = part.partition(":")
                key, value = key.strip(), value.strip()
                if key and value:
                    meta[key] = value
            if meta:
                text = (m.group(2) or "").strip()

    return CommentMeta(text=text, meta=meta or None)


__all__ = ["CommentMeta", "parse_comment_meta", "split_meta_parts"]
