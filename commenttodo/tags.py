"""タグ語 (TODO/FIXME/HACK) の正規化と検出パターン。"""
from __future__ import annotations

import re
from typing import FrozenSet, Optional

from .models import Tag

TAGS: FrozenSet[str] = frozenset({"TODO", "FIXME", "HACK"})

# 行中の最初のタグ語 (単語単位、大文字小文字無視)
TAG_WORD_RE = re.compile(r"\b(TODO|FIXME|HACK)\b", re.IGNORECASE)

# コメント本文の1行: 先頭の "*" 装飾 (ブロックコメント継続行) を許容
COMMENT_LINE_RE = re.compile(r"^(\*+\s*)?(TODO|FIXME|HACK)\b(.*)$", re.IGNORECASE | re.DOTALL)


def normalize_tag(raw: object) -> Optional[Tag]:
    t = str(raw or "").upper()
    if t in TAGS:
        return t  # type: ignore[return-value]
    return None


__all__ = ["TAGS", "TAG_WORD_RE", "COMMENT_LINE_RE", "normalize_tag"]
