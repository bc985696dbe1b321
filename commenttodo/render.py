"""Finding の一覧を Markdown / JSON 文書に変換する。"""
from __future__ import annotations

import json
from collections import Counter
from itertools import groupby
from typing import Iterable, List

from .models import Finding

TAG_ORDER = ("TODO", "FIXME", "HACK")


def render_json(findings: Iterable[Finding]) -> str:
    data = [f.to_dict() for f in findings]
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def _format_meta(f: Finding) -> str:
    if not f.meta:
        return ""
    pairs = ", ".join(f"{k}: {v}" for k, v in f.meta.items())
    return f" _({pairs})_"


def render_markdown(findings: Iterable[Finding], title: str = "TODO") -> str:
    items: List[Finding] = list(findings)
    lines = [f"# {title}", ""]
    if not items:
        lines.append("No TODO/FIXME/HACK comments found.")
        return "\n".join(lines) + "\n"

    counts = Counter(f.tag for f in items)
    summary = ", ".join(f"{tag}: {counts[tag]}" for tag in TAG_ORDER if counts[tag])
    lines.append(f"Total: {len(items)} ({summary})")
    # 入力はファイル順に並んでいる前提
    for file, group in groupby(items, key=lambda f: f.file):
        lines.extend(["", f"## {file}", ""])
        for f in group:
            loc = f"L{f.line}" if f.line is not None else "L?"
            message = f.text or "(no message)"
            lines.append(f"- [ ] **{f.tag}** ({loc}) {message}{_format_meta(f)}")
    return "\n".join(lines) + "\n"


__all__ = ["render_json", "render_markdown"]
