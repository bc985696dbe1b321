"""tree-sitter によるコメント抽出 (構造解析)。

対応:
- ECMAScript 系: .ts は typescript 文法、.tsx/.js/.jsx/.mjs/.cjs は tsx 文法
  (JSX/ジェネリクス/デコレータを含むコードも解析できる)
- PHP: php 文法 (HTML 混在可、#, //, /* */, /** */ コメント)

文字列リテラル中の "TODO" はコメントノードにならないので拾わない。
ブロックコメント内の行番号は「コメント開始行 + 行インデックス」で求めた近似値。

構文エラーを含む木は失敗 (Extraction.error) として返し、呼び出し側で
行スキャンに切り替える。
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterator, List, Mapping, NamedTuple, Optional, Sequence

import tree_sitter_php
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .file_scanner import relative_path
from .meta import parse_comment_meta
from .models import Extraction, Finding
from .tags import COMMENT_LINE_RE, normalize_tag

# 拡張子 -> 文法名
GRAMMAR_BY_EXT: Mapping[str, str] = MappingProxyType({
    "ts": "typescript",
    "tsx": "tsx",
    "js": "tsx",
    "jsx": "tsx",
    "mjs": "tsx",
    "cjs": "tsx",
    "php": "php",
})

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_LEAD_RE = re.compile(r"^[:\-\s]*")


class CommentToken(NamedTuple):
    """文法に依存しないコメント表現。value は区切り記号を除いた本文。"""

    value: str
    start_line: Optional[int]  # 1始まり


@dataclass(frozen=True)
class StructuralBackend:
    """スキャン1回につき1つ作り、全ワーカーで読み取り専用に共有する。

    Language は不変なので共有し、Parser はファイルごとに作る。
    """

    languages: Mapping[str, Language]

    @classmethod
    def create(cls) -> "StructuralBackend":
        return cls(languages=MappingProxyType({
            "typescript": Language(tree_sitter_typescript.language_typescript()),
            "tsx": Language(tree_sitter_typescript.language_tsx()),
            "php": Language(tree_sitter_php.language_php()),
        }))

    def parse(self, grammar: str, source: bytes) -> Tree:
        parser = Parser(self.languages[grammar])
        return parser.parse(source)


def grammar_for(ext: str) -> Optional[str]:
    return GRAMMAR_BY_EXT.get(ext.lstrip(".").lower())


def _iter_nodes(root: Node, node_type: str) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            yield node
            continue
        stack.extend(reversed(node.children))


def _first_error_line(root: Node) -> Optional[int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _strip_delimiters(text: str, line_markers: Sequence[str]) -> str:
    if text.startswith("/*"):
        body = text[2:]
        return body[:-2] if body.endswith("*/") else body
    for marker in line_markers:
        if text.startswith(marker):
            return text[len(marker):]
    return text


def _node_text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _ecmascript_comments(root: Node) -> List[CommentToken]:
    return [
        CommentToken(_strip_delimiters(_node_text(n), ("//",)), n.start_point[0] + 1)
        for n in _iter_nodes(root, "comment")
    ]


def _php_comments(root: Node) -> List[CommentToken]:
    return [
        CommentToken(_strip_delimiters(_node_text(n), ("//", "#")), n.start_point[0] + 1)
        for n in _iter_nodes(root, "comment")
    ]


ADAPTERS: Dict[str, Callable[[Node], List[CommentToken]]] = {
    "typescript": _ecmascript_comments,
    "tsx": _ecmascript_comments,
    "php": _php_comments,
}


def findings_from_comments(tokens: Sequence[CommentToken], path: str, root: str) -> List[Finding]:
    findings: List[Finding] = []
    rel = relative_path(root, path)
    for tok in tokens:
        for i, line in enumerate(_LINE_SPLIT_RE.split(tok.value)):
            raw = line.strip()
            m = COMMENT_LINE_RE.match(raw)
            if not m:
                continue
            tag = normalize_tag(m.group(2))
            if tag is None:
                continue
            tail = _LEAD_RE.sub("", m.group(3)).strip()
            text, meta = parse_comment_meta(tail)
            findings.append(Finding(
                tag=tag,
                file=rel,
                line=tok.start_line + i if tok.start_line is not None else None,
                text=text,
                raw=raw,
                meta=meta,
            ))
    return findings


def extract_structural(
    content: str,
    path: str,
    root: str,
    backend: StructuralBackend,
    grammar: str,
) -> Extraction:
    """構造解析でタグを抽出する。失敗は例外ではなく Extraction.error で返す。"""
    try:
        tree = backend.parse(grammar, content.encode("utf-8"))
        root_node = tree.root_node
        if root_node.has_error:
            line = _first_error_line(root_node)
            where = f" near line {line}" if line else ""
            return Extraction(error=f"{grammar} syntax error{where}")
        tokens = ADAPTERS[grammar](root_node)
        return Extraction(findings=findings_from_comments(tokens, path, root))
    except Exception as e:
        # ABI 不一致・パーサ内部の例外・アダプタの失敗はすべて行スキャンに回す
        return Extraction(error=f"{grammar} parser failed: {e}")


__all__ = [
    "CommentToken",
    "StructuralBackend",
    "GRAMMAR_BY_EXT",
    "ADAPTERS",
    "grammar_for",
    "findings_from_comments",
    "extract_structural",
]
