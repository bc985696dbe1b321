"""commenttodo
ソースコードのコメントから TODO/FIXME/HACK を抽出するライブラリ。

主な提供機能:
- JS/TS(JSX/TSX) と PHP は tree-sitter でコメントトークンだけを解析
- その他の拡張子や構文エラーのファイルは行単位のヒューリスティックで検出
- "TODO(@alice due:2025-09-01): ..." のような担当者/期日メタデータの解析
- Markdown / JSON 出力の CLI インターフェース
"""
from .errors import ConfigurationError, FileReadError, ScanError
from .meta import parse_comment_meta
from .models import Finding, ScanConfig
from .scanner import scan
from .tags import normalize_tag

__all__ = [
    "scan",
    "Finding",
    "ScanConfig",
    "ScanError",
    "ConfigurationError",
    "FileReadError",
    "parse_comment_meta",
    "normalize_tag",
]

__version__ = "0.1.0"
