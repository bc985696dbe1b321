"""スキャン全体で共有する例外。

- ConfigurationError: ルート不正など、スキャンを中断する致命的エラー
- FileReadError: 1ファイルが読めない。そのファイルだけスキップされる

構文解析の失敗は例外ではなく ``Extraction.error`` で表す (dispatcher 参照)。
"""
from __future__ import annotations


class ScanError(Exception):
    """commenttodo が送出する例外の基底。"""


class ConfigurationError(ScanError, ValueError):
    """ルートが存在しない/ディレクトリでない/読めない、または設定値が不正。"""


class FileReadError(ScanError, OSError):
    """検出済みファイルを開けない・デコードできない。"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


__all__ = ["ScanError", "ConfigurationError", "FileReadError"]
