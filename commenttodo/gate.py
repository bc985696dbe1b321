"""同時に処理するファイル数の上限 (ワーカー数) を管理する。"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Iterator, Optional, Tuple, TypeVar

from .errors import ConfigurationError
from .models import default_concurrency

T = TypeVar("T")
R = TypeVar("R")


class ConcurrencyGate:
    """最大 limit 件まで fn を並行実行する。

    完了順に (item, result, error) を返す。fn の例外は error に入り、外へは出ない。
    待機中のタスク間の順序は保証しない。limit == 1 なら呼び出しスレッドで直列実行。
    """

    def __init__(self, limit: Optional[int] = None):
        if limit is None:
            limit = default_concurrency()
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ConfigurationError(f"concurrency must be a positive integer: {limit!r}")
        self.limit = limit

    def run(
        self, fn: Callable[[T], R], items: Iterable[T]
    ) -> Iterator[Tuple[T, Optional[R], Optional[BaseException]]]:
        if self.limit == 1:
            for item in items:
                try:
                    yield item, fn(item), None
                except Exception as e:
                    yield item, None, e
            return
        ex = ThreadPoolExecutor(max_workers=self.limit)
        try:
            futs = {ex.submit(fn, item): item for item in items}
            for fut in as_completed(futs):
                item = futs[fut]
                try:
                    res = fut.result()
                except Exception as e:
                    yield item, None, e
                else:
                    yield item, res, None
        finally:
            # 中断時(KeyboardInterrupt 等)は未着手のタスクを捨て、実行中のものは待たない
            ex.shutdown(wait=False, cancel_futures=True)


__all__ = ["ConcurrencyGate"]
