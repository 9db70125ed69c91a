# src/mturkview/logic/record_search.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Tuple


@dataclass
class RecordSearchCondition:
    """
    レコード検索の条件。

    - keyword: 検索語（大文字小文字は区別しない部分一致）
    - columns: 対象列。空なら全列
    - match_all: True なら対象列すべてに一致したときのみヒット（AND）
    """
    keyword: str = ""
    columns: Tuple[str, ...] = field(default_factory=tuple)
    match_all: bool = False

    def is_empty(self) -> bool:
        return not self.keyword.strip()


def match_record(record: Mapping[str, str], cond: RecordSearchCondition) -> bool:
    """1件のレコードが条件にマッチするか判定する。空条件は常にマッチ。"""
    if cond.is_empty():
        return True

    keyword = cond.keyword.strip().casefold()
    columns = cond.columns or tuple(record.keys())

    hits = [keyword in (record.get(c) or "").casefold() for c in columns]
    if not hits:
        return False
    return all(hits) if cond.match_all else any(hits)


def search_records(
    records: Iterable[Mapping[str, str]], cond: RecordSearchCondition
) -> List[int]:
    """条件にマッチしたレコードのインデックス一覧を返す。"""
    return [i for i, record in enumerate(records) if match_record(record, cond)]
