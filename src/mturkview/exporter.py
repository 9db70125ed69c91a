# src/mturkview/exporter.py
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence


def records_to_rows(
    records: Iterable[Mapping[str, str]], columns: Sequence[str]
) -> List[List[str]]:
    """レコードを列順の行リストに変換する。値の無いセルは空文字。"""
    return [[record.get(c, "") for c in columns] for record in records]


def export_records_csv(
    records: Iterable[Mapping[str, str]],
    columns: Sequence[str],
    path: Path,
) -> int:
    """
    レコードを通常の CSV（カンマ区切り・RFC 準拠の引用）で書き出す。

    Excel で開けるよう BOM 付き UTF-8。書き出した行数（ヘッダ除く）を返す。
    """
    rows = records_to_rows(records, columns)
    with open(path, "w", newline="", encoding="utf-8-sig") as fp:
        writer = csv.writer(fp)
        writer.writerow(list(columns))
        writer.writerows(rows)
    return len(rows)
