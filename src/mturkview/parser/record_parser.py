# src/mturkview/parser/record_parser.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from mturkview.parser.line_parser import split_cells

logger = logging.getLogger(__name__)

HIT_ID = "hitid"
HIT_TYPE_ID = "hittypeid"

# どのファイルでも必ず値が入っているはずのプラットフォーム固定列
DEFAULT_REQUIRED_FIELDS = frozenset({HIT_ID, HIT_TYPE_ID})


class OutputFormatError(ValueError):
    """MTurk 出力ファイルの内容がフォーマットを満たさない場合の基底例外。"""


class EmptyOutputFileError(OutputFormatError):
    def __init__(self, source: Path) -> None:
        super().__init__(f"No header line found in file {source}")
        self.source = source


class RequiredFieldError(OutputFormatError):
    """
    必須フィールドが欠けているレコードを見つけたときの例外。

    - field: 欠けていたフィールド名
    - record: 途中まで構築したレコード
    - source: 対象ファイル
    """

    def __init__(self, field: str, record: Mapping[str, str], source: Path) -> None:
        super().__init__(
            f"Field {field} is missing in record {dict(record)} in file {source}"
        )
        self.field = field
        self.record = dict(record)
        self.source = source


def extract_header_mapping(header_line: str) -> Dict[int, str]:
    """
    ヘッダ行（最初の論理行）から 位置 -> 列名 の対応を作る。
    列名の重複チェックは行わない。
    """
    return {i: name for i, name in enumerate(split_cells(header_line))}


def extract_records(
    lines: Iterable[str],
    header_mapping: Mapping[int, str],
    required_fields: Iterable[str],
    source: Path,
) -> List[Dict[str, str]]:
    """
    ヘッダ以降の論理行を 列名 -> 値 の dict に変換する。

    - 空セルはキー自体を作らない
    - ヘッダより列数が多い行は、はみ出したセルを無視して警告を出す
    - 1件でも必須フィールドが欠けていれば RequiredFieldError を送出する
    """
    required = sorted(required_fields)
    result: List[Dict[str, str]] = []

    for line in lines:
        record: Dict[str, str] = {}

        for i, entry in enumerate(split_cells(line)):
            # 空セルは「値なし」
            if not entry:
                continue

            column_name = header_mapping.get(i)
            if column_name is None:
                logger.warning(
                    "Ignoring cell at position %d beyond header in file %s", i, source
                )
                continue

            record[column_name] = entry

        for field in required:
            if record.get(field) is None:
                raise RequiredFieldError(field, record, source)

        result.append(record)

    return result
