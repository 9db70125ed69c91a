# src/mturkview/models/output_file.py

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class OutputFile:
    """
    MTurk 出力ファイル1つ分の解析結果。

    - path: 読み込んだファイル
    - header_mapping: 位置（0始まり）-> 列名
    - records: 列名 -> 値 のレコード（ファイル内の行順）
    - hit_type_id: このファイルで最初に見つかった hittypeid
    """
    path: Path
    header_mapping: Dict[int, str]
    records: Tuple[Mapping[str, str], ...] = field(default_factory=tuple)
    hit_type_id: Optional[str] = None

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def column_names(self) -> Tuple[str, ...]:
        """ヘッダの列名（位置順、重複あり）"""
        return tuple(self.header_mapping[i] for i in sorted(self.header_mapping))
