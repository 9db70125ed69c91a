# src/mturkview/logic/hit_type_checker.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from mturkview.parser.record_parser import HIT_TYPE_ID

logger = logging.getLogger(__name__)


def detect_hit_type_id(records: Iterable[Mapping[str, str]], source: Path) -> Optional[str]:
    """
    1ファイル分のレコードから代表の hittypeid を決める。

    最初に見つかった値を採用する。別の値が混ざっていても処理は続け、
    警告だけ出す（診断用の値なのでエラーにはしない）。
    """
    hit_type_id: Optional[str] = None
    for record in records:
        type_id = record.get(HIT_TYPE_ID)
        if type_id is None:
            continue
        if hit_type_id is None:
            hit_type_id = type_id
        elif type_id != hit_type_id:
            logger.warning(
                "Several hitTypeIds found in file %s (%s, %s)", source, hit_type_id, type_id
            )
            # 同じファイルで何度も出さない
            break
    return hit_type_id
