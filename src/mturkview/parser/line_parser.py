# src/mturkview/parser/line_parser.py
from __future__ import annotations

import logging
from typing import Iterable, List

logger = logging.getLogger(__name__)

DELIMITER = "\t"
QUOTE = '"'
ESCAPED_QUOTE = QUOTE * 2

# 正しく閉じた行の末尾。ただし [tab]" は空の引用フィールドの開始なので除外
_OPEN_EMPTY_FIELD = DELIMITER + QUOTE

# 前後の空白として除去するのは U+0020 以下の制御文字と半角スペースのみ。
# 全角スペースや NBSP はセルの値として残す
_TRIM_CHARS = "".join(chr(c) for c in range(0x21))


def is_complete_line(trimmed: str) -> bool:
    """
    物理行が論理行の終端かどうかを判定する。

    - 末尾が " で終わる
    - ただし末尾が [tab]" の場合は、次の物理行に続く引用フィールドの開始とみなす
    """
    return trimmed.endswith(QUOTE) and not trimmed.endswith(_OPEN_EMPTY_FIELD)


def reassemble_lines(raw_lines: Iterable[str]) -> List[str]:
    """
    物理行のシーケンスから論理行（1レコード = 1行）を再構築する。

    引用フィールド内の改行でエクスポート側が行を折り返しているため、
    終端判定を満たすまで物理行を半角スペース1つで連結していく。
    最後まで終端判定を満たさなかった末尾の断片は出力しない。
    """
    lines: List[str] = []
    incomplete = ""

    for line in raw_lines:
        trimmed = line.strip(_TRIM_CHARS)
        # 折り返し位置は必ず半角スペース1つ。先頭のスペースは出力時の strip で消える
        incomplete += " " + trimmed
        if is_complete_line(trimmed):
            lines.append(incomplete.strip(_TRIM_CHARS))
            incomplete = ""

    if incomplete.strip(_TRIM_CHARS):
        logger.debug("Dropped unterminated trailing content (%d chars)", len(incomplete))

    if logger.isEnabledFor(logging.DEBUG):
        for s in lines:
            logger.debug("=%s...%s=", s[:20], s[-20:])

    return lines


def strip_cell(segment: str) -> str:
    """先頭/末尾の引用符を1つずつ外し、"" を " に戻して前後の空白を除く。"""
    if segment.startswith(QUOTE):
        segment = segment[1:]
    if segment.endswith(QUOTE):
        segment = segment[:-1]
    return segment.replace(ESCAPED_QUOTE, QUOTE).strip(_TRIM_CHARS)


def split_cells(line: str) -> List[str]:
    """
    論理行をタブで分割し、各セルの引用符を外して返す。

    タブは引用内でも区切りとして扱う（このフォーマットの引用フィールドはタブを含まない）。
    空セルは空文字列のまま残す。
    """
    return [strip_cell(segment) for segment in line.split(DELIMITER)]
