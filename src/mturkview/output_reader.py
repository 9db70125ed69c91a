# src/mturkview/output_reader.py
"""
Mechanical Turk の結果ダウンロード（タブ区切り）を読み込むリーダ。

標準的な CSV ではないため専用の解析を行う:

- 引用フィールド内の改行で折り返された物理行を論理行に戻す
- タブで分割し、引用符と "" のエスケープを外す
- 1行目のヘッダで 位置 -> 列名 を対応付ける
- 必須フィールドが欠けたレコードがあれば全体を失敗させる
"""
from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

import chardet

from mturkview.logic.hit_type_checker import detect_hit_type_id
from mturkview.models.output_file import OutputFile
from mturkview.parser.line_parser import reassemble_lines
from mturkview.parser.record_parser import (
    DEFAULT_REQUIRED_FIELDS,
    EmptyOutputFileError,
    extract_header_mapping,
    extract_records,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

# BOM 付き UTF-8 も受け付ける
ENCODING = "utf-8-sig"


class OutputReadError(OSError):
    """出力ファイルを読み込めなかった場合の例外。"""


class OutputDecodeError(OutputReadError):
    def __init__(self, path: Path, error: UnicodeDecodeError, guessed: Optional[str]) -> None:
        super().__init__(
            f"File {path} is not valid UTF-8 (byte {error.start}); "
            f"detected encoding: {guessed or 'unknown'}"
        )
        self.path = path
        self.guessed_encoding = guessed


def read_physical_lines(path: Path) -> List[str]:
    """
    ファイルを UTF-8 として読み、物理行のリストを返す。

    read_bytes() で一括で読むので、解析前にファイルハンドルは閉じている。
    デコードに失敗した場合は chardet の推定結果を添えて OutputDecodeError を送出する。
    """
    raw = path.read_bytes()
    try:
        text = raw.decode(ENCODING)
    except UnicodeDecodeError as e:
        guessed = chardet.detect(raw).get("encoding")
        raise OutputDecodeError(path, e, guessed) from e

    # \n, \r, \r\n のみを改行とみなす
    return io.StringIO(text, newline=None).readlines()


def parse_output_file(path: Path, required_fields: Iterable[str]) -> OutputFile:
    """1ファイル分を解析して OutputFile を返す。"""
    lines = reassemble_lines(read_physical_lines(path))
    if not lines:
        raise EmptyOutputFileError(path)

    header_mapping = extract_header_mapping(lines[0])
    records = extract_records(lines[1:], header_mapping, required_fields, path)

    return OutputFile(
        path=path,
        header_mapping=header_mapping,
        records=tuple(MappingProxyType(r) for r in records),
        hit_type_id=detect_hit_type_id(records, path),
    )


class MTurkOutputReader:
    """
    複数の MTurk 出力ファイルをまとめて読み込み、レコードを 列名 -> 値 で列挙する。

    構築時にすべて読み込み、以降は読み取り専用。
    1ファイルでも失敗すれば例外を送出し、部分的なリーダは作らない。
    """

    def __init__(
        self,
        *files: PathLike,
        additional_required_fields: Iterable[str] = (),
    ) -> None:
        if not files:
            raise ValueError("At least one output file is required")

        self._required_fields = DEFAULT_REQUIRED_FIELDS | frozenset(additional_required_fields)

        outputs: List[OutputFile] = []
        records: List[Mapping[str, str]] = []
        column_names: Set[str] = set()

        for f in files:
            path = Path(f)
            output = parse_output_file(path, self._required_fields)

            column_names.update(output.header_mapping.values())
            logger.info("Extracted %d records from %s", output.record_count, path)

            outputs.append(output)
            records.extend(output.records)

        self._files: Tuple[OutputFile, ...] = tuple(outputs)
        self._records: Tuple[Mapping[str, str], ...] = tuple(records)
        self._column_names: Tuple[str, ...] = tuple(sorted(column_names))
        self._hit_type_id_for_file = MappingProxyType(
            {output.path: output.hit_type_id for output in outputs}
        )

    @property
    def required_fields(self) -> FrozenSet[str]:
        return self._required_fields

    @property
    def column_names(self) -> Tuple[str, ...]:
        """全ファイルで見つかった列名（ソート済み、重複なし）"""
        return self._column_names

    @property
    def hit_type_id_for_file(self) -> Mapping[Path, Optional[str]]:
        """ファイルごとの代表 hittypeid"""
        return self._hit_type_id_for_file

    @property
    def files(self) -> Tuple[OutputFile, ...]:
        return self._files

    def __iter__(self) -> Iterator[Mapping[str, str]]:
        # 呼ぶたびに先頭から
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
