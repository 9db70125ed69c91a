"""Tests for header mapping and record extraction."""

import logging
from pathlib import Path

import pytest

from mturkview.parser.record_parser import (
    DEFAULT_REQUIRED_FIELDS,
    OutputFormatError,
    RequiredFieldError,
    extract_header_mapping,
    extract_records,
)

SOURCE = Path("batch.csv")
HEADER = "hitid\thittypeid\tAnswer.sentiment"


class TestExtractHeaderMapping:
    """Tests for extract_header_mapping()."""

    def test_positions_map_to_names(self) -> None:
        assert extract_header_mapping(HEADER) == {
            0: "hitid",
            1: "hittypeid",
            2: "Answer.sentiment",
        }

    def test_duplicate_names_keep_own_positions(self) -> None:
        assert extract_header_mapping('"a"\t"b"\t"a"') == {0: "a", 1: "b", 2: "a"}


class TestExtractRecords:
    """Tests for extract_records()."""

    def test_empty_cell_is_omitted(self) -> None:
        records = extract_records(
            ['"H1"\t"T1"\t""'],
            extract_header_mapping(HEADER),
            DEFAULT_REQUIRED_FIELDS,
            SOURCE,
        )

        assert records == [{"hitid": "H1", "hittypeid": "T1"}]

    def test_one_record_per_line_in_order(self) -> None:
        lines = ['"H1"\t"T1"\t"pos"', '"H2"\t"T1"\t"neg"']

        records = extract_records(
            lines, extract_header_mapping(HEADER), DEFAULT_REQUIRED_FIELDS, SOURCE
        )

        assert [r["hitid"] for r in records] == ["H1", "H2"]
        assert records[1]["Answer.sentiment"] == "neg"

    def test_missing_required_field_raises(self) -> None:
        required = DEFAULT_REQUIRED_FIELDS | {"Answer.sentiment"}

        with pytest.raises(RequiredFieldError) as exc_info:
            extract_records(
                ['"H1"\t"T1"\t""'], extract_header_mapping(HEADER), required, SOURCE
            )

        err = exc_info.value
        assert err.field == "Answer.sentiment"
        assert err.record == {"hitid": "H1", "hittypeid": "T1"}
        assert err.source == SOURCE
        assert "Answer.sentiment" in str(err)
        assert "batch.csv" in str(err)

    def test_required_field_error_is_value_error(self) -> None:
        with pytest.raises(OutputFormatError):
            extract_records(
                ['""\t"T1"\t"x"'],
                extract_header_mapping(HEADER),
                DEFAULT_REQUIRED_FIELDS,
                SOURCE,
            )
        assert issubclass(RequiredFieldError, ValueError)

    def test_excess_cells_are_ignored_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            records = extract_records(
                ['"H1"\t"T1"\t"pos"\t"extra"\t""'],
                extract_header_mapping(HEADER),
                DEFAULT_REQUIRED_FIELDS,
                SOURCE,
            )

        assert records == [{"hitid": "H1", "hittypeid": "T1", "Answer.sentiment": "pos"}]
        assert len(caplog.records) == 1
        assert "position 3" in caplog.records[0].getMessage()

    def test_no_lines(self) -> None:
        assert extract_records([], {0: "hitid"}, DEFAULT_REQUIRED_FIELDS, SOURCE) == []
