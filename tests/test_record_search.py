"""Tests for record keyword search."""

from mturkview.logic.record_search import RecordSearchCondition, match_record, search_records

RECORDS = [
    {"hitid": "H1", "hittypeid": "T1", "Answer.text": "Great product"},
    {"hitid": "H2", "hittypeid": "T1", "Answer.text": "not great"},
    {"hitid": "H3", "hittypeid": "T2"},
]


class TestMatchRecord:
    """Tests for match_record()."""

    def test_empty_condition_matches(self) -> None:
        assert match_record(RECORDS[2], RecordSearchCondition())

    def test_case_insensitive_substring(self) -> None:
        cond = RecordSearchCondition(keyword="GREAT")

        assert match_record(RECORDS[0], cond)
        assert not match_record(RECORDS[2], cond)

    def test_restricted_to_columns(self) -> None:
        cond = RecordSearchCondition(keyword="T1", columns=("Answer.text",))

        assert not match_record(RECORDS[0], cond)

    def test_match_all_requires_every_column(self) -> None:
        cond = RecordSearchCondition(keyword="h", columns=("hitid", "hittypeid"), match_all=True)

        assert not match_record(RECORDS[0], cond)
        assert match_record({"hitid": "h1", "hittypeid": "th"}, cond)


class TestSearchRecords:
    """Tests for search_records()."""

    def test_returns_indexes(self) -> None:
        assert search_records(RECORDS, RecordSearchCondition(keyword="great")) == [0, 1]

    def test_missing_column_is_no_match(self) -> None:
        cond = RecordSearchCondition(keyword="great", columns=("Answer.text",))

        assert search_records(RECORDS, cond) == [0, 1]
