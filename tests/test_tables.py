"""Tests for the generic export table parser."""

from __future__ import annotations

from xerlens.tables import find_table, parse_tables, read_export_header


def _xer(*rows: tuple[str, ...], eol: str = "\n") -> str:
    return "".join("\t".join(row) + eol for row in rows)


# ────────────────────────────────────────────────────────────────
# Table structure
# ────────────────────────────────────────────────────────────────


class TestParseTables:
    def test_single_project_table(self) -> None:
        text = "%T\tPROJECT\n%F\tproj_id\tproj_short_name\tproject_name\n%R\t1\tDEMO\tDemo Project\n"
        tables = parse_tables(text)
        assert len(tables) == 1
        assert tables[0].name == "PROJECT"
        assert tables[0].columns == ["proj_id", "proj_short_name", "project_name"]
        assert tables[0].rows == [
            {"proj_id": "1", "proj_short_name": "DEMO", "project_name": "Demo Project"}
        ]

    def test_table_order_preserved(self, sample_text: str) -> None:
        names = [t.name for t in parse_tables(sample_text)]
        assert names == ["CURRTYPE", "PROJECT", "PROJWBS", "TASK", "TASKPRED"]

    def test_row_order_preserved(self) -> None:
        text = _xer(("%T", "T"), ("%F", "id"), *[("%R", str(i)) for i in range(5)])
        assert [r["id"] for r in parse_tables(text)[0].rows] == ["0", "1", "2", "3", "4"]

    def test_short_row_padded_with_empty_strings(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a", "b", "c"), ("%R", "1"))
        assert parse_tables(text)[0].rows == [{"a": "1", "b": "", "c": ""}]

    def test_extra_values_discarded(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a"), ("%R", "1", "2", "3"))
        assert parse_tables(text)[0].rows == [{"a": "1"}]

    def test_every_row_has_declared_columns(self, sample_text: str) -> None:
        for table in parse_tables(sample_text):
            for row in table.rows:
                assert list(row.keys()) == table.columns

    def test_second_fields_line_overwrites_columns(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a"), ("%F", "x", "y"), ("%R", "1", "2"))
        table = parse_tables(text)[0]
        assert table.columns == ["x", "y"]
        assert table.rows == [{"x": "1", "y": "2"}]

    def test_second_fields_line_rekeys_earlier_rows(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a", "b"), ("%R", "1", "2"), ("%F", "x", "y", "z"), ("%R", "3", "4", "5"))
        table = parse_tables(text)[0]
        assert table.columns == ["x", "y", "z"]
        assert table.rows == [{"x": "1", "y": "2", "z": ""}, {"x": "3", "y": "4", "z": "5"}]
        for row in table.rows:
            assert list(row.keys()) == table.columns

    def test_narrower_fields_line_truncates_earlier_rows(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a", "b"), ("%R", "1", "2"), ("%F", "x"))
        assert parse_tables(text)[0].rows == [{"x": "1"}]

    def test_rows_before_columns_are_empty_maps(self) -> None:
        text = _xer(("%T", "T"), ("%R", "1", "2"))
        assert parse_tables(text)[0].rows == [{}]

    def test_table_without_name(self) -> None:
        assert parse_tables("%T\n")[0].name == ""

    def test_empty_values_kept(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a", "b"), ("%R", "", "2"))
        assert parse_tables(text)[0].rows == [{"a": "", "b": "2"}]


# ────────────────────────────────────────────────────────────────
# Line endings and ignored input
# ────────────────────────────────────────────────────────────────


class TestLineHandling:
    def test_crlf_endings(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a", "b"), ("%R", "1", "2"), eol="\r\n")
        table = parse_tables(text)[0]
        assert table.name == "T"
        assert table.rows == [{"a": "1", "b": "2"}]

    def test_mixed_endings(self) -> None:
        text = "%T\tT\r\n%F\ta\n%R\t1\r\n%R\t2\n"
        assert [r["a"] for r in parse_tables(text)[0].rows] == ["1", "2"]

    def test_only_one_carriage_return_stripped(self) -> None:
        text = "%T\tT\n%F\ta\n%R\tx\r\r\n"
        assert parse_tables(text)[0].rows == [{"a": "x\r"}]

    def test_leading_byte_order_mark(self) -> None:
        text = "\ufeff" + _xer(("%T", "PROJECT"), ("%F", "proj_id"), ("%R", "1"))
        tables = parse_tables(text)
        assert [t.name for t in tables] == ["PROJECT"]
        assert tables[0].rows == [{"proj_id": "1"}]

    def test_unknown_markers_ignored(self) -> None:
        text = _xer(("ERMHDR", "19.12"), ("%T", "T"), ("%F", "a"), ("%X", "junk"), ("%R", "1"), ("%E",))
        tables = parse_tables(text)
        assert len(tables) == 1
        assert tables[0].rows == [{"a": "1"}]

    def test_blank_lines_ignored(self) -> None:
        text = "\n\n%T\tT\n\n%F\ta\n\n%R\t1\n\n"
        assert parse_tables(text)[0].rows == [{"a": "1"}]

    def test_marker_must_be_exact(self) -> None:
        text = " %T\tT\n%t\tU\n"
        assert parse_tables(text) == []

    def test_lines_before_first_table_dropped(self) -> None:
        text = _xer(("%F", "a"), ("%R", "1"), ("%T", "T"), ("%F", "b"), ("%R", "2"))
        tables = parse_tables(text)
        assert len(tables) == 1
        assert tables[0].columns == ["b"]
        assert tables[0].rows == [{"b": "2"}]


class TestNeverRaises:
    def test_empty_text(self) -> None:
        assert parse_tables("") == []

    def test_garbage(self) -> None:
        assert parse_tables("\x00\t\t\t%R\n%F\n\r\r\n\t") == []

    def test_only_orphans(self) -> None:
        assert parse_tables("%F\ta\n%R\t1\n") == []

    def test_deterministic(self, sample_text: str) -> None:
        assert parse_tables(sample_text) == parse_tables(sample_text)


# ────────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────────


class TestFindTable:
    def test_first_match_wins(self) -> None:
        text = _xer(("%T", "T"), ("%F", "a"), ("%R", "first"), ("%T", "T"), ("%F", "a"), ("%R", "second"))
        table = find_table(parse_tables(text), "T")
        assert table is not None
        assert table.rows == [{"a": "first"}]

    def test_case_sensitive(self, sample_text: str) -> None:
        assert find_table(parse_tables(sample_text), "project") is None

    def test_missing(self) -> None:
        assert find_table([], "PROJECT") is None


class TestExportHeader:
    def test_reads_ermhdr(self, sample_text: str) -> None:
        header = read_export_header(sample_text)
        assert header is not None
        assert header.version == "19.12"
        assert header.export_date == "2026-01-15"
        assert header.user_name == "admin"
        assert header.user_full_name == "Site Admin"
        assert header.database == "PMDB"
        assert header.currency == "USD"

    def test_short_header_padded(self) -> None:
        header = read_export_header("ERMHDR\t8.0\n%T\tPROJECT\n")
        assert header is not None
        assert header.version == "8.0"
        assert header.currency == ""

    def test_leading_blank_lines_skipped(self) -> None:
        assert read_export_header("\r\n\nERMHDR\t20.12\r\n") is not None

    def test_leading_byte_order_mark(self) -> None:
        header = read_export_header("\ufeffERMHDR\t19.12\t2026-01-15\n")
        assert header is not None
        assert header.version == "19.12"

    def test_no_header(self) -> None:
        assert read_export_header("%T\tPROJECT\n") is None

    def test_empty(self) -> None:
        assert read_export_header("") is None
