from feedback_import.imports.csv_parser import decode_content, parse_csv
from tests.helpers import make_csv


class TestParseCSV:
    """Tests for parse_csv."""

    def test_simple_rows(self):
        """Test every data row becomes one record keyed by header."""
        text = make_csv("Title,Votes,Status", "Dark mode,150,Planned", "Export,3,open")

        document = parse_csv(text)

        assert document.headers == ["Title", "Votes", "Status"]
        assert document.rows == [
            {"Title": "Dark mode", "Votes": "150", "Status": "Planned"},
            {"Title": "Export", "Votes": "3", "Status": "open"},
        ]

    def test_row_count_matches_data_lines(self):
        """Test N plain data lines give exactly N records with every header present."""
        lines = [f"Item {i},{i},open" for i in range(25)]
        document = parse_csv(make_csv("Title,Votes,Status", *lines))

        assert len(document.rows) == 25
        for row in document.rows:
            assert set(row) == {"Title", "Votes", "Status"}

    def test_quoted_field_keeps_comma_and_newline(self):
        """Test a quoted cell holds a literal comma and newline."""
        text = 'Title,Description\n"Bulk edit","a,b\nc"\n'

        document = parse_csv(text)

        assert len(document.rows) == 1
        assert document.rows[0]["Description"] == "a,b\nc"

    def test_escaped_quotes(self):
        """Test doubled quotes inside a quoted cell become one literal quote."""
        document = parse_csv('Title\n"Support ""beta"" flag"\n')

        assert document.rows[0]["Title"] == 'Support "beta" flag'

    def test_crlf_line_endings(self):
        """Test CRLF pairs are a single line break."""
        document = parse_csv("Title,Status\r\nOne,open\r\nTwo,done\r\n")

        assert [row["Title"] for row in document.rows] == ["One", "Two"]
        assert document.rows[1]["Status"] == "done"

    def test_bare_carriage_return_breaks_rows(self):
        """Test a lone CR ends a row."""
        document = parse_csv("Title\rOne\rTwo")

        assert [row["Title"] for row in document.rows] == ["One", "Two"]

    def test_blank_rows_dropped(self):
        """Test rows with only empty cells are removed and partial rows kept."""
        text = make_csv("Title,Status", ",", "  ,  ", ",open", "Real,")

        document = parse_csv(text)

        assert document.rows == [
            {"Title": "", "Status": "open"},
            {"Title": "Real", "Status": ""},
        ]

    def test_missing_trailing_cells_default_to_empty(self):
        """Test short rows are padded with empty strings."""
        document = parse_csv(make_csv("Title,Description,Status", "Only title"))

        assert document.rows == [{"Title": "Only title", "Description": "", "Status": ""}]

    def test_cells_and_headers_are_trimmed(self):
        """Test whitespace around headers and cells is stripped."""
        document = parse_csv(make_csv(" Title , Status ", "  Padded  ,  open "))

        assert document.headers == ["Title", "Status"]
        assert document.rows[0] == {"Title": "Padded", "Status": "open"}

    def test_bom_stripped_from_first_header(self):
        """Test a leading byte order mark does not leak into the first header."""
        document = parse_csv("\ufeffTitle,Status\nOne,open\n")

        assert document.headers == ["Title", "Status"]
        assert document.rows[0]["Title"] == "One"

    def test_empty_input(self):
        """Test empty text gives no headers and no rows."""
        document = parse_csv("")

        assert document.headers == []
        assert document.rows == []
        assert document.is_empty

    def test_header_only(self):
        """Test a file with just a header row has zero data rows."""
        document = parse_csv("Title,Status\n")

        assert document.headers == ["Title", "Status"]
        assert document.rows == []
        assert document.is_empty

    def test_no_trailing_newline(self):
        """Test the final row is flushed at end of input."""
        document = parse_csv("Title\nLast")

        assert document.rows == [{"Title": "Last"}]

    def test_unterminated_quote_is_absorbed(self):
        """Test malformed quoting does not raise and swallows the rest of the line."""
        document = parse_csv('Title,Status\n"Broken,open\nNext,done\n')

        assert len(document.rows) == 1
        assert document.rows[0]["Title"] == "Broken,open\nNext,done"
        assert document.rows[0]["Status"] == ""

    def test_duplicate_headers_allowed(self):
        """Test duplicate headers are preserved and the later cell wins in the record."""
        document = parse_csv(make_csv("Title,Title", "first,second"))

        assert document.headers == ["Title", "Title"]
        assert document.rows[0] == {"Title": "second"}


class TestDecodeContent:
    """Tests for decode_content."""

    def test_utf8(self):
        assert decode_content("Café".encode("utf-8")) == "Café"

    def test_latin1_fallback(self):
        """Test bytes that are not valid UTF-8 fall back to Latin-1."""
        assert decode_content("Café".encode("latin-1")) == "Café"

    def test_utf8_bom_survives_for_parser(self):
        """Test the BOM is kept by decoding and removed by parsing."""
        text = decode_content(b"\xef\xbb\xbfTitle\nOne\n")

        assert text.startswith("\ufeff")
        assert parse_csv(text).headers == ["Title"]
