"""CSV import parsing tests."""

from services.csv_import import parse_ticket_csv


def test_parses_rows_in_order():
    result = parse_ticket_csv("name,surname\nAnn,Lee\nBob,Ray\n")

    assert result.ok
    assert [(row.name, row.surname) for row in result.rows] == [("Ann", "Lee"), ("Bob", "Ray")]


def test_header_aliases_are_case_insensitive():
    result = parse_ticket_csv(" First Name ,LastName,Email\nAnn,Lee,ann@example.com\n")

    assert result.ok
    row = result.rows[0]
    assert (row.name, row.surname, row.email) == ("Ann", "Lee", "ann@example.com")


def test_blank_cells_are_kept_for_row_validation():
    result = parse_ticket_csv("name,surname\nAnn,\n,Ray\n")

    assert [(row.name, row.surname) for row in result.rows] == [("Ann", ""), ("", "Ray")]


def test_empty_lines_are_skipped():
    result = parse_ticket_csv("name,surname\n\nAnn,Lee\n , \n")

    assert len(result.rows) == 1


def test_short_rows_leave_fields_missing():
    result = parse_ticket_csv("name,surname\nAnn\n")

    assert result.rows[0].name == "Ann"
    assert result.rows[0].surname is None


def test_missing_required_columns():
    result = parse_ticket_csv("name,email\nAnn,a@example.com\n")

    assert not result.ok
    assert result.errors == ["Missing required columns: surname"]


def test_empty_file():
    assert parse_ticket_csv("").errors == ["CSV file is empty"]
    assert parse_ticket_csv("name,surname\n").errors == ["CSV file is empty"]


def test_byte_order_mark_is_ignored():
    result = parse_ticket_csv("\ufeffname,surname\nAnn,Lee\n")
    assert result.ok
