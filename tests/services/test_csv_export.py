"""
Tests for CSV export.
"""

from datetime import datetime
from decimal import Decimal

from drive_crm.models.enums import EntryType
from drive_crm.services.csv_export import csv_download, escape_cell, to_csv_rows


def test_empty_rows_give_empty_string():
    assert to_csv_rows([]) == ""


def test_header_from_first_row():
    rows = [{"name": "Rita", "balance": 10}, {"name": "Ivan", "balance": -5}]

    assert to_csv_rows(rows) == "name,balance\r\nRita,10\r\nIvan,-5"


def test_special_characters_quoted():
    rows = [{"a": "x,y", "b": 'say "hi"', "c": "line1\nline2", "d": "plain"}]

    assert to_csv_rows(rows) == 'a,b,c,d\r\n"x,y","say ""hi""","line1\nline2",plain'


def test_none_is_empty_cell():
    rows = [{"a": None, "b": "x"}]

    assert to_csv_rows(rows) == "a,b\r\n,x"


def test_explicit_columns_select_and_order():
    rows = [{"a": 1, "b": 2, "c": 3}]

    assert to_csv_rows(rows, columns=["c", "a"]) == "c,a\r\n3,1"


def test_typed_values():
    rows = [{
        "when": datetime(2024, 5, 16, 10, 30),
        "type": EntryType.PAYMENT,
        "amount": Decimal("12.50"),
    }]

    assert to_csv_rows(rows) == "when,type,amount\r\n2024-05-16T10:30:00,payment,12.50"


def test_download_headers():
    response = csv_download("a\r\n1", "expenses.csv")

    assert response.media_type.startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="expenses.csv"'


def test_name_with_comma_and_quotes():
    rows = [{"full_name": 'Smith, "Pro"'}]

    assert to_csv_rows(rows) == 'full_name\r\n"Smith, ""Pro"""'


def test_single_empty_cell_is_not_quoted():
    assert to_csv_rows([{"x": None}]) == "x\r\n"
    assert to_csv_rows([{"x": ""}, {"x": "a"}]) == "x\r\n\r\na"


def test_escape_cell():
    assert escape_cell("plain") == "plain"
    assert escape_cell("a\rb") == '"a\rb"'
    assert escape_cell(None) == ""
