from __future__ import annotations

import pytest

from crm_import.tabular.tokenizer import format_row, is_blank_row, tokenize


def test_simple_rows_are_trimmed():
    assert tokenize("a , b,c\n 1,2 ,3\n", ",") == [["a", "b", "c"], ["1", "2", "3"]]


def test_quoted_delimiter_and_doubled_quote():
    text = 'name,notes\n"Doe, Jane","said ""hi"""\n'
    assert tokenize(text, ",") == [["name", "notes"], ["Doe, Jane", 'said "hi"']]


def test_line_break_inside_quotes_is_literal():
    text = 'a,b\n"line1\nline2",x\n'
    assert tokenize(text, ",") == [["a", "b"], ["line1\nline2", "x"]]


@pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
def test_line_endings(newline: str):
    text = newline.join(["a,b", "1,2"]) + newline
    assert tokenize(text, ",") == [["a", "b"], ["1", "2"]]


def test_last_line_without_trailing_newline():
    assert tokenize("a,b\n1,2", ",") == [["a", "b"], ["1", "2"]]


def test_trailing_delimiter_keeps_empty_field():
    assert tokenize("a,b,\n", ",") == [["a", "b", ""]]


def test_ragged_rows_allowed():
    assert tokenize("a,b,c\n1\n", ",") == [["a", "b", "c"], ["1"]]


def test_unbalanced_quote_runs_to_end_of_text():
    rows = tokenize('a,b\n"open,still open\nmore\n', ",")
    assert rows[0] == ["a", "b"]
    # 閉じ引用符なし -> 残り全体が 1 フィールド
    assert rows[1] == ["open,still open\nmore"]
    assert len(rows) == 2


def test_other_delimiter_ignores_commas():
    assert tokenize("a;b\n1,5;2\n", ";") == [["a", "b"], ["1,5", "2"]]


def test_empty_text():
    assert tokenize("", ",") == []


def test_blank_row_detection():
    assert is_blank_row(["", "  ", ""])
    assert is_blank_row([])
    assert not is_blank_row(["", "x"])


@pytest.mark.parametrize(
    "fields",
    [
        ["plain", "text"],
        ["Doe, Jane", "x"],
        ['say "cheese"', ""],
        ["multi\nline", "a;b", "tab\there"],
    ],
)
@pytest.mark.parametrize("delimiter", [",", ";", "\t"])
def test_format_row_then_tokenize_round_trip(fields: list[str], delimiter: str):
    text = format_row(fields, delimiter) + "\n"
    assert tokenize(text, delimiter) == [fields]


def test_format_row_quotes_only_when_needed():
    assert format_row(["a", "b,c", 'd"e']) == 'a,"b,c","d""e"'
    assert format_row(["a", "b,c"], ";") == "a;b,c"
