"""Text and workbook readers turning raw files into rows of string fields."""

from .delimiter import COMMA, SEMICOLON, TAB, detect_delimiter
from .tokenizer import format_row, is_blank_row, tokenize

__all__ = [
    "COMMA",
    "SEMICOLON",
    "TAB",
    "detect_delimiter",
    "format_row",
    "is_blank_row",
    "tokenize",
]
