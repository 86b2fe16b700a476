"""
app/parsers package marker.
"""

from app.parsers.csv_tokenizer import NO_HEADERS_ERROR, TokenizedCSV, read_header_row, tokenize_csv

__all__ = [
    "NO_HEADERS_ERROR",
    "TokenizedCSV",
    "read_header_row",
    "tokenize_csv",
]
