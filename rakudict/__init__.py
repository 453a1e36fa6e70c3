"""Japanese kana-kanji dictionaries: binary, SKK and user dictionaries with merged lookup."""

__version__ = "0.3.0"