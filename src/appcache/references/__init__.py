from .files import exists, read_text, write_text
from .html import extract_references
from .paths import brace_expand, expand, join_url, relative, to_posix

__all__ = [
    "expand",
    "brace_expand",
    "relative",
    "join_url",
    "to_posix",
    "extract_references",
    "exists",
    "read_text",
    "write_text",
]
