"""
Binary file detection.

Binary payloads are never line-diffed nor sent to the language model.
A known extension decides immediately; otherwise a sample of the
content is inspected for NUL bytes and for the share of bytes
outside printable ASCII. The sample is taken from the raw bytes,
before any decoding.
"""

from __future__ import annotations

from pathlib import PurePosixPath


SAMPLE_SIZE = 8192
NON_PRINTABLE_THRESHOLD = 0.3

BINARY_EXTENSIONS = frozenset({
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".ico", ".svg", ".tiff", ".tif",
    # Video
    ".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm", ".mkv", ".m4v",
    # Audio
    ".mp3", ".wav", ".flac", ".aac", ".ogg", ".wma", ".m4a",
    # Archives
    ".zip", ".tar", ".gz", ".bz2", ".7z", ".rar", ".xz",
    # Office documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    # Executables and libraries
    ".exe", ".dll", ".so", ".dylib", ".bin", ".app",
    # Fonts
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    # Databases and disk images
    ".sqlite", ".db", ".iso", ".dmg", ".pkg", ".deb", ".rpm",
})

# Control bytes that still count as text.
_TEXT_WHITESPACE = {9, 10, 13}


def has_binary_extension(filename: str) -> bool:
    return PurePosixPath(filename).suffix.lower() in BINARY_EXTENSIONS


def looks_binary(content: bytes) -> bool:
    """Return True if the first ``SAMPLE_SIZE`` bytes of ``content`` look binary."""
    if not content:
        return False
    sample = content[:SAMPLE_SIZE]
    if b"\0" in sample:
        return True
    non_printable = 0
    for byte in sample:
        if byte < 32 and byte not in _TEXT_WHITESPACE:
            non_printable += 1
        elif byte > 126:
            non_printable += 1
    return non_printable / len(sample) > NON_PRINTABLE_THRESHOLD


def is_binary_file(filename: str, committed_content: bytes, working_content: bytes) -> bool:
    """Decide whether a changed file should be treated as binary.

    Parameters
    ----------
    filename : str
        Path of the file; only its extension is inspected.
    committed_content : bytes
        Raw content from the last commit, empty if there is none.
    working_content : bytes
        Raw content on disk, empty if the file was deleted.

    Returns
    -------
    bool
        True if the extension is a known binary one or either content
        snapshot looks binary.
    """
    if has_binary_extension(filename):
        return True
    return looks_binary(committed_content) or looks_binary(working_content)
