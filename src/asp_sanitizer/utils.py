"""
Utility functions for asp-sanitizer.

Encoding detection and safe file reading for the CLI.
"""

from __future__ import annotations

from pathlib import Path

import chardet


def detect_encoding(file_path: Path, sample_size: int = 8192) -> str:
    """
    Detect the encoding of a file.

    Strategy:
    1. Check for BOM markers first
    2. Try UTF-8 (most common for modern source files)
    3. Fall back to chardet only if UTF-8 fails

    Args:
        file_path: Path to the file
        sample_size: Number of bytes to sample for detection

    Returns:
        Detected encoding name (e.g., 'utf-8', 'latin-1')
    """
    try:
        with open(file_path, "rb") as f:
            sample = f.read(sample_size)
    except OSError:
        return "utf-8"

    if not sample:
        return "utf-8"

    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe"):
        return "utf-16-le"
    if sample.startswith(b"\xfe\xff"):
        return "utf-16-be"

    try:
        sample.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    encoding = chardet.detect(sample).get("encoding")
    if encoding is None:
        return "utf-8"

    encoding = encoding.lower()
    if encoding in ("ascii", "utf-8", "utf8"):
        return "utf-8"

    return encoding


def read_file_safe(file_path: Path, encoding: str | None = None) -> tuple[str, str]:
    """
    Read a text file, detecting its encoding when not given.

    Undecodable bytes are replaced rather than raising. Line endings are
    kept as they are on disk.

    Args:
        file_path: Path to the file
        encoding: Encoding to use (None for auto-detect)

    Returns:
        Tuple of (content, encoding_used)

    Raises:
        OSError: If the file cannot be read
    """
    if encoding is not None:
        try:
            with open(file_path, encoding=encoding, errors="replace", newline="") as f:
                return f.read(), encoding
        except LookupError:
            # Unknown encoding, fall through to auto-detect
            pass

    detected = detect_encoding(file_path)
    try:
        with open(file_path, encoding=detected, errors="replace", newline="") as f:
            return f.read(), detected
    except LookupError:
        with open(file_path, encoding="utf-8", errors="replace", newline="") as f:
            return f.read(), "utf-8"
