"""Resume file reader: turns an uploaded resume into the plain text the profile extractor consumes."""

import re
from collections.abc import Callable
from pathlib import Path

import docx
import pdfplumber

from .errors import UnsupportedFormat

_BLANK_RUN = re.compile(r"\n{3,}")


def _read_pdf(path: Path) -> str:
    with pdfplumber.open(path) as pdf:
        pages = (page.extract_text() for page in pdf.pages)
        return "\n\n".join(text for text in pages if text)


def _read_docx(path: Path) -> str:
    document = docx.Document(str(path))
    return "\n\n".join(p.text for p in document.paragraphs if p.text.strip())


def _read_plain(path: Path) -> str:
    return path.read_text(encoding="utf-8")


_READERS: dict[str, Callable[[Path], str]] = {
    ".pdf": _read_pdf,
    ".docx": _read_docx,
    ".md": _read_plain,
    ".txt": _read_plain,
}

SUPPORTED_EXTENSIONS = frozenset(_READERS)


def normalize_whitespace(text: str) -> str:
    """Trim every line and keep at most one blank line between paragraphs."""
    trimmed = "\n".join(line.strip() for line in text.splitlines())
    return _BLANK_RUN.sub("\n\n", trimmed).strip()


def extract_text(cv_path: str | Path) -> str:
    """
    Read a resume and return its text with whitespace normalized.

    Raises:
        FileNotFoundError: *cv_path* does not exist.
        UnsupportedFormat: The extension has no reader, or the file holds no text.
    """
    path = Path(cv_path)
    if not path.exists():
        raise FileNotFoundError(f"Resume not found: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        supported = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        raise UnsupportedFormat(f"Unsupported resume format '{path.suffix or '(none)'}'; expected one of {supported}")

    text = normalize_whitespace(reader(path))
    if not text:
        raise UnsupportedFormat(f"No text could be extracted from {path.name}")
    return text
