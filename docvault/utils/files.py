# docvault/utils/files.py
import re
import time
import unicodedata
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional
from urllib.parse import quote
from uuid import uuid4

from ..exceptions import UnsupportedTypeError, ValidationError

PDF_MEDIA_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_HEADER_CHARS = re.compile(r'["\\\x00-\x1f\x7f]')


def normalize_media_type(media_type: Optional[str]) -> str:
    """Strip parameters and case from a Content-Type value"""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def is_pdf_upload(filename: Optional[str], media_type: Optional[str]) -> bool:
    if not filename:
        return False
    has_pdf_extension = PurePosixPath(filename).suffix.lower() == PDF_EXTENSION
    return has_pdf_extension and normalize_media_type(media_type) == PDF_MEDIA_TYPE


def ensure_pdf_upload(filename: Optional[str], media_type: Optional[str]) -> None:
    """Single server-side gate for uploads: both media type and extension must say PDF"""
    if not filename or not filename.strip():
        raise ValidationError("No file uploaded or invalid file type.")
    if not is_pdf_upload(filename, media_type):
        raise UnsupportedTypeError("Only PDF files are allowed.")


def sanitize_filename(filename: str) -> str:
    """Keep the last path component and replace whitespace runs with underscores"""
    # Browsers on Windows may send the full client path
    name = PureWindowsPath(PurePosixPath(filename).name).name
    return _WHITESPACE.sub("_", name.strip()) or "document.pdf"


def generate_storage_name(filename: str) -> str:
    """Unique on-disk name that still embeds the original filename"""
    millis = int(time.time() * 1000)
    return f"{millis}-{uuid4().hex[:8]}-{sanitize_filename(filename)}"


def get_relative_path(absolute_path: Path, base_path: Path) -> str:
    """Convert absolute path to relative path for database storage"""
    absolute_path = Path(absolute_path).absolute()
    base_path = Path(base_path).absolute()

    try:
        return absolute_path.relative_to(base_path).as_posix()
    except ValueError:
        # Outside the base directory, keep the full path
        return str(absolute_path)


def ascii_filename(filename: str) -> str:
    """Closest plain-ASCII rendering of a name, safe inside a quoted header value"""
    name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    name = _UNSAFE_HEADER_CHARS.sub("_", name).strip()
    if not name:
        return "document.pdf"
    if name.startswith("."):
        # Nothing of the stem survived
        return f"document{name}"
    return name


def build_content_disposition(filename: str) -> str:
    """Attachment header value; names needing encoding also get an RFC 5987 filename*"""
    quoted = quote(filename, safe="")
    fallback = ascii_filename(filename)
    if quoted != filename:
        return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"
    return f'attachment; filename="{fallback}"'
