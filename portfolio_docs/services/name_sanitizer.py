"""Storage-safe names for user-supplied file and folder names."""

import re
import unicodedata
import uuid
from typing import Optional, Tuple

from ..core.config import settings

_DISALLOWED = re.compile(r"[^A-Za-z0-9._-]")
_UNDERSCORE_RUN = re.compile(r"_+")


def sanitize_name(value: str, lowercase: Optional[bool] = None) -> str:
    """Normalize *value* into a string containing only ``[A-Za-z0-9._-]``.

    Accents are stripped, every other disallowed character becomes ``_``,
    runs of ``_`` collapse and leading/trailing ``_`` are trimmed. May return
    an empty string; callers building a path segment must handle that.
    """
    if lowercase is None:
        lowercase = settings.sanitize_lowercase

    decomposed = unicodedata.normalize("NFKD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    result = _DISALLOWED.sub("_", stripped)
    result = _UNDERSCORE_RUN.sub("_", result).strip("_")
    return result.lower() if lowercase else result


def split_extension(file_name: str) -> Tuple[str, str]:
    """Split ``"report.final.pdf"`` into ``("report.final", "pdf")``.

    Names without a dot, or whose only dot is the leading one, have no extension.
    """
    base, dot, ext = file_name.rpartition(".")
    if not dot or not base:
        return file_name, ""
    return base, ext


def build_storage_path(company_id: str, file_name: str, timestamp_ms: int) -> str:
    """Storage locator for an uploaded file: ``{company}/{ts}_{name}.{ext}``."""
    base, ext = split_extension(file_name)
    safe_base = sanitize_name(base) or uuid.uuid4().hex[:12]
    safe_ext = sanitize_name(ext)
    suffix = f".{safe_ext}" if safe_ext else ""
    return f"{company_id}/{timestamp_ms}_{safe_base}{suffix}"
