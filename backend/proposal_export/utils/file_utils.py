# backend/proposal_export/utils/file_utils.py
from pathlib import Path
from typing import Optional
import re

from proposal_export.config import settings
from proposal_export.utils.logging import logger


def sanitize_filename(title: Optional[str]) -> str:
    """Filename stem from a proposal title.

    Non-word characters are stripped, whitespace runs become underscores and
    the result is cut to ``settings.filename_max_length``. Falls back to
    ``settings.default_filename`` when nothing is left.
    """
    safe = re.sub(r"[^\w\s-]", "", title or "", flags=re.ASCII)
    safe = re.sub(r"\s+", "_", safe)
    return safe[:settings.filename_max_length] or settings.default_filename


def save_export(content: bytes, filename: str, output_dir: Optional[Path] = None) -> Path:
    """Write a finished artifact to disk and return its path."""
    target_dir = Path(output_dir) if output_dir is not None else settings.export_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    file_path = target_dir / filename
    file_path.write_bytes(content)
    logger.info("Saved export", extra={"path": str(file_path), "bytes": len(content)})
    return file_path
