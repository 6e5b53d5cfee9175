"""Study guide adapter (remote `study_guides` sheet).

There is no file storage behind the remote store: uploads only yield a
transient handle valid for the current session.
"""
from __future__ import annotations

import os
import uuid
from typing import List, Optional
from urllib.parse import quote

from bookclub.services import collection_sync
from bookclub.services.entities import StudyGuide
from bookclub.services.errors import ValidationError
from bookclub.services.local_mirror import GUIDES_KEY, LocalMirror, find_index
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.study_guides")

ALLOWED_EXTENSION = ".docx"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TRANSIENT_SCHEME = "session-file://"


def list_study_guides(mirror: LocalMirror) -> List[StudyGuide]:
    return collection_sync.fetch(mirror, GUIDES_KEY, "getGuides", StudyGuide)


def save_study_guide(mirror: LocalMirror, guide: StudyGuide) -> StudyGuide:
    return collection_sync.append(mirror, GUIDES_KEY, "saveGuide", guide, timestamp_field="uploaded_at", prepend=True)


def delete_study_guide(mirror: LocalMirror, guide_id: str) -> None:
    """Delete the guide row, releasing its uploaded file first when one is known."""
    items = mirror.read_list(GUIDES_KEY)
    idx = find_index(items, guide_id)
    file_url = items[idx].get("fileUrl") if idx != -1 else None
    if file_url:
        delete_study_guide_file(file_url)
    collection_sync.remove(mirror, GUIDES_KEY, "deleteGuide", guide_id)


def is_docx(filename: str, content_type: Optional[str] = None) -> bool:
    return (filename or "").lower().endswith(ALLOWED_EXTENSION) or content_type == DOCX_MIME


def upload_study_guide_file(filename: str, content_type: Optional[str] = None) -> str:
    """Return a transient handle for an uploaded guide file.

    The bytes are not persisted anywhere; the handle only lets the UI show
    the file name for the rest of the session.
    """
    if not is_docx(filename, content_type):
        raise ValidationError("Only .docx files are allowed")
    name = os.path.basename(filename)
    LOG.info("File storage not available for study guides; issuing transient handle name=%s", name)
    return f"{TRANSIENT_SCHEME}{uuid.uuid4().hex}/{quote(name)}"


def delete_study_guide_file(file_url: str) -> None:
    LOG.warning("delete_study_guide_file: file deletion not supported by the remote store url=%s", file_url)


def default_title(filename: str) -> str:
    base = os.path.basename(filename or "")
    if base.lower().endswith(ALLOWED_EXTENSION):
        base = base[: -len(ALLOWED_EXTENSION)]
    return base


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


__all__ = [
    "list_study_guides",
    "save_study_guide",
    "delete_study_guide",
    "upload_study_guide_file",
    "delete_study_guide_file",
    "default_title",
    "format_file_size",
]
