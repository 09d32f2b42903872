"""
Request-scoped temporary storage for uploaded bytes.
"""
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@contextmanager
def staged_upload(file_content: bytes, suffix: str = "", directory: Optional[str] = None) -> Iterator[str]:
    """
    Write an upload to a temporary file and yield its path.

    The file is removed when the block exits, whether it finished normally or
    raised. A failed removal is logged and does not mask the block's outcome.
    """
    fd, path = tempfile.mkstemp(prefix="datalens-", suffix=suffix, dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(file_content)
        logger.debug(f"Staged upload at {path} ({len(file_content)} bytes)")
        yield path
    finally:
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Failed to delete temp file {path}: {e}")
