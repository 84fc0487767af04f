"""
JSON document persistence for the dashboard artifacts.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write_json(path: PathLike, document: Dict[str, Any]) -> Path:
    """
    Write a JSON document so readers only ever see the old or the new file.

    The document is serialized to a temporary file in the target directory,
    flushed to disk and moved into place with ``os.replace``. The file gets the
    mode a plain ``open()`` would give it under the current umask.

    Args:
        path: Destination file.
        document: JSON-serializable mapping.

    Returns:
        Path: The destination path.

    Raises:
        TypeError: If the document is not JSON-serializable.
        OSError: If the file cannot be written.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(document, indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.debug(f"Wrote {len(payload)} bytes to {target}")
    return target


def read_json(path: PathLike) -> Optional[Any]:
    """
    Read a JSON document.

    Returns:
        The decoded document, or None when the file is missing or unreadable.
    """
    target = Path(path)
    if not target.exists():
        return None
    try:
        with target.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {target}: {e}")
        return None
