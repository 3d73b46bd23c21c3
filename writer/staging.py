"""
Staged file output.

Files are first written to a temporary sibling and moved into place only once
every file of a run has been written, so a failed run leaves no partial
output behind.
"""

import logging
import os
import tempfile
from typing import Dict, List


logger = logging.getLogger(__name__)


class StagedWriter:
    """
    Collects files to publish together.

    Usage:
        staged = StagedWriter()
        try:
            staged.stage(output_path, output_text)
            staged.stage(report_path, report_text)
            staged.commit()
        finally:
            staged.discard()
    """

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding
        self._staged: Dict[str, str] = {}  # final path -> temp path

    def stage(self, path: str, text: str) -> str:
        """
        Write ``text`` to a temporary file next to ``path``.

        Returns:
            Path of the temporary file
        """
        directory = os.path.dirname(os.path.abspath(path))
        if not os.path.isdir(directory):
            raise FileNotFoundError(f"Output directory does not exist: {directory}")

        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{os.path.basename(path)}.", suffix='.tmp', dir=directory
        )
        try:
            with os.fdopen(fd, 'w', encoding=self.encoding) as f:
                f.write(text)
        except BaseException:
            os.unlink(tmp_path)
            raise

        previous = self._staged.pop(path, None)
        if previous is not None and os.path.exists(previous):
            os.unlink(previous)
        self._staged[path] = tmp_path

        logger.debug(f"Staged {path} -> {tmp_path}")
        return tmp_path

    @property
    def pending(self) -> List[str]:
        return list(self._staged)

    def commit(self) -> List[str]:
        """Move every staged file into place. Returns the published paths."""
        published = []
        for path, tmp_path in list(self._staged.items()):
            os.replace(tmp_path, path)
            del self._staged[path]
            published.append(path)
        return published

    def discard(self) -> None:
        """Remove temporary files that were not committed."""
        for tmp_path in self._staged.values():
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
        self._staged.clear()
