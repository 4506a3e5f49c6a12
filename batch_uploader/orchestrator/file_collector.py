"""Turn local paths into file descriptors."""
from pathlib import Path
from typing import Iterable, List
import mimetypes

from ..models import FileDescriptor

DEFAULT_MIME_TYPE = "application/octet-stream"


class FileCollector:
    """Collects files from paths given on the command line."""

    @staticmethod
    def describe(path: Path) -> FileDescriptor:
        mime_type, _ = mimetypes.guess_type(path.name)
        return FileDescriptor(
            name=path.name,
            size=path.stat().st_size,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            path=path,
        )

    @classmethod
    def collect_files(cls, paths: Iterable[Path]) -> List[FileDescriptor]:
        """
        Collect files, walking directories recursively.

        Args:
            paths: Files or folders

        Returns:
            File descriptors; each folder's files in sorted order
        """
        files = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                for item in sorted(path.rglob("*")):
                    if item.is_file():
                        files.append(cls.describe(item))
            elif path.is_file():
                files.append(cls.describe(path))
            else:
                raise FileNotFoundError(f"not a file or folder: {path}")
        return files
