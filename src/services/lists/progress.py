"""
MassBan - Progress File
=======================

Local append-only record of names already actioned by a pass.

DESIGN:
    Names are joined by SEPARATOR. Every append is flushed and fsynced
    before returning, so a crash right after a successful command still
    leaves the name on disk and the next run resumes after it.

    The file is never created, rewritten or compacted here. A missing
    file is a setup mistake the session controller reports.
"""

import os
from pathlib import Path
from typing import List

from src.core.constants import SEPARATOR
from src.core.errors import LocalReadError, ProgressWriteError


class ProgressFile:
    """
    A progress file on disk.

    Attributes:
        path: Location of the file.
        separator: Token placed between stored names.
    """

    def __init__(self, path: Path, separator: str = SEPARATOR) -> None:
        self.path = Path(path)
        self.separator = separator

    def __repr__(self) -> str:
        return f"ProgressFile({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        """
        Read the whole file as UTF-8, line endings untouched.

        Raises:
            LocalReadError: If the file is missing or cannot be decoded.
        """
        try:
            return self.path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LocalReadError(f"Could not read progress file {self.path}: {e}") from e

    def read_names(self) -> List[str]:
        """Stored names, in file order, empty entries included."""
        return self.read_text().split(self.separator)

    def append(self, name: str) -> None:
        """
        Append one name followed by the separator.

        A separator is written first when the file does not already end
        with one, so a hand-edited file without a trailing newline never
        glues two names together.

        Raises:
            ProgressWriteError: If the write fails.
        """
        sep = self.separator.encode("utf-8")
        try:
            with open(self.path, "ab+") as f:
                size = f.seek(0, os.SEEK_END)
                chunk = name.encode("utf-8") + sep
                if size:
                    f.seek(max(0, size - len(sep)))
                    if f.read(len(sep)) != sep:
                        chunk = sep + chunk
                f.write(chunk)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise ProgressWriteError(f"Could not record {name} in {self.path}: {e}") from e


__all__ = ["ProgressFile"]
