"""
=============================================================================
FILE ACCESS CAPABILITIES
=============================================================================

The file routes never touch the filesystem directly. They receive a
FileReader and a FileWriter and call those:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /files/a.txt  ──►  FileReader.read("public/a.txt")            │
    │                               │                                      │
    │                 ┌─────────────┴─────────────┐                        │
    │                 ▼                           ▼                        │
    │          DiskFileReader              MemoryFileReader               │
    │          (production)                (tests)                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both interfaces report failure by raising OSError (FileNotFoundError,
PermissionError, IsADirectoryError, ...). The router maps every OSError
to 404 Not Found.

Names passed in are already joined to the serve directory by the router,
so adapters do plain I/O on the path they are handed.

=============================================================================
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class FileReader(ABC):
    """Read-by-name capability."""

    @abstractmethod
    def read(self, name: str) -> bytes:
        """
        Return the full contents of ``name``.

        Raises:
            OSError: The file cannot be read for any reason.
        """


class FileWriter(ABC):
    """Write-by-name capability."""

    @abstractmethod
    def write(self, name: str, content: bytes) -> None:
        """
        Create or truncate ``name`` and write ``content`` to it.

        Raises:
            OSError: The file cannot be written for any reason.
        """


# =============================================================================
# DISK ADAPTERS
# =============================================================================


class DiskFileReader(FileReader):
    """Reads regular files from the local filesystem."""

    def read(self, name: str) -> bytes:
        path = Path(name)
        logger.debug(f"Reading {path}")
        return path.read_bytes()


class DiskFileWriter(FileWriter):
    """
    Writes regular files on the local filesystem.

    Parent directories are not created: writing into a directory that
    does not exist fails with FileNotFoundError.
    """

    def write(self, name: str, content: bytes) -> None:
        path = Path(name)
        logger.debug(f"Writing {len(content)} bytes to {path}")
        path.write_bytes(content)


# =============================================================================
# IN-MEMORY DOUBLES
# =============================================================================


class MemoryFileStore:
    """
    Dict-backed storage shared by MemoryFileReader and MemoryFileWriter.

    Attributes:
        files: Name → contents.
        error: When set, every read and write raises this error instead of
               touching ``files``. Useful for simulating a broken disk.
    """

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files: Dict[str, bytes] = dict(files or {})
        self.error: Optional[OSError] = None

    def fail_with(self, error: OSError) -> "MemoryFileStore":
        self.error = error
        return self

    def reader(self) -> "MemoryFileReader":
        return MemoryFileReader(self)

    def writer(self) -> "MemoryFileWriter":
        return MemoryFileWriter(self)


class MemoryFileReader(FileReader):
    def __init__(self, store: MemoryFileStore):
        self.store = store

    def read(self, name: str) -> bytes:
        if self.store.error is not None:
            raise self.store.error
        try:
            return self.store.files[name]
        except KeyError:
            raise FileNotFoundError(name) from None


class MemoryFileWriter(FileWriter):
    def __init__(self, store: MemoryFileStore):
        self.store = store

    def write(self, name: str, content: bytes) -> None:
        if self.store.error is not None:
            raise self.store.error
        self.store.files[name] = bytes(content)
