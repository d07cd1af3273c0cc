"""
=============================================================================
FILE STORE
=============================================================================

A flat key/value store backed by one directory.

    FileStore("/tmp/data")

        write("notes.txt", b"hello")   →   /tmp/data/notes.txt  (overwritten)
        read("notes.txt")              →   b"hello"
        read("missing")                →   FileNotFound   (404)
        read(<unreadable>)             →   StoreIOError   (500)

=============================================================================
WHAT THE STORE DOES NOT DO
=============================================================================

- No subdirectories: keys are single path components.
- No path traversal protection. Keys are joined onto the base directory
  as given; callers must not assume otherwise.
- No locking. Two writers to the same key race at the operating system's
  file-replace granularity, and a concurrent reader may see a partial or
  former version.
- No deletion.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from .errors import FileNotFound, StoreIOError


logger = logging.getLogger(__name__)


class FileStore:
    """
    Reads and writes whole files under a base directory.

    The base directory is fixed at construction; it is never taken from
    global state.
    """

    def __init__(self, base_dir: Union[str, Path]):
        """
        Args:
            base_dir: Directory holding the entries. Created by the
                      bootstrap (ServerConfig.prepare_directory), not here.
        """
        self.base_dir = Path(base_dir)

    def path_for(self, name: str) -> Path:
        """Filesystem path of the entry called `name`."""
        return self.base_dir / name

    def read(self, name: str) -> bytes:
        """
        Return the full contents of entry `name`.

        Raises:
            FileNotFound: No such entry.
            StoreIOError: Any other read failure (permissions, a directory
                          in the way, I/O error).
        """
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise FileNotFound(f"File not found: {name}")
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise StoreIOError(f"Failed to read {name}: {e}") from e

    def write(self, name: str, data: bytes) -> None:
        """
        Create or overwrite entry `name` with `data`.

        Raises:
            StoreIOError: The file could not be created or written.
        """
        path = self.path_for(name)
        try:
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Error writing {path}: {e}")
            raise StoreIOError(f"Failed to write {name}: {e}") from e

        logger.debug(f"Stored {len(data)} bytes in {path}")

    def __repr__(self) -> str:
        return f"FileStore({str(self.base_dir)!r})"
