"""File discovery for the upload batch.

Walks each root path named in the path specs, following symbolic links,
and gathers every regular file into an UploadBatch.

Ordering: entries within a directory are visited in name order, and roots
are visited in the order given. Nothing beyond that is guaranteed; the same
file reached through two roots is collected twice.
"""

import logging
import os
import stat
from typing import Iterator, Sequence

from canvas_upload.errors import FileAccessFailure, MissingFilename, NoFilesFound
from canvas_upload.models import FileEntry, UploadBatch

logger = logging.getLogger(__name__)


def split_path_spec(spec: str) -> list[str]:
    """Split a whitespace-separated path spec into root paths.

    Args:
        spec: String such as "assets/ logo.png"

    Returns:
        Root paths, with empty tokens dropped.
    """
    return spec.split()


def lossy_name(name: str) -> str:
    """Decode a file system name as UTF-8, replacing undecodable bytes.

    Names that are not valid UTF-8 come back from ``os`` with surrogate
    escapes, which cannot be encoded into a request or printed.
    """
    return os.fsencode(name).decode("utf-8", "replace")


def base_name_of(path: str) -> str:
    """Return the final component of ``path``, lossily decoded.

    Raises:
        MissingFilename: If the path has no final component.
    """
    name = os.path.basename(path.rstrip(os.sep))
    if not name or name in (".", ".."):
        raise MissingFilename(path)
    return lossy_name(name)


class FileCollector:
    """Discovers regular files under a set of root paths."""

    def collect(self, path_specs: Sequence[str]) -> UploadBatch:
        """Collect every regular file under the given path specs.

        Args:
            path_specs: Sequence of whitespace-separated root path lists

        Returns:
            UploadBatch with entries in discovery order

        Raises:
            NoFilesFound: If no regular file exists under any root.
            MissingFilename: If a discovered path has no final component.
            FileAccessFailure: If a discovered file cannot be stat'ed.
        """
        entries = []
        for spec in path_specs:
            for root in split_path_spec(spec):
                for path in self.iter_files(root):
                    entries.append(self._make_entry(path))

        if not entries:
            raise NoFilesFound(" ".join(path_specs))

        batch = UploadBatch.from_entries(entries)
        logger.debug("Collected %d files (%d bytes)", len(batch), batch.total_size_bytes)
        return batch

    def iter_files(self, root: str) -> Iterator[str]:
        """Yield the absolute path of every regular file under ``root``.

        A root that is itself a regular file is yielded directly. Roots
        that are missing or unreadable are skipped with a warning.
        """
        try:
            root_stat = os.stat(root)
        except OSError as e:
            logger.warning("Skipping %s: %s", root, e)
            return

        if stat.S_ISREG(root_stat.st_mode):
            yield os.path.abspath(root)
            return

        if not stat.S_ISDIR(root_stat.st_mode):
            logger.debug("Skipping %s: not a regular file or directory", root)
            return

        # Directory path -> (st_dev, st_ino) keys of itself and its ancestors
        lineage = {root: frozenset([(root_stat.st_dev, root_stat.st_ino)])}

        def on_error(error: OSError) -> None:
            logger.warning("Skipping %s: %s", error.filename, error)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=True):
            ancestors = lineage.pop(dirpath, frozenset())
            # Only links back into the current lineage form a cycle
            kept = []
            for name in sorted(dirnames):
                child = os.path.join(dirpath, name)
                try:
                    dir_stat = os.stat(child)
                except OSError:
                    continue
                key = (dir_stat.st_dev, dir_stat.st_ino)
                if key in ancestors:
                    logger.debug("Not re-entering %s (symlink cycle)", child)
                    continue
                lineage[child] = ancestors | {key}
                kept.append(name)
            dirnames[:] = kept

            for name in sorted(filenames):
                path = os.path.join(dirpath, name)
                # os.path.isfile follows links; broken links and devices fail it
                if os.path.isfile(path):
                    yield os.path.abspath(path)

    def _make_entry(self, path: str) -> FileEntry:
        name = base_name_of(path)
        try:
            size = os.stat(path).st_size
        except OSError as e:
            raise FileAccessFailure(path, e) from e
        return FileEntry(absolute_path=path, base_name=name, size_bytes=size)
