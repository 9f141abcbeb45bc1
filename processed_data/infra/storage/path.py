"""Object key construction from ISPyB file-path metadata.

ISPyB stores file locations as filesystem paths, usually absolute
(``/dls/i03/data/2024/cm1234-1/processed/...``). The bucket mirrors that
tree without the root, so a key is the joined path with one leading
separator removed.

Example:
    ```python
    object_key("/data/run1", "img.h5")   # "data/run1/img.h5"
    object_key("data/run1", "img.h5")    # "data/run1/img.h5"
    object_key_from_path("/data/run1/img.h5")  # "data/run1/img.h5"
    ```
"""

from __future__ import annotations

import posixpath

SEPARATOR = "/"


def object_key_from_path(full_path: str) -> str:
    """Strip a single leading separator from a stored path.

    Args:
        full_path: Relative or absolute path as stored in ISPyB.

    Returns:
        Relative object key.
    """
    return full_path.removeprefix(SEPARATOR)


def object_key(path: str, file_name: str) -> str:
    """Build the object key for a file stored as (directory, file name).

    The two parts are joined with POSIX path semantics, so a trailing
    separator on ``path`` is not doubled, then one leading separator is
    stripped.

    Args:
        path: Directory as stored in ISPyB.
        file_name: File name as stored in ISPyB.

    Returns:
        Relative object key.
    """
    return object_key_from_path(posixpath.join(path, file_name))


__all__ = ["object_key", "object_key_from_path"]
