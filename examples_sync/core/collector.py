"""Recursive file listing for SDK example folders."""

from collections.abc import Iterable
from pathlib import Path


def get_all_files(directory: Path, exclude_folders: Iterable[str] = ()) -> list[Path]:
    """List every file below a directory.

    Directories whose name is in exclude_folders are skipped at any depth.
    Order follows the filesystem listing; callers must not rely on it.

    Args:
        directory: Root directory to walk
        exclude_folders: Directory names to skip (e.g. "apidoc")

    Returns:
        Paths of all files found, or an empty list if directory doesn't exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    excluded = set(exclude_folders)
    files: list[Path] = []

    for entry in directory.iterdir():
        if entry.is_dir():
            if entry.name not in excluded:
                files.extend(get_all_files(entry, excluded))
        else:
            files.append(entry)

    return files
