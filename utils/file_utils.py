"""
File Utilities Module
Locating and reading React source files for the checker.
"""

import os
from pathlib import Path
from typing import List

REACT_EXTENSIONS = ('.js', '.jsx', '.ts', '.tsx')

# Directories that never hold hand-written components
SKIPPED_DIRECTORIES = {'node_modules', 'dist', 'build', 'coverage'}


def normalize_path(path: str | Path) -> Path:
    """Convert string path to normalized Path object."""
    return Path(path).resolve()


def is_hidden(path: Path) -> bool:
    return path.name.startswith('.')


def is_react_file(path: str | Path) -> bool:
    """Check whether a path has a JavaScript/TypeScript (JSX) extension."""
    name = Path(path).name.lower()
    if name.endswith('.d.ts'):
        return False
    return name.endswith(REACT_EXTENSIONS)


def collect_react_files(path: str | Path) -> List[Path]:
    """
    Recursively collect React source files below a directory.

    Args:
        path: Base directory path

    Returns:
        Sorted list of matching file paths
    """
    base_path = normalize_path(path)
    matching_files = []

    for root, dirs, files in os.walk(base_path):
        dirs[:] = [d for d in dirs if d not in SKIPPED_DIRECTORIES and not is_hidden(Path(root) / d)]

        for file in files:
            file_path = Path(root) / file
            if is_hidden(file_path):
                continue
            if is_react_file(file_path):
                matching_files.append(file_path)

    return sorted(matching_files)


def read_file_content(file_path: Path) -> str:
    """
    Read file content as UTF-8 text.

    Raises:
        FileNotFoundError: If file doesn't exist
        UnicodeDecodeError: If file is not valid UTF-8
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read()
