from __future__ import annotations

import os
from pathlib import Path

from binsnap.config.snapshot_config import MAX_ROTATION_ATTEMPTS


class OutputRotationError(RuntimeError):
    pass


def next_rotation_target(output_dir: Path, max_attempts: int = MAX_ROTATION_ATTEMPTS) -> Path:
    """First free `<output_dir>.old<N>` for N in 1..max_attempts-1."""
    for count in range(1, max_attempts):
        candidate = output_dir.with_name(f"{output_dir.name}.old{count}")
        if not candidate.exists():
            return candidate
    raise OutputRotationError(
        f"Too many old output directories; cannot move the output directory {output_dir} "
        f"(tried {output_dir.name}.old1 .. {output_dir.name}.old{max_attempts - 1})"
    )


def rotate_output_dir(output_dir: Path, max_attempts: int = MAX_ROTATION_ATTEMPTS) -> Path | None:
    """
    Move an existing output directory out of the way.

    Returns the new location, or None when there was nothing to move.
    """
    if not output_dir.exists():
        return None
    target = next_rotation_target(output_dir, max_attempts=max_attempts)
    os.rename(output_dir, target)
    return target


def prepare_output_dir(output_dir: Path, max_attempts: int = MAX_ROTATION_ATTEMPTS) -> Path | None:
    rotated = rotate_output_dir(output_dir, max_attempts=max_attempts)
    output_dir.mkdir(parents=True, exist_ok=False)
    return rotated
