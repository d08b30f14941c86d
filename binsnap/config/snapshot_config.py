from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

PLACEHOLDER_MARKER = "@@"
TRUNCATED_INPUT_PATH = "/opt/truncated_input_file"
DEFAULT_INPUT_FILE_SIZE = 32 * 1024
DEVICE_PREFIX = "/dev"
STAGING_DIR = "/opt"

LIBFUZZER_FUNCTION = "LLVMFuzzerTestOneInput"
DEFAULT_FUNCTION = "main"

MAX_ROTATION_ATTEMPTS = 64 * 1024

DOCKER_ENV_VAR = "BINSNAP_DOCKER"


class ImageKind(enum.Enum):
    """Image types the snapshot can be taken with."""

    DISK = "disk"
    INITRAMFS = "initramfs"


DEFAULT_IMAGE_KIND = ImageKind.INITRAMFS


@dataclass(frozen=True)
class InvocationSpec:
    """
    One snapshot request, as given by the user.

    Optional fields stay None when no value was given so callers can tell an
    omitted option from one explicitly set to its default.
    """

    binary: Path
    function: str | None = None
    image_kind: ImageKind | None = None
    libfuzzer: bool = False
    packages: tuple[str, ...] | None = None
    input_file_size: int | None = None
    arguments: str | None = None

    @property
    def binary_name(self) -> str:
        name = Path(self.binary).name
        if not name or name in (".", ".."):
            raise ValueError(f"binary path has no file name: {str(self.binary)!r}")
        return name

    def break_function(self) -> str:
        if self.function:
            return self.function
        if self.libfuzzer:
            return LIBFUZZER_FUNCTION
        return DEFAULT_FUNCTION

    def effective_image_kind(self) -> ImageKind:
        return self.image_kind if self.image_kind is not None else DEFAULT_IMAGE_KIND

    def to_json_obj(self) -> dict[str, Any]:
        return {
            "binary": str(self.binary),
            "function": self.function,
            "image_kind": self.image_kind.value if self.image_kind is not None else None,
            "libfuzzer": self.libfuzzer,
            "packages": list(self.packages) if self.packages is not None else None,
            "input_file_size": self.input_file_size,
            "arguments": self.arguments,
        }


@dataclass(frozen=True)
class SnapshotSettings:
    root: Path
    docker: str
    staging_dir: str = STAGING_DIR
    max_rotation_attempts: int = MAX_ROTATION_ATTEMPTS

    @staticmethod
    def default(root: Path, docker: str | None = None) -> "SnapshotSettings":
        engine = docker or os.environ.get(DOCKER_ENV_VAR) or "docker"
        return SnapshotSettings(root=root, docker=engine)
