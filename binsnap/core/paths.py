from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

IMAGE_TAG_PREFIX = "binonly_snapchange_"
OUTPUT_DIR_PREFIX = "snapchange_"
MANIFEST_PREFIX = "Dockerfile."


@dataclass(frozen=True)
class Paths:
    root: Path
    binary_name: str

    def manifest_name(self) -> str:
        return f"{MANIFEST_PREFIX}{self.binary_name}"

    def manifest_path(self) -> Path:
        return self.root / self.manifest_name()

    def image_tag(self) -> str:
        return f"{IMAGE_TAG_PREFIX}{self.binary_name}"

    def output_dir(self) -> Path:
        return self.root / f"{OUTPUT_DIR_PREFIX}{self.binary_name}"

    def rotated_output_dir(self, count: int) -> Path:
        out = self.output_dir()
        return out.with_name(f"{out.name}.old{count}")

    def snapshot_dir(self) -> Path:
        return self.output_dir() / "snapshot"

    def snapshot_volume(self) -> str:
        return f"{self.snapshot_dir().absolute()}:/snapshot/"

    def invocation_record_path(self) -> Path:
        return self.output_dir() / "binsnap.invocation.json"

    def companion_src_dir(self) -> Path:
        return self.output_dir() / "src"
