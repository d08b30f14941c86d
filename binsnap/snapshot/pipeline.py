from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from binsnap.arguments.classifier import ClassifiedArguments, classify_arguments
from binsnap.companion.project import write_companion_project
from binsnap.config.snapshot_config import InvocationSpec, SnapshotSettings
from binsnap.core.atomic_io import write_atomic_json, write_atomic_text
from binsnap.core.paths import Paths
from binsnap.engine.docker import build_command, run_command, spawn
from binsnap.manifest.renderer import render_manifest
from binsnap.workspace.rotation import prepare_output_dir


def _stderr_log(msg: str) -> None:
    sys.stderr.write(f"[binsnap] {msg}\n")


@dataclass
class SnapshotResult:
    manifest: str
    manifest_path: Path
    image_tag: str
    output_dir: Path
    rotated_from: Path | None = None
    build_returncode: int | None = None
    run_returncode: int | None = None
    companion_files: list[Path] = field(default_factory=list)

    def to_json_obj(self) -> dict[str, Any]:
        return {
            "ok": True,
            "manifest_path": str(self.manifest_path),
            "image_tag": self.image_tag,
            "output_dir": str(self.output_dir),
            "rotated_from": str(self.rotated_from) if self.rotated_from is not None else None,
            "build_returncode": self.build_returncode,
            "run_returncode": self.run_returncode,
        }


def prepare_manifest(spec: InvocationSpec, settings: SnapshotSettings) -> tuple[ClassifiedArguments, str]:
    classified = classify_arguments(
        spec.arguments,
        spec.input_file_size,
        staging_dir=settings.staging_dir,
        base_dir=settings.root,
    )
    return classified, render_manifest(spec, classified)


def take_snapshot(
    spec: InvocationSpec,
    settings: SnapshotSettings,
    *,
    use_engine: bool = True,
    log: Callable[[str], None] = _stderr_log,
) -> SnapshotResult:
    """
    Render the Dockerfile for `spec`, build the image, lay out the output
    directory and run the image to produce the snapshot.

    With use_engine=False the engine is never spawned; files are still written.
    """
    paths = Paths(root=settings.root, binary_name=spec.binary_name)
    classified, manifest = prepare_manifest(spec, settings)

    write_atomic_text(paths.manifest_path(), manifest)
    log(f"wrote {paths.manifest_path()}")

    build = build_command(settings.docker, paths.manifest_name(), paths.image_tag(), settings.root)
    run = run_command(settings.docker, paths.snapshot_volume(), paths.image_tag(), settings.root)

    result = SnapshotResult(
        manifest=manifest,
        manifest_path=paths.manifest_path(),
        image_tag=paths.image_tag(),
        output_dir=paths.output_dir(),
    )

    if use_engine:
        log(f"building image: {build.display()}")
        result.build_returncode = spawn(build)
        if result.build_returncode != 0:
            log(f"image build exited with {result.build_returncode}")

    result.rotated_from = prepare_output_dir(paths.output_dir(), max_attempts=settings.max_rotation_attempts)
    if result.rotated_from is not None:
        log(f"moved previous output directory to {result.rotated_from}")

    function = spec.break_function()
    result.companion_files = write_companion_project(paths.output_dir(), function)
    paths.snapshot_dir().mkdir(parents=True, exist_ok=True)
    write_atomic_json(
        paths.invocation_record_path(),
        {
            "invocation": spec.to_json_obj(),
            "break_function": function,
            "image_kind": spec.effective_image_kind().value,
            "arguments": classified.argv(),
            "staged_files": [str(sf.source) for sf in classified.staged_files],
            "truncation": (
                {"size": classified.truncation.size, "path": classified.truncation.path}
                if classified.truncation is not None
                else None
            ),
            "manifest_path": str(paths.manifest_path()),
            "image_tag": paths.image_tag(),
            "build_command": build.argv,
            "run_command": run.argv,
        },
    )

    if use_engine:
        log(f"taking snapshot: {run.display()}")
        result.run_returncode = spawn(run)
        if result.run_returncode != 0:
            log(f"snapshot run exited with {result.run_returncode}")

    return result
