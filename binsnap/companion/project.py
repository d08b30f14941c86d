from __future__ import annotations

from pathlib import Path

from binsnap.companion import templates
from binsnap.config.snapshot_config import LIBFUZZER_FUNCTION
from binsnap.core.atomic_io import write_once_text


def companion_files(function: str) -> dict[str, str]:
    """Relative path -> content for the fuzzer project of one snapshot."""
    fuzzer = templates.LIBFUZZER_RS if function == LIBFUZZER_FUNCTION else templates.FUZZER_RS
    return {
        "Cargo.toml": templates.CARGO_TOML,
        "build.rs": templates.BUILD_RS,
        "reset.sh": templates.RESET_SH,
        "src/main.rs": templates.MAIN_RS,
        "src/fuzzer.rs": fuzzer,
        "src/constants.rs": templates.CONSTANTS_RS,
    }


def write_companion_project(output_dir: Path, function: str) -> list[Path]:
    written: list[Path] = []
    for rel, content in companion_files(function).items():
        path = output_dir / rel
        mode = 0o755 if rel.endswith(".sh") else None
        write_once_text(path, content, mode=mode)
        written.append(path)
    return written
