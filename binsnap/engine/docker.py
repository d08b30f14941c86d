from __future__ import annotations

import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EngineCommand:
    argv: list[str]
    cwd: Path

    def display(self) -> str:
        return " ".join(shlex.quote(x) for x in self.argv)


def build_command(docker: str, manifest_name: str, tag: str, context: Path) -> EngineCommand:
    return EngineCommand(argv=[docker, "build", "-f", manifest_name, "-t", tag, "."], cwd=context)


def run_command(docker: str, volume: str, tag: str, cwd: Path) -> EngineCommand:
    return EngineCommand(argv=[docker, "run", "-i", "-v", volume, tag], cwd=cwd)


def require_engine(docker: str) -> str:
    path = shutil.which(docker)
    if not path:
        raise SystemExit(f"container engine not found: {docker} (set --docker or BINSNAP_DOCKER)")
    return path


def spawn(cmd: EngineCommand) -> int:
    """
    Run an engine command to completion with inherited stdout/stderr.

    The exit code is returned for reporting only; failing to spawn raises.
    """
    proc = subprocess.run(cmd.argv, cwd=str(cmd.cwd), stdin=None, check=False)
    return proc.returncode
