from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from binsnap.config.snapshot_config import ImageKind, InvocationSpec, SnapshotSettings
from binsnap.core.sizes import parse_size
from binsnap.engine.docker import require_engine
from binsnap.snapshot.pipeline import take_snapshot


def _size_arg(text: str) -> int:
    try:
        return parse_size(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="binsnap",
        description="Take a snapshot of a given binary",
        epilog="Use -- before ARGUMENTS when they start with '-', e.g. binsnap ./tool -- \"-x @@\"",
    )
    parser.add_argument("-f", "--function", default=None, help="The function to break and take a snapshot at")
    parser.add_argument(
        "--image-type",
        choices=[k.value for k in ImageKind],
        default=None,
        help="The type of image to use to take the snapshot (default: initramfs)",
    )
    parser.add_argument(
        "--libfuzzer",
        action="store_true",
        help="This binary is a libfuzzer binary; take a snapshot at LLVMFuzzerTestOneInput",
    )
    parser.add_argument(
        "--packages",
        action="append",
        default=None,
        help="Additional package to install into the base image of the target (repeatable)",
    )
    parser.add_argument(
        "--input-file-size",
        type=_size_arg,
        default=None,
        help="The size of the input file to generate via truncate (e.g. 4096, 32k, 1M; default: 32k)",
    )
    parser.add_argument("--root", default=str(Path.cwd()), help="Build context and output root (default: cwd)")
    parser.add_argument("--docker", default=None, help="Container engine executable (default: $BINSNAP_DOCKER or docker)")
    parser.add_argument(
        "--no-docker",
        action="store_true",
        help="Only write the Dockerfile and output directory; do not build or run the image",
    )
    parser.add_argument("--json", action="store_true", help="Emit a JSON summary instead of the Dockerfile")
    parser.add_argument("binary", help="The binary to take a snapshot of")
    parser.add_argument(
        "arguments",
        nargs="?",
        default=None,
        help="Optional arguments passed to the binary to snapshot. @@ to use the default input file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    args = _parse_args(argv)

    spec = InvocationSpec(
        binary=Path(args.binary),
        function=args.function,
        image_kind=ImageKind(args.image_type) if args.image_type else None,
        libfuzzer=bool(args.libfuzzer),
        packages=tuple(args.packages) if args.packages is not None else None,
        input_file_size=args.input_file_size,
        arguments=args.arguments,
    )
    try:
        binary_name = spec.binary_name
    except ValueError as e:
        raise SystemExit(str(e))

    settings = SnapshotSettings.default(root=Path(args.root).resolve(), docker=args.docker)
    if not args.no_docker:
        require_engine(settings.docker)
    sys.stderr.write(f"[binsnap] snapshot target: {binary_name} (root={settings.root})\n")

    result = take_snapshot(spec, settings, use_engine=not args.no_docker)
    if args.json:
        print(json.dumps(result.to_json_obj(), ensure_ascii=False))
    else:
        print(result.manifest)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
