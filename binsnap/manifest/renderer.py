from __future__ import annotations

from binsnap.arguments.classifier import ClassifiedArguments
from binsnap.config.snapshot_config import InvocationSpec
from binsnap.manifest.template import BASE_TEMPLATE, substitute


def template_values(spec: InvocationSpec, classified: ClassifiedArguments) -> dict[str, str]:
    return {
        "BINARY": str(spec.binary),
        "BINARYNAME": spec.binary_name,
        "PACKAGES": " ".join(spec.packages or ()),
        "TRUNCATE": classified.truncation.directive() if classified.truncation is not None else "",
        "FILES": "\n".join(classified.copy_instructions()),
    }


def declarations(spec: InvocationSpec, classified: ClassifiedArguments) -> list[str]:
    lines = [
        f"ENV SNAPSHOT_FUNCTION={spec.break_function()}",
        f"ENV SNAPSHOT_IMGTYPE={spec.effective_image_kind().value}",
    ]
    argv = classified.argv()
    if argv:
        lines.append(f'ENV SNAPSHOT_ENTRYPOINT_ARGUMENTS="{" ".join(argv)}"')
    return lines


def render_manifest(
    spec: InvocationSpec,
    classified: ClassifiedArguments,
    template: str = BASE_TEMPLATE,
) -> str:
    """
    Render the Dockerfile for one snapshot request.

    The template is fully substituted first, then the break function, image
    kind and (when there are any) entrypoint arguments are appended as ENV
    lines in that order. Every value is computed before any text is built, so
    a failure never yields a partial manifest.
    """
    values = template_values(spec, classified)
    env_lines = declarations(spec, classified)
    body = substitute(template, values)
    return body + "".join(line + "\n" for line in env_lines)
