from __future__ import annotations

import re
from typing import Mapping

BASE_TEMPLATE = r"""
###################################################
#### Ubuntu root FS
FROM ubuntu:jammy as base
RUN apt-get update -q \
  && apt-get install -q -y build-essential clang gdb python3 $PACKAGES$ \
  && apt-get clean -y \
  && rm -rf /var/lib/apt/lists/*

# Copy binary into the root
COPY $BINARY$ /opt/
$TRUNCATE$
$FILES$

###################################################
FROM ctfhacker/snapchange_snapshot

COPY --from=base / "$SNAPSHOT_INPUT"

ENV SNAPSHOT_ENTRYPOINT=/opt/$BINARYNAME$
"""

# Placeholders are upper-case names wrapped in '$'. "$SNAPSHOT_INPUT" is a
# docker build variable and is left alone.
PLACEHOLDER_RE = re.compile(r"\$([A-Z][A-Z0-9_]*)\$")


class TemplateError(ValueError):
    pass


def placeholders(template: str) -> list[str]:
    return [m.group(1) for m in PLACEHOLDER_RE.finditer(template)]


def substitute(template: str, values: Mapping[str, str]) -> str:
    """
    Replace every placeholder in one pass.

    Each placeholder must occur exactly once in the template and the mapping
    must name exactly those placeholders. Substituted values are not scanned
    again, so a value that happens to contain "$X$" is emitted as-is.
    """
    names = placeholders(template)
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise TemplateError(f"placeholders occur more than once: {', '.join(dupes)}")
    missing = sorted(set(names) - set(values))
    if missing:
        raise TemplateError(f"no value for placeholders: {', '.join(missing)}")
    unknown = sorted(set(values) - set(names))
    if unknown:
        raise TemplateError(f"values given for unknown placeholders: {', '.join(unknown)}")

    return PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)
