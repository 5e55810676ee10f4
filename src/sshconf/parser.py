"""Parser for the OpenSSH client config dialect."""

import re

from sshconf.types import HostRecord

HOST_RE = re.compile(r"^Host\s+(.+)$", re.IGNORECASE)
OPTION_RE = re.compile(r"^(\S+)\s+(.+)$")


def parse(text: str) -> list[HostRecord]:
    """Parse config text into host records in file order.

    Lines end at newlines only. Blank lines, comments and anything before
    the first `Host` line are skipped. Lines inside a block that are not
    `<key> <value>` are dropped.
    A repeated key keeps its first position and takes the last value.
    """
    if not text or not text.strip():
        return []

    hosts: list[HostRecord] = []
    current: HostRecord | None = None

    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        host_match = HOST_RE.match(trimmed)
        if host_match:
            if current is not None:
                hosts.append(current)
            # Trimmed, single-line names and options are valid by construction
            current = HostRecord.model_construct(name=host_match.group(1).strip(), options={})
            continue

        if current is None:
            continue

        option_match = OPTION_RE.match(trimmed)
        if option_match:
            current.options[option_match.group(1)] = option_match.group(2)

    if current is not None:
        hosts.append(current)

    return hosts
