"""
supplier_portal/graphql/__init__.py

Operation descriptors for the GraphQL gateway.

A document is sent verbatim; the descriptor only remembers what the gateway
needs to know about it:
- name: the operation name (used in logs and as `operationName`)
- kind: "query" or "mutation"
- root: the top-level field whose value is returned to the caller
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

_HEADER_RE = re.compile(r"^\s*(query|mutation)\s+(\w+)[^{]*\{\s*(\w+)", re.DOTALL)


@dataclass(frozen=True)
class Operation:
    name: str
    kind: str
    root: str
    document: str

    @property
    def is_mutation(self) -> bool:
        return self.kind == "mutation"


@lru_cache(maxsize=None)
def operation(document: str) -> Operation:
    """Build (and cache) the descriptor for a named GraphQL document."""
    match = _HEADER_RE.match(document)
    if not match:
        raise ValueError("GraphQL document must start with a named query or mutation.")
    kind, name, root = match.groups()
    return Operation(name=name, kind=kind, root=root, document=document)
