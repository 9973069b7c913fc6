"""Declaration steps: shared topology, participant apps and access grants."""

from __future__ import annotations

from .access import MemberGrants, grant_access
from .topology import MemberResources, TopologyOutputs, build_topology

__all__ = [
    "MemberGrants",
    "MemberResources",
    "TopologyOutputs",
    "build_topology",
    "grant_access",
]
