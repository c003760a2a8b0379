# ============================================================================
# RECORD DEPENDENCY ORDERING
# ============================================================================
# STATUS: Core - Optional create / drop ordering for related records
# PURPOSE: Topological sort of records from their relationship directives
# CREATED: 07 OCT 2026
# EXPORTS: creation_order, drop_order
# ============================================================================
"""
Record dependency ordering.

By default batch DDL keeps the caller's order. When asked to resolve it,
the batch is sorted so that every referenced table exists before the
table that points at it:

    one-to-one  A.address -> Address      Address before A
    one-to-many Listing.details -> Detail Listing before Detail

Drop order is the reverse. Ties keep the caller's order (Kahn's
algorithm over a FIFO queue seeded in input order). Targets outside the
batch are ignored; self references add no edge.
"""

import logging
from collections import deque
from typing import Dict, List, Sequence

from core.errors import RecordDefinitionError
from core.models.record import RecordDefinition

logger = logging.getLogger(__name__)


def creation_order(records: Sequence[RecordDefinition]) -> List[RecordDefinition]:
    """
    Order records so that referenced records come first.

    Raises:
        RecordDefinitionError: If the relationships form a cycle
    """
    by_name: Dict[str, int] = {r.name: i for i, r in enumerate(records)}
    adj: Dict[int, List[int]] = {i: [] for i in range(len(records))}
    in_degree: Dict[int, int] = {i: 0 for i in range(len(records))}

    def add_edge(before: int, after: int) -> None:
        if before != after and after not in adj[before]:
            adj[before].append(after)
            in_degree[after] += 1

    for index, record in enumerate(records):
        for directive in record.relationships:
            target = by_name.get(directive.target_name)
            if target is None:
                continue
            if directive.is_one_to_one:
                add_edge(target, index)
            else:
                add_edge(index, target)

    queue = deque(i for i in range(len(records)) if in_degree[i] == 0)
    ordered: List[int] = []

    while queue:
        u = queue.popleft()
        ordered.append(u)
        for v in adj[u]:
            in_degree[v] -= 1
            if in_degree[v] == 0:
                queue.append(v)

    if len(ordered) != len(records):
        cyclic = ", ".join(records[i].name for i in range(len(records)) if in_degree[i] > 0)
        raise RecordDefinitionError(cyclic, "relationship cycle, no creation order exists")

    result = [records[i] for i in ordered]
    logger.debug(f"Creation order: {[r.name for r in result]}")
    return result


def drop_order(records: Sequence[RecordDefinition]) -> List[RecordDefinition]:
    """Reverse of creation_order: dependents are dropped first."""
    return list(reversed(creation_order(records)))


__all__ = ["creation_order", "drop_order"]
