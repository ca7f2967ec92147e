"""
Iterative walks over the manager relation.

Both walks take plain lookup callables instead of a session so they can run
over any adjacency source. Nodes only need `id` and `manager_id` attributes.
Each walk keeps a visited set and a hop budget and raises
HierarchyIntegrityFault instead of returning a partial result.
"""
from __future__ import annotations
from typing import Callable, Optional, Sequence, TypeVar

from .errors import HierarchyIntegrityFault

T = TypeVar("T")


def walk_descendants(
    root_id: int,
    children_of: Callable[[int], Sequence[T]],
    *,
    max_depth: int,
    ) -> list[T]:
    """
    Depth-first pre-order listing of everything below root_id.

    Siblings keep the order children_of returns them in. The root itself is
    never part of the result.
    """
    found: list[T] = []
    visited = {root_id}
    stack = [(child, 1) for child in reversed(children_of(root_id))]

    while stack:
        node, depth = stack.pop()
        if node.id in visited:
            raise HierarchyIntegrityFault(root_id, depth, f"employee {node.id} reached twice")
        if depth > max_depth:
            raise HierarchyIntegrityFault(root_id, depth, f"deeper than {max_depth} levels")
        visited.add(node.id)
        found.append(node)
        stack.extend((child, depth + 1) for child in reversed(children_of(node.id)))

    return found


def walk_managers(
    start: T,
    manager_of: Callable[[int], Optional[T]],
    *,
    max_hops: int,
    ) -> list[T]:
    """
    Managers of start, nearest first, ending at a top-level employee.

    A manager_id pointing at a missing record ends the chain there.
    """
    chain: list[T] = []
    visited = {start.id}
    current = start
    hops = 0

    while current.manager_id is not None:
        hops += 1
        if hops > max_hops:
            raise HierarchyIntegrityFault(start.id, hops, f"no top-level employee within {max_hops} hops")
        manager = manager_of(current.manager_id)
        if manager is None:
            break
        if manager.id in visited:
            raise HierarchyIntegrityFault(start.id, hops, f"employee {manager.id} reached twice")
        visited.add(manager.id)
        chain.append(manager)
        current = manager

    return chain
