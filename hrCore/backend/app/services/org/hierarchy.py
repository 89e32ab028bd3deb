"""
Walking self-referential chains (department parents, position reporting lines).
Cycles are storable, so every walk tracks the ids it has visited.
"""

from typing import Callable, List, Optional, TypeVar

from app.services.org.errors import HierarchyCycleError

NodeT = TypeVar("NodeT")


def walk_chain(start: NodeT, next_node: Callable[[NodeT], Optional[NodeT]]) -> List[NodeT]:
    """
    Follow next_node from start until it returns None.
    Returns the nodes above start, nearest first. Raises HierarchyCycleError
    if a node is reached twice.
    """
    visited = [start.id]
    chain: List[NodeT] = []
    current = next_node(start)
    while current is not None:
        if current.id in visited:
            raise HierarchyCycleError(visited + [current.id])
        visited.append(current.id)
        chain.append(current)
        current = next_node(current)
    return chain


def find_cycle(start: NodeT, next_node: Callable[[NodeT], Optional[NodeT]]) -> Optional[List[int]]:
    try:
        walk_chain(start, next_node)
    except HierarchyCycleError as e:
        return e.record_ids
    return None
