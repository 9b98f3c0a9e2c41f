"""Minimal behavior tree utilities for villager decision making."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

# A node returns a short status string when it handled the agent this tick,
# or ``None`` to let the parent try something else.
Status = Optional[str]
Predicate = Callable[[int, Any], bool]


class Node:
    """Base behavior tree node."""
    def run(self, agent_id: int, world: Any) -> Status:
        raise NotImplementedError

class Action(Node):
    """Leaf wrapping ``func(agent_id, world)``."""
    def __init__(self, func: Callable[[int, Any], Status]) -> None:
        self.func = func

    def run(self, agent_id: int, world: Any) -> Status:
        return self.func(agent_id, world)

class Condition(Node):
    """Run ``child`` only while ``predicate`` holds for the agent."""
    def __init__(self, predicate: Predicate, child: Node) -> None:
        self.predicate = predicate
        self.child = child

    def run(self, agent_id: int, world: Any) -> Status:
        if self.predicate(agent_id, world):
            return self.child.run(agent_id, world)
        return None

class Selector(Node):
    """First child to return a status wins; ``None`` if none of them does."""
    def __init__(self, children: List[Node]) -> None:
        self.children = list(children)

    def run(self, agent_id: int, world: Any) -> Status:
        return next(
            (s for s in (c.run(agent_id, world) for c in self.children) if s is not None),
            None,
        )

class BehaviorTree:
    """Container for a tree with a single ``root`` node."""
    def __init__(self, root: Node) -> None:
        self.root = root

    def run(self, agent_id: int, world: Any) -> Status:
        return self.root.run(agent_id, world)


__all__ = [
    "Status",
    "Predicate",
    "Node",
    "Action",
    "Condition",
    "Selector",
    "BehaviorTree",
]
