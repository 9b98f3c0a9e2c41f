"""Entity id allocation for the village simulation."""

from __future__ import annotations

from typing import Dict, List


class EntityManager:
    """Allocate and retire entity ids. Components live in :class:`ComponentManager`."""

    def __init__(self, max_entities: int | None = None) -> None:
        self._next_id: int = 0
        self.max_entities = max_entities
        # Mapping of entity_id -> creation tick, in creation order
        self._entities: Dict[int, int] = {}

    # ------------------------------------------------------------------
    # Creation / Destruction
    # ------------------------------------------------------------------
    def create_entity(self, tick: int = 0) -> int:
        """Create a new entity and return its unique ID."""

        if self.max_entities is not None and len(self._entities) >= self.max_entities:
            raise RuntimeError(f"entity limit of {self.max_entities} reached")
        self._next_id += 1
        entity_id = self._next_id
        self._entities[entity_id] = tick
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Retire ``entity_id``. Unknown ids are ignored."""

        self._entities.pop(entity_id, None)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def has_entity(self, entity_id: int) -> bool:
        return entity_id in self._entities

    def created_at(self, entity_id: int) -> int:
        return self._entities[entity_id]

    @property
    def all_entities(self) -> List[int]:
        """Live entity ids in creation order."""
        return list(self._entities)

    def __len__(self) -> int:
        return len(self._entities)
