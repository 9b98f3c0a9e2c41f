# Component Manager for ECS-style storage.
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Type, TypeVar

T = TypeVar("T")


class ComponentManager:
    """Track components attached to entities, one instance per class."""

    def __init__(self) -> None:
        # Maps entity id to {component class name: component instance}
        self._components: Dict[int, Dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Component access API
    # ------------------------------------------------------------------
    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach ``component`` to an entity, replacing one of the same class."""
        self._components.setdefault(entity_id, {})[type(component).__name__] = component

    def get_component(self, entity_id: int, component_cls: Type[T]) -> Optional[T]:
        """Return a component of the given class for an entity, if present."""
        comps = self._components.get(entity_id)
        if not comps:
            return None
        return comps.get(component_cls.__name__)  # type: ignore[return-value]

    def has_component(self, entity_id: int, component_cls: Type[Any]) -> bool:
        return component_cls.__name__ in self._components.get(entity_id, {})

    def remove_component(self, entity_id: int, component_cls: Type[T]) -> Optional[T]:
        """Remove and return the component of the given class from an entity."""
        comps = self._components.get(entity_id)
        if not comps:
            return None
        return comps.pop(component_cls.__name__, None)  # type: ignore[return-value]

    def remove_entity(self, entity_id: int) -> None:
        """Drop every component attached to ``entity_id``."""
        self._components.pop(entity_id, None)

    def components_for_entity(self, entity_id: int) -> Iterable[Any]:
        """Iterate over all components attached to an entity."""
        return self._components.get(entity_id, {}).values()

    def entities_with(self, *component_classes: Type[Any]) -> List[int]:
        """Return ids carrying every class in ``component_classes``, in insertion order."""
        names = [cls.__name__ for cls in component_classes]
        return [
            eid for eid, comps in self._components.items()
            if all(name in comps for name in names)
        ]

    def query(self, component_cls: Type[T]) -> Iterator[Tuple[int, T]]:
        """Yield ``(entity_id, component)`` pairs for ``component_cls``."""
        name = component_cls.__name__
        for eid, comps in list(self._components.items()):
            comp = comps.get(name)
            if comp is not None:
                yield eid, comp
