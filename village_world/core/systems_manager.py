"""System registry and tick dispatcher."""

from __future__ import annotations

from typing import Any, Iterable, List
import inspect

# Systems without a ``phase`` attribute run after every phased system.
DEFAULT_PHASE = 100


def _phase(system: Any) -> int:
    return int(getattr(system, "phase", DEFAULT_PHASE))


class SystemsManager:
    """Maintain an ordered list of systems and tick them sequentially."""

    def __init__(self) -> None:
        self._systems: List[Any] = []

    # ------------------------------------------------------------------
    # Registration API
    # ------------------------------------------------------------------
    def register(self, system: Any) -> None:
        """Add ``system`` to the update list if not already present.

        Systems are kept sorted by their ``phase`` attribute so reservation
        requests are resolved before villager AI reads them, and AI runs
        before movement, regardless of registration order. Systems sharing
        a phase keep registration order.
        """

        if system in self._systems:
            return

        phase = _phase(system)
        for idx, s in enumerate(self._systems):
            if _phase(s) > phase:
                self._systems.insert(idx, system)
                break
        else:
            self._systems.append(system)

    def unregister(self, system: Any) -> None:
        """Remove ``system`` if currently registered."""

        if system in self._systems:
            self._systems.remove(system)

    # ------------------------------------------------------------------
    # Tick dispatch
    # ------------------------------------------------------------------
    def update(self, *args: Any, **kwargs: Any) -> None:
        """Call ``update`` on each registered system in order.

        The manager adapts the provided ``args`` for each system based on its
        ``update`` method signature so that subsystems can accept varying
        parameter counts (e.g. ``update()`` or ``update(tick)``).
        """

        for system in list(self._systems):
            method = getattr(system, "update", None)
            if not callable(method):
                continue

            sig = inspect.signature(method)
            params = [
                p
                for p in sig.parameters.values()
                if p.kind
                in (
                    inspect.Parameter.POSITIONAL_ONLY,
                    inspect.Parameter.POSITIONAL_OR_KEYWORD,
                )
            ]

            n = len(params)
            if n == 0:
                method()
            else:
                method(*args[-n:])

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterable[Any]:
        return iter(self._systems)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._systems)


__all__ = ["SystemsManager", "DEFAULT_PHASE"]
