"""Named guard and action registry for file-based machine definitions."""

from __future__ import annotations

from typing import Callable, Dict, Generic, TypeVar

from .model import Action, Guard

HookT = TypeVar("HookT", bound=Callable)


class _Registry(Generic[HookT]):
    def __init__(self, kind: str) -> None:
        self._kind = kind
        self._hooks: Dict[str, HookT] = {}

    def register(self, name: str, fn: HookT) -> None:
        """Register a named hook. Overwrites if already registered."""
        self._hooks[name] = fn

    def get(self, name: str) -> HookT:
        """Return a hook. Raises KeyError if not registered."""
        try:
            return self._hooks[name]
        except KeyError:
            raise KeyError(f"Unknown {self._kind} '{name}'") from None

    def has(self, name: str) -> bool:
        return name in self._hooks

    def names(self) -> list[str]:
        return list(self._hooks)


class HookRegistry:
    """Maps guard and action names to callables."""

    def __init__(self) -> None:
        self.guards: _Registry[Guard] = _Registry("guard")
        self.actions: _Registry[Action] = _Registry("action")

    def guard(self, name: str) -> Callable[[Guard], Guard]:
        """Decorator registering a guard under ``name``."""

        def decorator(fn: Guard) -> Guard:
            self.guards.register(name, fn)
            return fn

        return decorator

    def action(self, name: str) -> Callable[[Action], Action]:
        """Decorator registering an action under ``name``."""

        def decorator(fn: Action) -> Action:
            self.actions.register(name, fn)
            return fn

        return decorator


__all__ = ["HookRegistry"]
