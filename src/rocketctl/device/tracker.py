from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from rocketctl.util.equality import structural_equals

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChangeTracker(Generic[T]):
    """
    Remembers the last accepted value and reports structural changes.

    Used when polling the controller or reloading a config so that consumers
    only react when something actually differs.
    """

    def __init__(
        self,
        name: str = "value",
        equals: Callable[[Any, Any], bool] = structural_equals,
    ) -> None:
        self.name = name
        self._equals = equals
        self._value: T | None = None
        self._has_value = False
        self._changes = 0

    # ---------------------------------------- #

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def changes(self) -> int:
        return self._changes

    # ---------------------------------------- #

    def update(self, value: T) -> bool:
        """Store value and return True if it differs from the cached one."""
        if self._has_value and self._equals(self._value, value):
            return False

        self._value = value
        self._has_value = True
        self._changes += 1
        logger.debug("%s changed (%d)", self.name, self._changes)
        return True

    def reset(self) -> None:
        self._value = None
        self._has_value = False
        self._changes = 0
