"""Deferral policies — pluggable strategies deciding which requires become lazy."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

ShouldDefer = Callable[[str, str], bool]


class DeferralPolicy(ABC):
    """Strategy consulted for every non-core static require."""

    @abstractmethod
    def should_defer(self, module_name: str, resolved: str) -> bool:
        """Return True to make the require lazy.

        *resolved* is the module's full path, or *module_name* itself when
        the module could not be resolved.
        """
        ...


class DeferAllPolicy(DeferralPolicy):
    """Default policy — every static require is deferred."""

    def should_defer(self, module_name: str, resolved: str) -> bool:
        return True


class CallbackDeferralPolicy(DeferralPolicy):
    """Adapts a plain ``(module_name, resolved) -> bool`` callable."""

    def __init__(self, callback: ShouldDefer):
        self._callback = callback

    def should_defer(self, module_name: str, resolved: str) -> bool:
        return bool(self._callback(module_name, resolved))


class KeepEagerPolicy(DeferralPolicy):
    """Defer everything except the named modules, which stay eager."""

    def __init__(self, eager_modules: Iterable[str]):
        self._eager = frozenset(eager_modules)

    def should_defer(self, module_name: str, resolved: str) -> bool:
        if module_name in self._eager:
            logger.debug("Keeping '%s' eager", module_name)
            return False
        return True


def as_policy(should_defer: DeferralPolicy | ShouldDefer | None) -> DeferralPolicy:
    """Normalize the ``should_defer`` option to a policy object."""
    if should_defer is None:
        return DeferAllPolicy()
    if isinstance(should_defer, DeferralPolicy):
        return should_defer
    return CallbackDeferralPolicy(should_defer)
