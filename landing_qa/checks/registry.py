"""Check registry — named check routines grouped by family."""

from __future__ import annotations

import fnmatch
import importlib
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

FAMILIES = ("structure", "accessibility", "links", "responsive", "visual")

_BUILTIN_MODULES = [f"landing_qa.checks.{family}" for family in FAMILIES]

CheckRoutine = Callable[..., Awaitable[None]]


@dataclass(frozen=True)
class CheckDefinition:
    check_id: str
    name: str
    family: str
    routine: CheckRoutine
    viewport: str = "desktop"
    readiness: str = "load"
    description: str = ""


_REGISTRY: dict[str, CheckDefinition] = {}


def register(definition: CheckDefinition) -> CheckDefinition:
    if definition.family not in FAMILIES:
        raise ValueError(f"Unknown check family: {definition.family}")
    if definition.check_id in _REGISTRY:
        raise ValueError(f"Duplicate check id: {definition.check_id}")
    _REGISTRY[definition.check_id] = definition
    return definition


def check(
    check_id: str,
    name: str,
    family: str,
    viewport: str = "desktop",
    readiness: str = "load",
) -> Callable[[CheckRoutine], CheckRoutine]:
    """Decorator registering an async ``routine(ctx)`` as a named check."""
    def decorator(routine: CheckRoutine) -> CheckRoutine:
        register(CheckDefinition(
            check_id=check_id,
            name=name,
            family=family,
            routine=routine,
            viewport=viewport,
            readiness=readiness,
            description=(routine.__doc__ or "").strip(),
        ))
        return routine
    return decorator


def load_builtin_checks() -> None:
    for module in _BUILTIN_MODULES:
        importlib.import_module(module)


def all_checks() -> list[CheckDefinition]:
    """Every registered check, in registration order."""
    load_builtin_checks()
    return list(_REGISTRY.values())


def select_checks(
    patterns: list[str] | tuple[str, ...] = (),
    families: list[str] | tuple[str, ...] = (),
) -> list[CheckDefinition]:
    """Filter checks by glob patterns on check ids and by family.

    Empty filters select everything.
    """
    selected = []
    for definition in all_checks():
        if families and definition.family not in families:
            continue
        if patterns and not any(fnmatch.fnmatchcase(definition.check_id, p) for p in patterns):
            continue
        selected.append(definition)
    logger.debug("Selected %d checks (patterns=%s, families=%s)", len(selected), patterns, families)
    return selected
