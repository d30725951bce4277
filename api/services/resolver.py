"""Find the engine class that provides a named capability."""

from __future__ import annotations

import importlib
import inspect
import logging
import os
import pkgutil
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Iterable, Iterator, List, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PACKAGES = ("src.hd_engine",)


class ResolutionNotFound(LookupError):
    """No concrete class satisfies a required capability."""


@dataclass(frozen=True)
class CapabilityContract:
    """Query key for a capability.

    A class matches declaratively when some class in its MRO carries one of
    ``interfaces`` as its name, or structurally when it has every attribute
    listed in ``members``. ``enum`` restricts matches to populated enums.
    """

    name: str
    interfaces: Tuple[str, ...] = ()
    members: Tuple[str, ...] = ()
    enum: bool = False

    def declared_by(self, cls: type) -> bool:
        return any(base.__name__ in self.interfaces for base in cls.__mro__)

    def shaped_like(self, cls: type) -> bool:
        return bool(self.members) and all(hasattr(cls, m) for m in self.members)

    def matches(self, cls: type) -> bool:
        if self.enum and not (issubclass(cls, Enum) and len(cls) > 0):
            return False
        return self.declared_by(cls) or self.shaped_like(cls)


def engine_packages() -> Tuple[str, ...]:
    raw = os.getenv("HD_ENGINE_PACKAGES")
    if not raw:
        return DEFAULT_PACKAGES
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def _load_modules(package_name: str) -> List[ModuleType]:
    """Import a package and all of its submodules, sorted by dotted name."""
    root = importlib.import_module(package_name)
    modules = {root.__name__: root}
    path = getattr(root, "__path__", None)
    if path is not None:
        for _finder, mod_name, _ispkg in pkgutil.walk_packages(path, root.__name__ + "."):
            modules[mod_name] = importlib.import_module(mod_name)
    return [modules[name] for name in sorted(modules)]


def _is_concrete(cls: type) -> bool:
    return not (inspect.isabstract(cls) or getattr(cls, "_is_protocol", False))


def iter_classes(packages: Sequence[str]) -> Iterator[type]:
    seen = set()
    for package_name in packages:
        for module in _load_modules(package_name):
            for obj in list(vars(module).values()):
                if not inspect.isclass(obj) or obj.__module__ != module.__name__:
                    continue
                if id(obj) in seen:
                    continue
                seen.add(id(obj))
                yield obj


def candidates(contract: CapabilityContract, packages: Iterable[str] = None) -> List[type]:
    packages = tuple(packages) if packages is not None else engine_packages()
    return [
        cls for cls in iter_classes(packages)
        if contract.matches(cls) and _is_concrete(cls)
    ]


def resolve(contract: CapabilityContract, packages: Iterable[str] = None) -> type:
    """Return the first concrete class satisfying ``contract``.

    Packages are scanned in the given order, their modules by sorted name and
    classes in definition order, so the same class wins on every call.
    """

    packages = tuple(packages) if packages is not None else engine_packages()
    try:
        found = candidates(contract, packages)
    except ImportError as exc:
        raise ResolutionNotFound(
            f"Capability '{contract.name}' not found: cannot import engine package ({exc})"
        ) from exc
    if not found:
        wanted = ", ".join(contract.interfaces + contract.members) or "<any>"
        raise ResolutionNotFound(
            f"Capability '{contract.name}' not found: no candidate type implements "
            f"[{wanted}] in {', '.join(packages)}"
        )
    if len(found) > 1:
        logger.info(
            "capability_ambiguous",
            extra={"capability": contract.name, "candidates": [c.__qualname__ for c in found]},
        )
    chosen = found[0]
    logger.debug("capability_resolved", extra={"capability": contract.name, "type": chosen.__qualname__})
    return chosen
