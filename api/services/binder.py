"""Construct engine objects whose constructor signatures are not known up front.

The binder treats construction as a search: every constructor of a class
(``__init__`` plus alternate classmethod constructors) is tried with
arguments synthesized from typed hints, declared defaults and zero values.
When the class also depends on a configuration enum, each enum member is
tried in turn. The first combination that constructs wins; when none does,
the caller gets a ``BindError`` listing every attempt.
"""

from __future__ import annotations

import inspect
import logging
import traceback
import typing
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

ZERO_VALUES: Dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    Decimal: Decimal(0),
}
_ZERO_BY_NAME = {t.__name__: t for t in ZERO_VALUES}

FACTORY_PREFIXES = ("from_", "_from_", "create", "_create")
_EMPTY = inspect.Parameter.empty
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ArgHint:
    """A value to pass wherever a parameter is annotated with ``annotation``.

    ``annotation`` may be a class (subclasses match too) or a class name.
    """

    annotation: Any
    value: Any
    label: str = ""

    def accepts(self, annotation: Any) -> bool:
        for candidate in _unwrap(annotation):
            if isinstance(candidate, str):
                if self._accepts_name(candidate):
                    return True
            elif isinstance(self.annotation, str):
                names = _names(candidate)
                if self.annotation in names:
                    return True
            elif inspect.isclass(candidate) and inspect.isclass(self.annotation):
                if issubclass(candidate, self.annotation) or issubclass(self.annotation, candidate):
                    # builtins only match exactly: an ``int`` hint must not feed ``bool``
                    if candidate is self.annotation or candidate.__module__ != "builtins":
                        return True
        return False

    def _accepts_name(self, annotation: str) -> bool:
        """Match an annotation left as text (unresolved forward reference)."""
        for wanted in _string_parts(annotation):
            if isinstance(self.annotation, str):
                if wanted in _string_parts(self.annotation):
                    return True
            elif inspect.isclass(self.annotation):
                for klass in self.annotation.__mro__:
                    if klass.__name__ != wanted:
                        continue
                    if klass is self.annotation or klass.__module__ != "builtins":
                        return True
        return False


@dataclass(frozen=True)
class ParameterSlot:
    name: str
    annotation: Any
    kind: Any
    has_default: bool
    default: Any = None

    @property
    def type_name(self) -> str:
        if self.annotation is _EMPTY:
            return "Any"
        if isinstance(self.annotation, str):
            return self.annotation
        return getattr(self.annotation, "__name__", None) or str(self.annotation).replace("typing.", "")


@dataclass(frozen=True)
class ConstructorCandidate:
    name: str
    factory: Callable[..., Any]
    parameters: Tuple[ParameterSlot, ...]

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def signature(self) -> str:
        return f"{self.name}({', '.join(p.type_name for p in self.parameters)})"


@dataclass
class BindAttempt:
    signature: str
    variant: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        where = f"{self.signature} [{self.variant}]" if self.variant else self.signature
        return f"{where}: {self.error or 'ok'}"


class BindError(RuntimeError):
    """Every constructor (and variant) of a class failed."""

    def __init__(
        self,
        type_name: str,
        attempts: Sequence[BindAttempt],
        last_error: Optional[BaseException] = None,
        variants: Sequence[str] = (),
    ) -> None:
        self.type_name = type_name
        self.attempts = list(attempts)
        self.last_error = last_error
        self.variants = list(variants)
        super().__init__(self._describe())

    @property
    def root_cause(self) -> Optional[BaseException]:
        exc = self.last_error
        seen = set()
        while exc is not None and id(exc) not in seen:
            seen.add(id(exc))
            nested = exc.__cause__ or exc.__context__
            if nested is None:
                break
            exc = nested
        return exc

    def _describe(self) -> str:
        lines = [f"Failed to bind {self.type_name} after {len(self.attempts)} attempt(s)."]
        if self.variants:
            lines.append(f"Available variants: {', '.join(self.variants)}")
        if not self.attempts:
            lines.append("No constructors found.")
        lines.append("Attempted signatures:")
        lines.extend(f"  - {a}" for a in self.attempts)
        if self.last_error is not None:
            lines.append(f"Last error: {type(self.last_error).__name__}: {self.last_error}")
            root = self.root_cause
            lines.append("Root cause:")
            lines.append("".join(traceback.format_exception(type(root), root, root.__traceback__)).rstrip())
        return "\n".join(lines)


@dataclass
class Binding:
    instance: Any = None
    attempts: List[BindAttempt] = field(default_factory=list)
    error: Optional[BindError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.instance


def _unwrap(annotation: Any) -> List[Any]:
    """``Optional[X]`` / ``Union[X, Y]`` → ``[X, Y]``; anything else → ``[annotation]``."""
    if typing.get_origin(annotation) is typing.Union:
        return [a for a in typing.get_args(annotation) if a is not type(None)]
    return [annotation]


def _names(annotation: Any) -> Tuple[str, ...]:
    if isinstance(annotation, str):
        return (annotation.strip("'\""),)
    if inspect.isclass(annotation):
        return tuple(c.__name__ for c in annotation.__mro__)
    return (str(annotation),)


def _string_parts(annotation: str) -> List[str]:
    """``"Optional[mod.X]"`` / ``"X | None"`` → ``["X"]``."""
    text = annotation.strip("'\" ")
    if text.startswith("Optional[") and text.endswith("]"):
        text = text[len("Optional["):-1]
    parts = [p.strip().strip("'\"") for p in text.split("|")]
    return [p.rsplit(".", 1)[-1] for p in parts if p and p != "None"]


def _resolve_one(annotation: Any, globalns: Dict[str, Any]) -> Any:
    if not isinstance(annotation, str):
        return annotation

    def holder():
        pass

    holder.__annotations__ = {"value": annotation}
    try:
        return typing.get_type_hints(holder, globalns)["value"]
    except Exception:
        return annotation


def _slots(func: Callable[..., Any], owner: type) -> Tuple[ParameterSlot, ...]:
    sig = inspect.signature(func)
    target = owner.__init__ if func is owner else func
    try:
        hints = typing.get_type_hints(target)
    except Exception:
        # one undefined forward reference poisons the whole lookup; resolve per parameter
        globalns = getattr(getattr(target, "__func__", target), "__globals__", {})
        hints = {
            p.name: _resolve_one(p.annotation, globalns)
            for p in sig.parameters.values()
            if p.annotation is not _EMPTY
        }
    slots = []
    for p in sig.parameters.values():
        if p.kind in _VARIADIC:
            continue
        annotation = hints.get(p.name, p.annotation)
        has_default = p.default is not _EMPTY
        slots.append(ParameterSlot(p.name, annotation, p.kind, has_default, p.default if has_default else None))
    return tuple(slots)


def _returns_owner(func: Callable[..., Any], owner: type) -> bool:
    ret = inspect.signature(func).return_annotation
    if ret is _EMPTY:
        return False
    if inspect.isclass(ret):
        return issubclass(ret, owner)
    return str(ret).strip("'\"") in {owner.__name__, "Self", "typing.Self"}


def constructors(cls: type) -> List[ConstructorCandidate]:
    """Every way to build ``cls``: ``__init__`` first, then classmethod factories."""

    found: List[ConstructorCandidate] = []
    try:
        found.append(ConstructorCandidate(cls.__name__, cls, _slots(cls, cls)))
    except (TypeError, ValueError):
        logger.debug("constructor_signature_unavailable", extra={"type": cls.__qualname__})

    names = set()
    for klass in cls.__mro__:
        for attr, raw in vars(klass).items():
            if attr in names or not isinstance(raw, classmethod):
                continue
            names.add(attr)
            bound = getattr(cls, attr)
            try:
                if not (attr.startswith(FACTORY_PREFIXES) or _returns_owner(bound, cls)):
                    continue
                found.append(ConstructorCandidate(f"{cls.__name__}.{attr}", bound, _slots(bound, cls)))
            except (TypeError, ValueError):
                continue
    return found


def order_constructors(ctors: Sequence[ConstructorCandidate], order: str = "descending") -> List[ConstructorCandidate]:
    if order not in ("ascending", "descending"):
        raise ValueError(f"unknown constructor order: {order}")
    return sorted(ctors, key=lambda c: c.arity, reverse=(order == "descending"))


def synthesize(slot: ParameterSlot, hints: Sequence[ArgHint]) -> Any:
    for hint in hints:
        if slot.annotation is not _EMPTY and hint.accepts(slot.annotation):
            return hint.value
    if slot.has_default:
        return slot.default
    for candidate in _unwrap(slot.annotation):
        if isinstance(candidate, str):
            parts = _string_parts(candidate)
            candidate = _ZERO_BY_NAME.get(parts[0]) if parts else None
        if candidate in ZERO_VALUES:
            return ZERO_VALUES[candidate]
    if any(c is str or c == "str" for c in _unwrap(slot.annotation)):
        return ""
    return None


def _call(ctor: ConstructorCandidate, hints: Sequence[ArgHint]) -> Any:
    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for slot in ctor.parameters:
        value = synthesize(slot, hints)
        if slot.kind is inspect.Parameter.KEYWORD_ONLY:
            kwargs[slot.name] = value
        else:
            args.append(value)
    instance = ctor.factory(*args, **kwargs)
    if instance is None:
        raise TypeError(f"{ctor.signature} returned None")
    return instance


def bind(
    cls: type,
    hints: Sequence[ArgHint] = (),
    *,
    config_enum: Optional[type] = None,
    order: str = "descending",
) -> Binding:
    """Construct ``cls`` from the first constructor/variant that works.

    ``order`` sorts constructors by parameter count. With ``config_enum`` the
    enum members are the outer loop and constructors the inner loop; the
    current member is offered as a hint for the enum's own type. Never raises:
    failures come back as ``Binding.error``.
    """

    binding = Binding()
    last_error: Optional[BaseException] = None
    try:
        ctors = order_constructors(constructors(cls), order)
        variants: List[Optional[Enum]] = list(config_enum) if config_enum is not None else [None]
    except Exception as exc:
        binding.error = BindError(getattr(cls, "__name__", repr(cls)), [], exc)
        return binding

    for variant in variants:
        variant_hints = list(hints)
        if variant is not None:
            variant_hints.insert(0, ArgHint(config_enum, variant, "config variant"))
        for ctor in ctors:
            attempt = BindAttempt(ctor.signature, variant.name if variant is not None else None)
            binding.attempts.append(attempt)
            try:
                binding.instance = _call(ctor, variant_hints)
            except Exception as exc:
                attempt.error = f"{type(exc).__name__}: {exc}"
                last_error = exc
                logger.debug("bind_attempt_failed", extra={"attempt": str(attempt)})
                continue
            logger.info("bind_succeeded", extra={"type": cls.__name__, "attempt": str(attempt)})
            return binding

    names = [v.name for v in variants if v is not None]
    binding.error = BindError(cls.__name__, binding.attempts, last_error, names)
    logger.warning("bind_failed", extra={"type": cls.__name__, "attempts": len(binding.attempts)})
    return binding
