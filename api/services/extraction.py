"""Read bodygraph fields off a bound chart and turn them into display labels."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from ..i18n.hd_labels import DERIVATION
from ..i18n.resolve import translate

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
LIST_SEPARATOR = ", "


@dataclass(frozen=True)
class FieldSpec:
    """A logical field and the attribute names it may live under, in order."""

    name: str
    accessors: Tuple[str, ...]


FIELD_SPECS: Tuple[FieldSpec, ...] = (
    FieldSpec("type", ("chart_type", "type", "hd_type")),
    FieldSpec("authority", ("authority", "inner_authority")),
    FieldSpec("profile", ("profile",)),
    FieldSpec("definition", ("definition", "split_definition")),
    FieldSpec("definedCenters", ("defined_centers", "centers")),
)

# derived field -> (source field, position in the DERIVATION tuple)
DERIVED_FIELDS: Dict[str, Tuple[str, int]] = {
    "strategy": ("type", 0),
    "signature": ("type", 1),
    "notSelfTheme": ("type", 2),
}

# field -> (internal separator, display separator)
NORMALIZED_FIELDS: Dict[str, Tuple[str, str]] = {
    "profile": ("_", "/"),
}


def _code(value: Any) -> str:
    if isinstance(value, Enum):
        return value.name
    return str(value)


def _raw(value: Any):
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_code(v) for v in value]
        return sorted(items) if isinstance(value, (set, frozenset)) else items
    return _code(value)


def _described(instance: Any) -> Mapping:
    describe = getattr(instance, "describe", None)
    if not callable(describe):
        return {}
    try:
        described = describe()
    except Exception:
        logger.debug("describe_failed", exc_info=True)
        return {}
    return described if isinstance(described, Mapping) else {}


def _readable(value: Any):
    """``_raw(value)``, or ``None`` when the value cannot be rendered as text."""
    try:
        return _raw(value)
    except Exception:
        logger.debug("field_value_unreadable", exc_info=True)
        return None


def read_field(instance: Any, spec: FieldSpec, described: Optional[Mapping] = None):
    """First readable accessor of ``spec``; ``UNKNOWN`` when none is."""

    described = described if described is not None else _described(instance)
    for key in (spec.name,) + spec.accessors:
        try:
            value = described[key] if key in described else None
        except Exception:
            continue
        if value is None:
            continue
        readable = _readable(value)
        if readable is not None:
            return readable
    for accessor in spec.accessors:
        try:
            value = getattr(instance, accessor)
        except Exception:
            continue
        if callable(value) and not isinstance(value, Enum):
            try:
                value = value()
            except Exception:
                continue
        if value is None:
            continue
        readable = _readable(value)
        if readable is not None:
            return readable
    return UNKNOWN


def derive(raw: Dict[str, Any], derivations: Dict[str, Tuple[str, int]] = DERIVED_FIELDS) -> Dict[str, str]:
    out = {}
    for name, (source, index) in derivations.items():
        code = raw.get(source, UNKNOWN)
        row = DERIVATION.get(code) if isinstance(code, str) else None
        out[name] = row[index] if row else UNKNOWN
    return out


def _translate(value, table: Optional[Dict[str, str]]) -> str:
    if isinstance(value, list):
        return LIST_SEPARATOR.join(translate(v, table) for v in value)
    return translate(value, table)


def normalize(name: str, value: str, normalizers: Dict[str, Tuple[str, str]] = NORMALIZED_FIELDS) -> str:
    rule = normalizers.get(name)
    if rule is None or value == UNKNOWN:
        return value
    return value.replace(rule[0], rule[1])


def extract(
    instance: Any,
    field_specs: Sequence[FieldSpec] = FIELD_SPECS,
    tables: Optional[Dict[str, Dict[str, str]]] = None,
    *,
    derivations: Dict[str, Tuple[str, int]] = DERIVED_FIELDS,
    normalizers: Dict[str, Tuple[str, str]] = NORMALIZED_FIELDS,
) -> Dict[str, str]:
    """Build the FieldMap for ``instance``.

    Every requested field (and every derived field) is present in the result;
    fields that cannot be read are ``"unknown"``. Derived fields are computed
    from the raw codes, then everything is translated, then normalized.
    """

    tables = tables or {}
    described = _described(instance)
    raw: Dict[str, Any] = {spec.name: read_field(instance, spec, described) for spec in field_specs}
    raw.update(derive(raw, derivations))

    fields: Dict[str, str] = {}
    for name, value in raw.items():
        fields[name] = normalize(name, _translate(value, tables.get(name)), normalizers)
    return fields
