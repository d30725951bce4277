"""Provision, resolve, bind, render and extract one bodygraph request.

Every request starts from scratch: engine classes are re-resolved and
re-constructed each time so a redeployed engine with a different constructor
shape is picked up without a restart.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import os
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..i18n.resolve import clamp_lang, translation_tables
from . import binder, extraction, provisioning, resolver
from .binder import ArgHint, BindError
from .resolver import CapabilityContract, ResolutionNotFound

logger = logging.getLogger(__name__)

DEFAULT_EPOCH = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
DEFAULT_RENDERER = "src.hd_engine.graph:render_bodygraph"
RENDERER_PARAM_NAMES = ("Chart", "chart")

EPHEMERIDES = CapabilityContract(
    "ephemerides provider",
    interfaces=("IEphemerides",),
    members=("longitudes", "julian_day"),
)
CHART = CapabilityContract(
    "human design chart",
    interfaces=("IHumanDesignChart",),
    members=("chart_type", "defined_centers"),
)
CALCULATION_MODE = CapabilityContract(
    "calculation mode",
    interfaces=("EphCalculationMode", "CalculationMode"),
    enum=True,
)


class RenderError(RuntimeError):
    pass


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def default_ephemeris_dir() -> Path:
    return Path(os.getenv("HOME", "/opt/app")) / "data" / "ephe"


@dataclass
class PipelineSettings:
    ephemeris_dir: Path = field(default_factory=default_ephemeris_dir)
    auto_download: bool = True
    fetch_timeout: float = provisioning.DEFAULT_TIMEOUT
    engine_packages: Tuple[str, ...] = resolver.DEFAULT_PACKAGES
    renderer: str = DEFAULT_RENDERER
    session: Any = None

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        ephe = os.getenv("EPHEMERIS_DIR")
        return cls(
            ephemeris_dir=Path(ephe) if ephe else default_ephemeris_dir(),
            auto_download=_flag("EPHEMERIS_AUTO_DOWNLOAD", True),
            fetch_timeout=provisioning.fetch_timeout(),
            engine_packages=resolver.engine_packages(),
            renderer=os.getenv("HD_RENDERER") or DEFAULT_RENDERER,
        )


def parse_timestamp(date_str: Optional[str], time_str: Optional[str], tz: Optional[str] = "UTC") -> Tuple[datetime, List[str]]:
    """Local date + time in ``tz`` → aware UTC datetime.

    Unparsable input falls back to ``DEFAULT_EPOCH`` and an unknown zone to
    UTC; both add a warning instead of failing the request.
    """

    warnings: List[str] = []
    try:
        zone = ZoneInfo(tz or "UTC")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # ``ZoneInfo("America")`` hits a directory, not a zone file
        warnings.append(f"Unknown time zone {tz!r}; using UTC.")
        zone = timezone.utc

    time_part = (time_str or "12:00").strip()
    try:
        local = datetime.fromisoformat(f"{(date_str or '').strip()}T{time_part}")
    except ValueError:
        warnings.append(
            f"Could not parse date/time {date_str!r} {time_str!r}; using {DEFAULT_EPOCH.isoformat()}."
        )
        return DEFAULT_EPOCH, warnings
    if local.tzinfo is None:
        local = local.replace(tzinfo=zone)
    return local.astimezone(timezone.utc), warnings


def load_renderer(path: str) -> Callable[..., Any]:
    module_name, _, attr = path.partition(":")
    module = importlib.import_module(module_name)
    return getattr(module, attr or "render")


def renderer_parameter(renderer: Callable[..., Any]) -> str:
    """Name under which the renderer expects the chart."""

    params = [
        p for p in inspect.signature(renderer).parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
    ]
    for p in params:
        if p.name in RENDERER_PARAM_NAMES:
            return p.name
    for p in params:
        if isinstance(p.annotation, type) and CHART.declared_by(p.annotation):
            return p.name
    if params:
        return params[0].name
    raise RenderError(f"renderer {renderer!r} takes no chart parameter")


def render(renderer: Callable[..., Any], chart: Any) -> str:
    try:
        markup = renderer(**{renderer_parameter(renderer): chart})
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"Renderer failed: {type(exc).__name__}: {exc}") from exc
    if not isinstance(markup, str) or not markup:
        raise RenderError(f"Renderer returned no markup ({type(markup).__name__})")
    return markup


def _path_hints(ephe_dir: Path) -> List[ArgHint]:
    return [
        ArgHint(str, str(ephe_dir), "ephemeris dir"),
        ArgHint(Path, ephe_dir, "ephemeris dir"),
        ArgHint(os.PathLike, ephe_dir, "ephemeris dir"),
    ]


def build_chart(point_in_time: datetime, settings: PipelineSettings) -> Any:
    """Resolve and bind the ephemerides provider, then the chart."""

    packages = settings.engine_packages
    eph_cls = resolver.resolve(EPHEMERIDES, packages)
    ephemerides = binder.bind(eph_cls, _path_hints(settings.ephemeris_dir), order="descending").unwrap()

    chart_cls = resolver.resolve(CHART, packages)
    try:
        mode_enum = resolver.resolve(CALCULATION_MODE, packages)
    except ResolutionNotFound:
        logger.info("calculation_mode_unavailable", extra={"packages": packages})
        mode_enum = None

    hints = [
        ArgHint(datetime, point_in_time, "timestamp"),
        ArgHint(eph_cls, ephemerides, "ephemerides"),
        ArgHint("IEphemerides", ephemerides, "ephemerides"),
    ]
    return binder.bind(chart_cls, hints, config_enum=mode_enum, order="ascending").unwrap()


def generate_chart(request, settings: Optional[PipelineSettings] = None) -> Dict[str, Any]:
    """Run one request and return the response envelope.

    ``request`` needs ``name``, ``date`` and ``time`` attributes; ``tz`` and
    ``lang`` are optional. Failures never escape: they are returned as
    ``{"success": False, "message": ...}`` with the full diagnostic.
    """

    settings = settings or PipelineSettings.from_env()
    try:
        point_in_time, warnings = parse_timestamp(
            request.date, request.time, getattr(request, "tz", None) or "UTC"
        )

        report = provisioning.ensure(
            provisioning.ephemeris_specs(),
            settings.ephemeris_dir,
            timeout=settings.fetch_timeout,
            session=settings.session,
            download=settings.auto_download,
        )
        warnings.extend(str(w) for w in report.warnings)

        chart = build_chart(point_in_time, settings)
        markup = render(load_renderer(settings.renderer), chart)
        fields = extraction.extract(
            chart,
            extraction.FIELD_SPECS,
            translation_tables(clamp_lang(getattr(request, "lang", None))),
        )
    except (ResolutionNotFound, BindError, RenderError) as exc:
        logger.warning("chart_generation_failed", extra={"error_type": type(exc).__name__})
        message = f"{type(exc).__name__}: {exc}"
        if exc.__cause__ is not None and not isinstance(exc, BindError):
            message += "\n" + _full_detail(exc.__cause__)
        return {"success": False, "message": message}
    except Exception as exc:
        logger.exception("chart_generation_crashed")
        return {"success": False, "message": _full_detail(exc)}

    data: Dict[str, Any] = {"name": request.name}
    data.update(fields)
    data["chartImageSVG"] = markup
    data["timestamp"] = point_in_time.isoformat()
    data["warnings"] = warnings
    return {"success": True, "data": data}


def _full_detail(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
