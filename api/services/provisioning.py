"""Keep the Swiss Ephemeris data files present in the local ephemeris directory.

Provisioning is best effort: each file is checked and fetched independently,
and a failed fetch only produces a warning in the returned report. Engine
construction later fails with its own diagnostic if a file is still missing.
"""

from __future__ import annotations

import logging
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/aloistr/swisseph/master/ephe/"
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) hd-bodygraph/0.4 (+ephemeris provisioning)"
DEFAULT_TIMEOUT = 30.0
MAX_WORKERS = 4


@dataclass(frozen=True)
class ResourceSpec:
    file_name: str
    min_bytes: int
    url: str


@dataclass(frozen=True)
class ProvisioningWarning:
    file_name: str
    reason: str

    def __str__(self) -> str:
        return f"{self.file_name}: {self.reason}"


@dataclass
class ProvisionReport:
    target_dir: Path
    present: List[str] = field(default_factory=list)
    fetched: List[str] = field(default_factory=list)
    warnings: List[ProvisioningWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


def base_url() -> str:
    url = os.getenv("EPHEMERIS_BASE_URL") or DEFAULT_BASE_URL
    return url if url.endswith("/") else url + "/"


def ephemeris_specs(url_base: Optional[str] = None) -> List[ResourceSpec]:
    """The fixed file set the chart engine reads (asteroids, moon, planets)."""
    root = url_base or base_url()
    return [
        ResourceSpec("seas_18.se1", 200_000, root + "seas_18.se1"),
        ResourceSpec("semo_18.se1", 1_000_000, root + "semo_18.se1"),
        ResourceSpec("sepl_18.se1", 400_000, root + "sepl_18.se1"),
    ]


def fetch_timeout() -> float:
    raw = os.getenv("EPHEMERIS_FETCH_TIMEOUT")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT
    except ValueError:
        return DEFAULT_TIMEOUT


def is_valid(path: Path, min_bytes: int) -> bool:
    try:
        return path.is_file() and path.stat().st_size >= min_bytes
    except OSError:
        return False


def _write_atomic(path: Path, payload: bytes) -> None:
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def _fetch(spec: ResourceSpec, path: Path, timeout: float, session) -> Optional[ProvisioningWarning]:
    getter = session.get if session is not None else requests.get
    try:
        r = getter(spec.url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        r.raise_for_status()
        payload = r.content
        if len(payload) < spec.min_bytes:
            reason = f"downloaded {len(payload)} bytes, expected at least {spec.min_bytes}"
            logger.warning("ephemeris_fetch_undersized", extra={"file": spec.file_name, "size": len(payload)})
            return ProvisioningWarning(spec.file_name, reason)
        _write_atomic(path, payload)
    except Exception as exc:
        # an injected session may raise more than RequestException/OSError
        logger.warning("ephemeris_fetch_failed", extra={"file": spec.file_name, "url": spec.url, "error": str(exc)})
        return ProvisioningWarning(spec.file_name, f"{type(exc).__name__}: {exc}")
    logger.info("ephemeris_fetched", extra={"file": spec.file_name, "size": len(payload)})
    return None


def ensure(
    specs: Iterable[ResourceSpec],
    target_dir,
    *,
    timeout: Optional[float] = None,
    session=None,
    download: bool = True,
) -> ProvisionReport:
    """Make sure every spec's file exists in ``target_dir`` with a sane size.

    Files that are absent or smaller than ``min_bytes`` are fetched once from
    their URL and written over whatever is there. Failures are collected per
    file in ``ProvisionReport.warnings``; nothing here raises for a single bad
    download. With ``download=False`` stale files are only reported.
    """

    specs = list(specs)
    target = Path(target_dir)
    report = ProvisionReport(target_dir=target)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("ephemeris_dir_unavailable", extra={"dir": str(target), "error": str(exc)})
        report.warnings.extend(ProvisioningWarning(s.file_name, f"cannot create {target}: {exc}") for s in specs)
        return report

    stale: List[ResourceSpec] = []
    for spec in specs:
        if is_valid(target / spec.file_name, spec.min_bytes):
            report.present.append(spec.file_name)
        elif download:
            stale.append(spec)
        else:
            report.warnings.append(ProvisioningWarning(spec.file_name, "missing or undersized, download disabled"))

    if not stale:
        return report

    timeout = fetch_timeout() if timeout is None else timeout
    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(stale))) as executor:
        results = list(
            executor.map(lambda s: _fetch(s, target / s.file_name, timeout, session), stale)
        )

    for spec, warning in zip(stale, results):
        if warning is None:
            report.fetched.append(spec.file_name)
        else:
            report.warnings.append(warning)
    return report
