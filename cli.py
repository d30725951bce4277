import json
import sys
from pathlib import Path
from types import SimpleNamespace

from api.services import provisioning
from api.services.pipeline import PipelineSettings, generate_chart

USAGE = """Usage:
  python cli.py provision [ephemeris_dir]
  python cli.py chart input.json output.json"""


def provision(argv) -> int:
    settings = PipelineSettings.from_env()
    target = Path(argv[0]) if argv else settings.ephemeris_dir
    report = provisioning.ensure(provisioning.ephemeris_specs(), target, timeout=settings.fetch_timeout)
    for name in report.present:
        print(f"ok       {name}")
    for name in report.fetched:
        print(f"fetched  {name}")
    for warning in report.warnings:
        print(f"warning  {warning}")
    return 0 if report.ok else 1


def chart(argv) -> int:
    if len(argv) < 2:
        print(USAGE)
        return 2
    in_path, out_path = Path(argv[0]), Path(argv[1])
    data = json.loads(in_path.read_text(encoding="utf-8"))
    request = SimpleNamespace(
        name=data.get("name", ""),
        date=data.get("date", ""),
        time=data.get("time", ""),
        tz=data.get("tz", "UTC"),
        lang=data.get("lang", "en"),
    )
    result = generate_chart(request)
    out_path.write_text(json.dumps(result, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Wrote chart response → {out_path}")
    return 0 if result["success"] else 1


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in {"provision", "chart"}:
        print(USAGE)
        return 2
    command, rest = argv[0], argv[1:]
    return provision(rest) if command == "provision" else chart(rest)


if __name__ == "__main__":
    sys.exit(main())
