import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path

from prefilter.config.settings import Settings
from prefilter.database.connection import close_pool, init_pool
from prefilter.detection.models import AnalysisMode
from prefilter.logging.logger import Log
from prefilter.processor.models import Screenshot
from prefilter.processor.processor import build_prefilter
from prefilter.processor.verdict_serializer import VerdictSerializer


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="prefilter",
        description="Check images locally for sensitive content before they are shared.",
    )
    parser.add_argument("paths", nargs="*", type=Path, help="image files to analyze")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in AnalysisMode],
        help="analysis mode for this run (default: the saved preference)",
    )
    parser.add_argument(
        "--set-mode",
        choices=[mode.value for mode in AnalysisMode],
        help="save the default analysis mode before analyzing",
    )
    parser.add_argument("--status", action="store_true", help="include backend status")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: load settings -> build prefilter -> analyze paths -> print JSON."""
    args = _parse_args(argv)
    settings = Settings()
    # stdout carries the JSON report
    Log.configure(settings.log_level, stream=sys.stderr)
    uses_database = settings.preference_backend.lower() == "postgres"
    if uses_database:
        init_pool(settings)

    try:
        prefilter = build_prefilter(settings)
        if args.set_mode:
            prefilter.set_mode(AnalysisMode(args.set_mode))

        mode = AnalysisMode(args.mode) if args.mode else None
        screenshots = [Screenshot(id=str(path), file_path=path) for path in args.paths]
        results = prefilter.analyze_many(
            screenshots,
            mode=mode,
            on_progress=lambda current, total: Log.debug(f"Analyzed {current}/{total}"),
        )

        output: dict[str, object] = {
            "mode": (mode or prefilter.get_mode()).value,
            "results": VerdictSerializer().serialize_many(results),
        }
        if args.status:
            status = prefilter.backend_status()
            output["backend"] = {**asdict(status), "initialized": status.initialized}
        json.dump(output, sys.stdout, indent=2, default=str)
        sys.stdout.write("\n")
        return 0
    finally:
        if uses_database:
            close_pool()


if __name__ == "__main__":
    sys.exit(main())
