"""
배치 작업 실행 스크립트

Usage:
    python scripts/run_job.py grant-bonus --param campaign=day1 --param amount=30 --dry-run
    python scripts/run_job.py reset-points
    python scripts/run_job.py rename-prizes --json '{"mapping": {"ตั๋วกิจกรรมฟรี": "ตั๋วโหวตฟรี"}}'
    python scripts/run_job.py reconcile-spins --param min_age_seconds=600
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import json

from wheelapi.containers import Container
from wheelapi.core.exceptions import BaseAPIException
from wheelapi.jobs import JOBS
from wheelapi.logging_config import setup_logging


def _parse_value(raw: str):
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run an idempotent batch job")
    parser.add_argument("job", choices=sorted(JOBS))
    parser.add_argument(
        "--param", action="append", default=[], metavar="KEY=VALUE",
        help="job parameter, value parsed as JSON when possible",
    )
    parser.add_argument("--json", dest="json_params", help="job parameters as a JSON object")
    parser.add_argument("--dry-run", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    container = Container()
    setup_logging(container.config.config().LOG_LEVEL)

    params = json.loads(args.json_params) if args.json_params else {}
    for item in args.param:
        key, sep, value = item.partition("=")
        if not sep:
            raise SystemExit(f"--param expects KEY=VALUE, got {item!r}")
        params[key] = _parse_value(value)

    try:
        job_service = container.services.job_service()
        result = job_service.run(args.job, params, dry_run=args.dry_run)
    except BaseAPIException as e:
        raise SystemExit(f"❌ {e.message}: {e.details}")
    finally:
        container.shutdown_resources()

    print("=" * 70)
    print(f"📊 {result.job_name} {'(dry run)' if result.dry_run else ''}")
    print(f"   ✅ migrated: {result.migrated}")
    print(f"   ⏭️  skipped:  {result.skipped}")
    print(f"   ❌ failed:   {result.failed}")
    print(f"   ⏱️  {result.execution_time_ms}ms")
    print("=" * 70)
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
