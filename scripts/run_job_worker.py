"""Run the deferred event worker as a standalone process."""

from __future__ import annotations

import argparse

import anyio
from sqlalchemy.exc import SQLAlchemyError

from marketplace.config import configure_logging, get_settings
from marketplace.infrastructure.database import get_session_factory, initialize_database
from marketplace.infrastructure.events.bootstrap import build_event_runtime


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the worker."""

    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Poll the job queue and dispatch queued marketplace events.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Process the jobs that are due and exit instead of polling forever.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.job_process_every_seconds,
        help="Seconds between two polls (default: %(default)s).",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=settings.job_max_concurrency,
        help="Maximum number of jobs executed at the same time (default: %(default)s).",
    )
    return parser.parse_args()


def main() -> None:
    """Start the worker with the provided command line arguments."""

    args = parse_args()
    configure_logging()

    settings = get_settings().model_copy(
        update={
            "job_process_every_seconds": args.interval,
            "job_max_concurrency": args.max_concurrency,
        }
    )
    try:
        initialize_database()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not prepare the database: {exc}") from exc

    runtime = build_event_runtime(get_session_factory(), settings)
    if args.once:
        processed = anyio.run(runtime.worker.process_pending)
        print(f"Processed {processed} job(s)")
        return

    try:
        anyio.run(runtime.worker.run)
    except KeyboardInterrupt:
        runtime.worker.stop()


if __name__ == "__main__":
    main()
