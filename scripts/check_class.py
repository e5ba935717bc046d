import sys

from timespent.config import ConfigError, load_settings
from timespent.jobs.class_timespent import ClassFetchFailure, configure_logging, check_class


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("usage: check_class.py <class_id>")

    configure_logging()
    try:
        settings = load_settings()
    except ConfigError as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc

    outcome = check_class(settings, sys.argv[1])
    if isinstance(outcome, ClassFetchFailure):
        print(
            "Check failed: "
            f"class_id={outcome.class_id} "
            f"status_code={outcome.status_code} "
            f"url={outcome.url} "
            f"error={outcome.error}"
        )
        return

    members = outcome.response.members
    sample = members[0] if members else None
    print(
        "Resolved class timespent: "
        f"class_id={outcome.class_id} "
        f"member_count={len(members) if members is not None else 'N/A'} "
        f"sample_id={sample.member_id if sample else None}"
    )


if __name__ == "__main__":
    main()
