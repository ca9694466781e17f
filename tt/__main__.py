import sys
from tt.common.errors import TrackerError
from tt.common.logger import log
from tt.ui.app import main

# Entry point for `python -m tt` and the `termtracker` script. By the time an exception gets here the
# terminal has already been restored, so it's safe to print.
def run() -> None:
    try:
        main()
    except SystemExit:
        raise
    except TrackerError as e:
        log.exception("Unrecoverable error, exiting")
        print(f"termtracker: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        # Full stack trace, always
        log.exception("Uncaught exception in entrypoint, exiting")
        print("termtracker: unexpected error, see logs/latest.log for details", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    run()
