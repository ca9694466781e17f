import csv
import io
import math
from pathlib import Path
from tt.common.logger import log
from tt.core.store import atomic_write_text
from tt.util import now_utc

REPORT_HEADER = ("Project", "Duration")
REPORT_INCREMENT_MINUTES = 15


# Live display format, HH:MM:SS with no rounding. Hours grow past 99 rather than wrapping.
def format_duration(duration):
    seconds = max(0, int(duration.total_seconds()))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


# Report format, HH:MM rounded UP to the next 15 minute increment. 7m -> 00:15, 15m -> 00:15, 16m -> 00:30.
# Reports round, the live display never does, so this stays separate from format_duration.
def format_duration_report(duration):
    seconds = max(0, int(duration.total_seconds()))
    increments = math.ceil(seconds / (REPORT_INCREMENT_MINUTES * 60))
    total_minutes = increments * REPORT_INCREMENT_MINUTES
    h, m = divmod(total_minutes, 60)
    return f"{h:02d}:{m:02d}"


# One (project, rounded duration) row per task, in list order.
def report_rows(tasks, now=None):
    now = now or now_utc()
    return [(task.project, format_duration_report(task.total_duration(now))) for task in tasks]


def render_report(tasks, now=None):
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    writer.writerows(report_rows(tasks, now))
    return buffer.getvalue()


# Writes the CSV report to `path` (parent directories created as needed) and returns the path.
def write_report(tasks, path, now=None):
    path = Path(path)
    atomic_write_text(path, render_report(tasks, now))
    log.info(f"Wrote report for {len(tasks)} task(s) to '{path}'")
    return path
