from tt.util.misc import now_utc, format_instant, parse_instant

__all__ = ["now_utc", "format_instant", "parse_instant"]
