import json
from pathlib import Path
from tt.common.logger import log
from tt.common.setup import PATHS

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.settings_file

# Default values for every setting. File paths given in settings.json may be relative, and are resolved
# against PATHS.root.
_SETTINGS_DEFAULTS = {
    "tick_rate_ms": 200,
    "store_file": str(PATHS.data / "db.json"),
    "report_file": str(PATHS.reports / "latest_report.csv"),
}

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

# Resolves a settings path value against the project root, leaving absolute paths alone.
def resolve_path(value, root=None):
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (root or PATHS.root) / path

#endregion === Helpers and Paths ===

#region === Loading Settings ===

# Loads settings from PATHS.data / settings.json, filling in defaults for anything missing or of the wrong
# type. The settings file is optional, so a missing or broken one just means defaults (with a warning for
# broken ones).
def load_settings():
    if not SETTINGS_PATH.exists():
        log.info(f"No settings file at '{SETTINGS_PATH}', using defaults.")
        return build_default_settings()
    try:
        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        log.warning(f"Ran into an error while trying to load '{SETTINGS_PATH}', falling back to default settings.", exc_info=True)
        return build_default_settings()
    if not isinstance(raw, dict):
        log.warning(f"Settings file '{SETTINGS_PATH}' does not hold an object, falling back to default settings.")
        return build_default_settings()

    settings = build_default_settings()
    defaulted_values = set()
    for key, default in _SETTINGS_DEFAULTS.items():
        value = raw.get(key)
        # bool sneaks past an int check, so compare exact types
        if value is None or type(value) is not type(default):
            defaulted_values.add(key)
            continue
        settings[key] = value

    if settings["tick_rate_ms"] <= 0:
        defaulted_values.add("tick_rate_ms")
        settings["tick_rate_ms"] = _SETTINGS_DEFAULTS["tick_rate_ms"]

    # Log results
    if defaulted_values:
        log.warning(f"Loaded settings from '{SETTINGS_PATH}', but with missing or invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
    else:
        log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
    return settings

#endregion === Loading Settings ===
