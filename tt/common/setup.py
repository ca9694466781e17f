import os
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Dataclass for accessing paths across program. Directories are only created when something is actually
# written to them, so building PATHS never touches the disk.
@dataclass(frozen=False)
class ProjectPaths:

    root: Path
    data: Path
    reports: Path
    logs: Path

    @staticmethod
    def build(root: Path | None = None):
        # TT_HOME wins, otherwise everything lives relative to wherever termtracker was launched from.
        if root is None:
            home = os.getenv("TT_HOME")
            root = Path(home).expanduser() if home else Path.cwd()
        root = Path(root).resolve()

        return ProjectPaths(
            root = root,
            data = root / "data",
            reports = root / "reports",
            logs = root / "logs",
        )

    @property
    def settings_file(self):
        return self.data / "settings.json"
PATHS = ProjectPaths.build()
