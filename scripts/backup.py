"""Backup the JSON data file.

Note: For the mysql backend use `mysqldump` on the `identities` and `events` tables instead.
"""

from __future__ import annotations

import importlib
import shutil
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    if getattr(settings, "STORAGE_BACKEND", "json") != "json":
        raise SystemExit("STORAGE_BACKEND is not 'json'; back up the MySQL tables with mysqldump.")

    src = Path(settings.DATA_FILE)
    if not src.is_absolute():
        src = REPO_ROOT / src
    if not src.exists():
        raise SystemExit(f"No data file at {src}")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{src.stem}_{ts}{src.suffix}"
    shutil.copy2(src, out_file)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
