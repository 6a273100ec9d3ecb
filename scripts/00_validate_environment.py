import platform
import sys

from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.config import MITE_FILE, LOGS_DIR
from src.utils.logging import package_versions, write_json


def main() -> None:
    info = {
        "python_version": sys.version,
        "platform": platform.platform(),
        "packages": package_versions(),
        "mite_file": str(MITE_FILE),
        "mite_file_exists": MITE_FILE.exists(),
    }
    write_json(LOGS_DIR / "environment_check.json", info)
    print("Wrote outputs/logs/environment_check.json")


if __name__ == "__main__":
    main()
