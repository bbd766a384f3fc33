"""Load database/seed.sql and (re)create the demo admin and kiosk employee."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.chronos_pro.chronos_pro.common.logging import setup_logging
from src.chronos_pro.chronos_pro.database.bootstrap import apply_seed_sql, ensure_demo_users


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config)

    print("demo accounts:")
    print("  admin     admin@chronos.local / admin123")
    print("  employee  jose@chronos.local / staff123 (kiosk PIN 1234)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
