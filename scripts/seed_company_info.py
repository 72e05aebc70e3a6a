"""
Seed the company information document used by `get_company_info`.

Usage:
  python scripts/seed_company_info.py
  python scripts/seed_company_info.py --path config/company_info.yaml --overwrite

DATABASE_URL and COMPANY_NAME are read from the environment / .env, the same
way the backend reads them.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


def main() -> int:
    _ensure_repo_on_path()

    from profit_flow.backend.backend_core.company import CompanyKnowledgeBase
    from profit_flow.backend.backend_core.config import settings
    from profit_flow.backend.backend_core.database import Database

    parser = argparse.ArgumentParser(description="Seed company info into the database")
    parser.add_argument("--path", default=settings.COMPANY_INFO_PATH or "config/company_info.yaml")
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    parser.add_argument("--organization", default=settings.COMPANY_NAME)
    parser.add_argument("--overwrite", action="store_true", help="Replace an existing document")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    if not Path(args.path).exists():
        print(f"FAIL: company info file not found: {args.path}", file=sys.stderr)
        return 2

    database = Database(args.database_url)
    try:
        database.create_all()
        knowledge_base = CompanyKnowledgeBase(database, args.organization)
        written = knowledge_base.seed_from_yaml(args.path, overwrite=args.overwrite)
        sections = sorted(knowledge_base.lookup("all"))
    finally:
        database.dispose()

    state = "seeded" if written else "already present (use --overwrite to replace)"
    print(f"Company info for '{args.organization}' {state}: {', '.join(sections)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
