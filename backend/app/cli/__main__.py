# backend/app/cli/__main__.py
from __future__ import annotations

import argparse
from decimal import Decimal

from app.cli.seed_demo import seed_demo, seed_lookups


def main() -> None:
    p = argparse.ArgumentParser(prog="python -m app.cli")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("seed-lookups", help="insert the default phases/statuses that are missing")

    demo = sub.add_parser("seed-demo", help="lookups plus a demo user, portfolio and program")
    demo.add_argument("--user-id", default="demo-admin")
    demo.add_argument("--user-email", default="admin@spm.local")
    demo.add_argument("--portfolio-name", default="Cloud Initiative")
    demo.add_argument("--portfolio-budget", default="500000", help="whole currency units")
    demo.add_argument("--program-name", default="Migration")

    args = p.parse_args()

    if args.command == "seed-lookups":
        print({"ok": True, **seed_lookups()})
        return

    out = seed_demo(
        user_id=args.user_id,
        user_email=args.user_email,
        portfolio_name=args.portfolio_name,
        portfolio_budget=Decimal(args.portfolio_budget),
        program_name=args.program_name,
    )
    print(
        {
            "ok": True,
            "user_id": out.user_id,
            "portfolio_id": out.portfolio_id,
            "program_id": out.program_id,
            "lookups_created": out.lookups_created,
        }
    )


if __name__ == "__main__":
    main()
