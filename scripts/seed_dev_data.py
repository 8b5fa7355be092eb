#!/usr/bin/env python3
"""
Seed a database with realistic sample data.

Creates a spread of asset and liability accounts, a monthly balance history
for each, and a few milestones. All writes go through the service layer.

Usage:
    python scripts/seed_dev_data.py               # seed dev-data/tally.db
    python scripts/seed_dev_data.py --clear       # remove all data
    python scripts/seed_dev_data.py --packaged    # target the installed app's database
"""

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path

# Add src to path so the script runs from a plain checkout
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from tally.app_context import AppContext
from tally.config.logging_config import setup_logging
from tally.config.settings import Settings
from tally.core.dates import add_months
from tally.domain.models import AccountType
from tally.services import AccountCreate, MilestoneCreate

logger = logging.getLogger("seed_dev_data")


@dataclass
class SeedAccount:
    name: str
    account_type: AccountType
    institution: str
    description: str
    initial_balance: float
    monthly_change: float
    volatility: float


# Liabilities start negative and are paid down towards zero
SEED_ACCOUNTS = [
    SeedAccount("Primary Residence", AccountType.PROPERTY, "Manchester", "3 bed semi-detached", 380000, 1500, 0.3),
    SeedAccount("Workplace Pension", AccountType.PENSION, "Aviva", "DC scheme", 45000, 800, 0.4),
    SeedAccount("SIPP", AccountType.PENSION, "AJ Bell", "Mixed funds", 15000, 350, 0.5),
    SeedAccount("Stocks & Shares ISA", AccountType.INVESTMENT, "Vanguard", "Global All Cap", 18000, 450, 0.6),
    SeedAccount("GIA", AccountType.INVESTMENT, "Trading 212", "Mixed stocks", 8000, 200, 0.7),
    SeedAccount("Emergency Fund", AccountType.SAVINGS, "Marcus", "4.5% AER", 12000, 50, 0.05),
    SeedAccount("Cash ISA", AccountType.SAVINGS, "Chip", "5.0% AER", 5000, 150, 0.05),
    SeedAccount("Mortgage", AccountType.MORTGAGE, "Nationwide", "4.2% fixed", -220000, 600, 0),
    SeedAccount("Car Finance", AccountType.LOAN, "PCP", "36 months", -12000, 350, 0),
    SeedAccount("Credit Card", AccountType.CREDIT_CARD, "Amex", "Cleared monthly", -1800, 60, 0.8),
]

# (months ago, label)
MILESTONES = [
    (18, "Started tracking"),
    (14, "ISA opened"),
    (8, "Emergency fund complete"),
    (4, "Pension increase"),
]


def _vary(change: float, volatility: float, rng: random.Random) -> float:
    if volatility == 0:
        return change
    return change + (rng.random() - 0.5) * 2 * volatility * abs(change)


def clear_data(context: AppContext) -> None:
    """Delete every milestone and account; balance entries go with their accounts."""
    for milestone in context.milestones.list_milestones():
        context.milestones.delete(milestone.milestone_id)
    for account in context.accounts.list_accounts():
        context.accounts.delete(account.account_id)
    print("✓ Cleared all data")


def seed_data(context: AppContext, months: int, rng: random.Random) -> None:
    """Create the sample accounts, monthly history and milestones."""
    today = context.net_worth.today()
    start = add_months(today, -months)
    entry_count = 0

    for seed in SEED_ACCOUNTS:
        account = context.accounts.create(
            AccountCreate(
                name=seed.name,
                account_type=seed.account_type,
                institution=seed.institution,
                description=seed.description,
            )
        )

        balance = seed.initial_balance
        for offset in range(months + 1):
            on = add_months(start, offset)
            if on > today:
                break
            context.ledger.record_snapshot(account.account_id, on, round(balance, 2))
            entry_count += 1

            balance += _vary(seed.monthly_change, seed.volatility, rng)
            if seed.initial_balance < 0:
                balance = min(balance, 0.0)

        print(f"✓ {seed.name} ({seed.account_type.label})")

    for months_ago, label in MILESTONES:
        if months_ago <= months:
            context.milestones.create(MilestoneCreate(date=add_months(today, -months_ago), label=label))

    print(f"\n✓ Seeded {len(SEED_ACCOUNTS)} accounts with {entry_count} balance entries")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a Tally database with sample data")
    parser.add_argument("--clear", action="store_true", help="Remove all data and exit")
    parser.add_argument(
        "--packaged",
        action="store_true",
        help="Target the installed app's database instead of dev-data/",
    )
    parser.add_argument("--months", type=int, default=24, help="Months of history (default: 24)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args()

    if args.months < 1:
        parser.error("--months must be at least 1")

    settings = Settings(environment="packaged" if args.packaged else "dev")
    setup_logging(settings)

    context = AppContext(settings)
    context.initialize()
    print(f"Database: {context.database_path} ({settings.environment})")
    print("=" * 60)

    try:
        if args.clear:
            clear_data(context)
            return
        if context.accounts.list_accounts():
            print("Database already has data. Clearing first...")
            clear_data(context)
        seed_data(context, args.months, random.Random(args.seed))
        stats = context.net_worth.net_worth_stats()
        print(f"Current net worth: £{stats.current_net_worth:,.2f}")
    finally:
        context.close()


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
