"""
Financial breakdowns over ledger transactions.

Income and Expense entries are totalled, split by transaction type for the
donut charts, bucketed into calendar months for the trend chart, and mapped
onto a small chart of accounts for the P&L statement. All sums are Decimal
cents, so ``total_revenue - total_expenses == noi`` holds exactly.
"""
import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from properly.schemas.rental import Transaction, TransactionCategory, TransactionType
from properly.schemas.reports import (
    BreakdownItem,
    FinancialOverview,
    FinancialSummary,
    MonthlyBucket,
    ProfitAndLoss,
    PropertyFinancials,
    StatementLine,
)
from properly.schemas.snapshot import PortfolioSnapshot
from properly.services.money import MONTH_NAMES, in_date_range, percentage, sum_money, to_money

logger = logging.getLogger(__name__)

Income = TransactionCategory.INCOME
Expense = TransactionCategory.EXPENSE


# ─── Presentation tables ──────────────────────────────────────────────────────
# Chart colours per (category, type). Anything unlisted falls back to the
# category default.

_CHART_COLORS: dict[TransactionCategory, dict[TransactionType, str]] = {
    Income: {
        TransactionType.RENT:      "#10b981",
        TransactionType.LATE_FEE:  "#3b82f6",
        TransactionType.PARKING:   "#8b5cf6",
        TransactionType.OTHER:     "#f59e0b",
    },
    Expense: {
        TransactionType.MAINTENANCE:    "#ef4444",
        TransactionType.TAXES:          "#f97316",
        TransactionType.UTILITIES:      "#f59e0b",
        TransactionType.MANAGEMENT_FEE: "#6b7280",
        TransactionType.INSURANCE:      "#3b82f6",
        TransactionType.OTHER:          "#8b5cf6",
    },
}

_DEFAULT_COLORS: dict[TransactionCategory, str] = {
    Income: "#6b7280",
    Expense: "#d1d5db",
}

# Chart of accounts, in statement order.
INCOME_ACCOUNTS: dict[TransactionType, str] = {
    TransactionType.RENT:     "Rental Income",
    TransactionType.LATE_FEE: "Late Fee Income",
    TransactionType.PARKING:  "Parking Income",
}
OTHER_INCOME_ACCOUNT = "Other Income"

EXPENSE_ACCOUNTS: dict[TransactionType, str] = {
    TransactionType.MAINTENANCE:    "Repairs & Maintenance",
    TransactionType.UTILITIES:      "Utilities",
    TransactionType.TAXES:          "Property Taxes",
    TransactionType.INSURANCE:      "Insurance",
    TransactionType.MANAGEMENT_FEE: "Management Fees",
}
OTHER_EXPENSE_ACCOUNT = "Miscellaneous Expense"


def chart_color(category: TransactionCategory, tx_type: TransactionType) -> str:
    return _CHART_COLORS[category].get(tx_type, _DEFAULT_COLORS[category])


def account_for(category: TransactionCategory, tx_type: TransactionType) -> str:
    if category == Income:
        return INCOME_ACCOUNTS.get(tx_type, OTHER_INCOME_ACCOUNT)
    return EXPENSE_ACCOUNTS.get(tx_type, OTHER_EXPENSE_ACCOUNT)


# ─── Scoping ──────────────────────────────────────────────────────────────────

def scope_transactions(
    transactions: Iterable[Transaction],
    date_from: date | None = None,
    date_to: date | None = None,
    property_id: str | None = None,
    owner_id: str | None = None,
) -> list[Transaction]:
    """Inclusive date range plus optional property/owner scope."""
    return [
        t for t in transactions
        if in_date_range(t.transaction_date, date_from, date_to)
        and (property_id is None or t.property_id == property_id)
        and (owner_id is None or t.owner_id == owner_id)
    ]


# ─── Aggregates ───────────────────────────────────────────────────────────────

def summarize(transactions: Iterable[Transaction]) -> FinancialSummary:
    transactions = list(transactions)
    revenue = sum_money(t.amount for t in transactions if t.category == Income)
    expenses = sum_money(t.amount for t in transactions if t.category == Expense)
    noi = revenue - expenses
    return FinancialSummary(
        total_revenue=revenue,
        total_expenses=expenses,
        noi=noi,
        profit_margin=percentage(noi, revenue),
    )


def breakdown(transactions: Iterable[Transaction], category: TransactionCategory) -> list[BreakdownItem]:
    """Per-type totals for one category, largest first (ties by type name)."""
    totals: dict[TransactionType, Decimal] = defaultdict(Decimal)
    for t in transactions:
        if t.category == category:
            totals[t.type] += t.amount

    items = [
        BreakdownItem(
            type=tx_type,
            label=tx_type.value,
            value=to_money(total),
            color=chart_color(category, tx_type),
        )
        for tx_type, total in totals.items()
    ]
    items.sort(key=lambda i: (-i.value, i.label))
    return items


def monthly_series(transactions: Iterable[Transaction], year: int) -> list[MonthlyBucket]:
    """Twelve zero-filled Jan–Dec buckets; transactions from other years are ignored."""
    income: dict[int, Decimal] = defaultdict(Decimal)
    expenses: dict[int, Decimal] = defaultdict(Decimal)
    for t in transactions:
        if t.transaction_date.year != year:
            continue
        bucket = income if t.category == Income else expenses
        bucket[t.transaction_date.month] += t.amount

    return [
        MonthlyBucket(
            month=month,
            name=MONTH_NAMES[month - 1],
            income=to_money(income[month]),
            expenses=to_money(expenses[month]),
        )
        for month in range(1, 13)
    ]


def property_financials(
    transactions: Iterable[Transaction],
    property_names: Mapping[str, str] | None = None,
) -> list[PropertyFinancials]:
    """Revenue, expenses and NOI per property, highest NOI first."""
    property_names = property_names or {}
    revenue: dict[str, Decimal] = defaultdict(Decimal)
    expenses: dict[str, Decimal] = defaultdict(Decimal)
    for t in transactions:
        if t.category == Income:
            revenue[t.property_id] += t.amount
        else:
            expenses[t.property_id] += t.amount

    rows = []
    for property_id in revenue.keys() | expenses.keys():
        rev = to_money(revenue[property_id])
        exp = to_money(expenses[property_id])
        rows.append(
            PropertyFinancials(
                property_id=property_id,
                property_name=property_names.get(property_id, property_id),
                revenue=rev,
                expenses=exp,
                noi=rev - exp,
            )
        )
    rows.sort(key=lambda r: (-r.noi, r.property_name))
    return rows


def profit_and_loss(transactions: Iterable[Transaction]) -> ProfitAndLoss:
    """
    Map transactions onto the chart of accounts.

    Accounts with a zero total are omitted. Income of an expense-only type
    lands in Other Income and vice versa, so statement totals always match
    ``summarize``.
    """
    totals: dict[tuple[TransactionCategory, str], Decimal] = defaultdict(Decimal)
    for t in transactions:
        totals[(t.category, account_for(t.category, t.type))] += t.amount

    def lines(category: TransactionCategory, accounts: list[str]) -> list[StatementLine]:
        return [
            StatementLine(account=name, category=category, amount=to_money(totals[(category, name)]))
            for name in accounts
            if totals.get((category, name))
        ]

    income = lines(Income, [*INCOME_ACCOUNTS.values(), OTHER_INCOME_ACCOUNT])
    expenses = lines(Expense, [*EXPENSE_ACCOUNTS.values(), OTHER_EXPENSE_ACCOUNT])
    total_income = sum_money(line.amount for line in income)
    total_expenses = sum_money(line.amount for line in expenses)
    return ProfitAndLoss(
        income=tuple(income),
        expenses=tuple(expenses),
        total_income=total_income,
        total_expenses=total_expenses,
        noi=total_income - total_expenses,
    )


def financial_overview(
    snapshot: PortfolioSnapshot,
    year: int,
    owner_id: str | None = None,
    property_id: str | None = None,
) -> FinancialOverview:
    """
    Owner financial overview for one calendar year.

    Transactions whose property is not part of the snapshot are dropped and
    counted in ``skipped``.
    """
    known: list[Transaction] = []
    skipped = 0
    for t in snapshot.transactions:
        if t.property_id not in snapshot.property_index:
            logger.warning("Financials: skipping transaction %s — unknown property %s", t.id, t.property_id)
            skipped += 1
            continue
        known.append(t)

    scoped = scope_transactions(
        known,
        date_from=date(year, 1, 1),
        date_to=date(year, 12, 31),
        property_id=property_id,
        owner_id=owner_id,
    )
    names = {p.id: p.name for p in snapshot.properties}
    return FinancialOverview(
        year=year,
        summary=summarize(scoped),
        income_breakdown=tuple(breakdown(scoped, Income)),
        expense_breakdown=tuple(breakdown(scoped, Expense)),
        monthly=tuple(monthly_series(scoped, year)),
        properties=tuple(property_financials(scoped, names)),
        skipped=skipped,
    )
