"""Tests for period summaries, time buckets and the report service."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import (
    Bill,
    BillFrequency,
    Granularity,
    Loan,
    LoanPayment,
    LoanStatus,
    SpendingSource,
    Transaction,
    TransactionType,
)
from finboard.domain.report import (
    HOUR_LABELS,
    MONTH_LABELS,
    WEEK_LABELS,
    bills_summary,
    bucket_by_time,
    bucket_label,
    combined_ledger,
    granularity_for_window,
    loans_summary,
    summarize,
)


def _txn(id, type, category, amount, day, currency="USD", bill_id=None):
    return Transaction(
        id=id,
        owner="alice",
        type=type,
        category=category,
        amount=Decimal(amount),
        currency=currency,
        date=day,
        description=category,
        bill_id=bill_id,
    )


def _loan(id, outstanding, emi, status=LoanStatus.ACTIVE, currency="USD"):
    return Loan(
        id=id,
        owner="alice",
        name=f"loan {id}",
        type="personal_loan",
        principal_amount=Decimal("10000"),
        interest_rate=Decimal("10"),
        tenure_months=12,
        start_date=date(2023, 1, 1),
        due_day=5,
        emi_amount=Decimal(emi),
        outstanding_balance=Decimal(outstanding),
        status=status,
        currency=currency,
    )


def _bill(id, amount, due_date, is_active=True, paid_at=None):
    return Bill(
        id=id,
        owner="alice",
        name=f"bill {id}",
        amount=Decimal(amount),
        currency="USD",
        category="Utilities",
        due_date=due_date,
        frequency=BillFrequency.MONTHLY,
        reminder_days=3,
        is_active=is_active,
        paid_at=paid_at,
    )


class TestSummarize:
    def test_totals_and_savings_rate(self):
        summary = summarize(
            [
                _txn(1, TransactionType.INCOME, "Salary", "4000", date(2024, 3, 1)),
                _txn(2, TransactionType.EXPENSE, "Groceries", "1000", date(2024, 3, 2)),
            ]
        )

        assert summary.total_income == Decimal("4000")
        assert summary.total_expenses == Decimal("1000")
        assert summary.net_savings == Decimal("3000")
        assert summary.savings_rate == Decimal("75")

    def test_no_income_means_zero_savings_rate(self):
        summary = summarize([_txn(1, TransactionType.EXPENSE, "Groceries", "50", date(2024, 3, 2))])

        assert summary.savings_rate == 0
        assert summary.net_savings == Decimal("-50")

    def test_empty_input(self):
        summary = summarize([])

        assert summary.total_income == 0
        assert summary.total_expenses == 0
        assert summary.category_breakdown == ()

    def test_categories_sorted_and_truncated(self):
        summary = summarize(
            [
                _txn(1, TransactionType.EXPENSE, "Shopping", "10", date(2024, 3, 2)),
                _txn(2, TransactionType.EXPENSE, "Groceries", "70", date(2024, 3, 2)),
                _txn(3, TransactionType.EXPENSE, "Healthcare", "20", date(2024, 3, 2)),
                _txn(4, TransactionType.INCOME, "Salary", "500", date(2024, 3, 2)),
            ],
            top_n=2,
        )

        assert [item.category for item in summary.category_breakdown] == ["Groceries", "Healthcare"]
        assert summary.category_breakdown[0].percentage == Decimal("70")
        assert summary.total_expenses == Decimal("100")

    def test_window_bounds_are_inclusive(self):
        transactions = [
            _txn(1, TransactionType.EXPENSE, "Groceries", "1", date(2024, 2, 29)),
            _txn(2, TransactionType.EXPENSE, "Groceries", "2", date(2024, 3, 1)),
            _txn(3, TransactionType.EXPENSE, "Groceries", "4", date(2024, 3, 31)),
            _txn(4, TransactionType.EXPENSE, "Groceries", "8", date(2024, 4, 1)),
        ]

        summary = summarize(transactions, date(2024, 3, 1), date(2024, 3, 31))

        assert summary.total_expenses == Decimal("6")

    def test_converts_to_display_currency(self):
        summary = summarize(
            [_txn(1, TransactionType.INCOME, "Salary", "92", date(2024, 3, 1), currency="EUR")],
            converter=CurrencyConverter("USD"),
        )

        assert summary.total_income == Decimal("100")


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2024, 5, 5), date(2024, 5, 5), Granularity.HOUR),
        (date(2024, 5, 1), date(2024, 5, 2), Granularity.WEEK),
        (date(2024, 1, 1), date(2024, 1, 31), Granularity.WEEK),
        (date(2024, 1, 1), date(2024, 2, 1), Granularity.MONTH),
        (date(2024, 1, 1), date(2024, 12, 31), Granularity.MONTH),
    ],
)
def test_granularity_for_window(start, end, expected):
    assert granularity_for_window(start, end) == expected


class TestBuckets:
    def test_label_sets(self):
        assert len(HOUR_LABELS) == 24
        assert HOUR_LABELS[0] == "00:00"
        assert HOUR_LABELS[-1] == "23:00"
        assert WEEK_LABELS == ("Week 1", "Week 2", "Week 3", "Week 4", "Week 5")
        assert MONTH_LABELS[0] == "Jan"
        assert MONTH_LABELS[-1] == "Dec"

    @pytest.mark.parametrize(
        "moment,granularity,label",
        [
            (datetime(2024, 5, 5, 13, 45), Granularity.HOUR, "13:00"),
            (date(2024, 5, 5), Granularity.HOUR, "00:00"),
            (date(2024, 5, 7), Granularity.WEEK, "Week 1"),
            (date(2024, 5, 8), Granularity.WEEK, "Week 2"),
            (date(2024, 5, 31), Granularity.WEEK, "Week 5"),
            (date(2024, 9, 30), Granularity.MONTH, "Sep"),
        ],
    )
    def test_bucket_label(self, moment, granularity, label):
        assert bucket_label(moment, granularity) == label

    def test_every_label_present_even_when_empty(self):
        buckets = bucket_by_time([], Granularity.MONTH)

        assert [bucket.label for bucket in buckets] == list(MONTH_LABELS)
        assert all(bucket.income == 0 and bucket.expenses == 0 for bucket in buckets)

    def test_weekly_buckets(self):
        buckets = bucket_by_time(
            [
                _txn(1, TransactionType.INCOME, "Salary", "100", date(2024, 1, 1)),
                _txn(2, TransactionType.EXPENSE, "Groceries", "10", date(2024, 1, 7)),
                _txn(3, TransactionType.EXPENSE, "Groceries", "20", date(2024, 1, 8)),
                _txn(4, TransactionType.EXPENSE, "Groceries", "40", date(2024, 1, 30)),
            ],
            Granularity.WEEK,
        )

        by_label = {bucket.label: bucket for bucket in buckets}
        assert by_label["Week 1"].income == Decimal("100")
        assert by_label["Week 1"].expenses == Decimal("10")
        assert by_label["Week 2"].expenses == Decimal("20")
        assert by_label["Week 3"].expenses == 0
        assert by_label["Week 5"].expenses == Decimal("40")

    def test_cumulative_totals_never_decrease(self):
        buckets = bucket_by_time(
            [
                _txn(1, TransactionType.EXPENSE, "Groceries", "10", date(2024, 2, 3)),
                _txn(2, TransactionType.EXPENSE, "Groceries", "5", date(2024, 5, 3)),
                _txn(3, TransactionType.INCOME, "Salary", "300", date(2024, 3, 3)),
            ],
            Granularity.MONTH,
            cumulative=True,
        )

        expenses = [bucket.expenses for bucket in buckets]
        assert expenses == sorted(expenses)
        assert expenses[0] == 0
        assert expenses[1] == Decimal("10")
        assert expenses[-1] == Decimal("15")
        assert buckets[-1].income == Decimal("300")


class TestCombinedLedger:
    def test_rows_from_every_source_newest_first(self):
        rows = combined_ledger(
            transactions=[
                _txn(1, TransactionType.INCOME, "Salary", "500", date(2024, 1, 1)),
                _txn(2, TransactionType.EXPENSE, "Utilities", "80", date(2024, 1, 12), bill_id=4),
            ],
            paid_bills=[_bill(4, "80", date(2024, 2, 12), paid_at=datetime(2024, 1, 12, 9))],
            loan_payments=[
                LoanPayment(
                    id=7,
                    owner="alice",
                    loan_id=1,
                    payment_date=date(2024, 1, 20),
                    amount=Decimal("300"),
                    principal_paid=Decimal("250"),
                    interest_paid=Decimal("50"),
                )
            ],
        )

        assert [(row.source, row.id) for row in rows] == [
            (SpendingSource.LOAN, 7),
            (SpendingSource.BILL, 4),
            (SpendingSource.TRANSACTION, 1),
        ]
        assert rows[0].category == "Loans"
        assert rows[1].description == "Bill: bill 4"
        assert rows[2].type == TransactionType.INCOME

    def test_amounts_convert_per_source_currency(self):
        rows = combined_ledger(
            transactions=[_txn(1, TransactionType.EXPENSE, "Groceries", "92", date(2024, 1, 2), currency="EUR")],
            paid_bills=[],
            loan_payments=[
                LoanPayment(
                    id=3,
                    owner="alice",
                    loan_id=5,
                    payment_date=date(2024, 1, 1),
                    amount=Decimal("79"),
                    principal_paid=Decimal("79"),
                    interest_paid=Decimal("0"),
                )
            ],
            converter=CurrencyConverter("USD"),
            loan_currencies={5: "GBP"},
        )

        assert [row.amount for row in rows] == [Decimal("100"), Decimal("100")]


class TestDashboardSummaries:
    def test_bills_summary_counts_active_bills(self):
        today = date(2024, 3, 10)
        bills = [
            _bill(1, "50", date(2024, 3, 12)),
            _bill(2, "70", date(2024, 3, 30)),
            _bill(3, "999", date(2024, 3, 11), is_active=False),
        ]

        summary = bills_summary(bills, today)

        assert summary.upcoming_bills == 1
        assert summary.unpaid_count == 2
        assert summary.total_bills_amount == Decimal("120")

    def test_loans_summary_ignores_closed_loans(self):
        summary = loans_summary(
            [
                _loan(1, "5000", "450"),
                _loan(2, "0", "300", status=LoanStatus.CLOSED),
                _loan(3, "920", "92", currency="EUR"),
            ],
            converter=CurrencyConverter("USD"),
        )

        assert summary.active_loans == 2
        assert summary.total_outstanding == Decimal("6000")
        assert summary.monthly_emi == Decimal("550")


class TestReportService:
    def test_summary_for_january(self, report_service, january_transactions):
        summary = report_service.get_summary(date(2024, 1, 1), date(2024, 1, 31), top_n=3)

        assert summary.total_income == Decimal("5000")
        assert summary.total_expenses == Decimal("335.50")
        assert summary.net_savings == Decimal("4664.50")
        assert [item.category for item in summary.category_breakdown] == [
            "Groceries",
            "Transportation",
            "Dining Out",
        ]

    def test_trend_defaults_to_weeks_for_a_month(self, report_service, january_transactions):
        buckets = report_service.get_trend(date(2024, 1, 1), date(2024, 1, 31))

        assert [bucket.label for bucket in buckets] == list(WEEK_LABELS)
        assert buckets[0].income == Decimal("5000")
        assert buckets[0].expenses == Decimal("120.50")
        assert buckets[4].expenses == Decimal("30")

    def test_ledger_keeps_every_bill_payment(self, report_service, bill_service):
        bill_id = bill_service.create_bill("Power", Decimal("100"), "Utilities", date(2024, 1, 10))
        bill_service.mark_paid(bill_id, paid_at=datetime(2024, 1, 9, 9, 0))
        bill_service.mark_paid(bill_id, paid_at=datetime(2024, 2, 9, 9, 0))

        january = report_service.get_ledger(date(2024, 1, 1), date(2024, 1, 31))
        year = report_service.get_ledger(date(2024, 1, 1), date(2024, 12, 31))

        assert [(row.source, row.description, row.amount) for row in january] == [
            (SpendingSource.BILL, "Bill: Power", Decimal("100")),
        ]
        assert [row.date for row in year] == [date(2024, 2, 9), date(2024, 1, 9)]
        assert all(row.source == SpendingSource.BILL for row in year)

    def test_build_report(self, report_service, budget_service, loan_service, january_transactions):
        budget_service.create_budget("Groceries", Decimal("250"), "monthly")
        loan_service.create_loan("Car", "auto_loan", Decimal("12000"), Decimal("0"), 12, date(2023, 12, 1))

        report = report_service.build_report(date(2024, 1, 1), date(2024, 1, 31), today=date(2024, 1, 15))

        assert report.summary.total_expenses == Decimal("335.50")
        assert report.loans.active_loans == 1
        assert report.loans.monthly_emi == Decimal("1000")
        assert report.bills.upcoming_bills == 0
        assert [item.category for item in report.budgets] == ["Groceries"]
        assert report.budgets[0].spent == Decimal("200.50")
        assert report.alerts[0].category == "Groceries"
        assert [s.title for s in report.suggestions] == [
            "Watch Groceries Spending",
            "Investment Opportunity",
            "Optimize Groceries Spending",
        ]
        assert len(report.trend) == len(WEEK_LABELS)

    def test_report_for_empty_window(self, report_service):
        report = report_service.build_report(date(2024, 1, 1), date(2024, 1, 31))

        assert report.summary.total_income == 0
        assert report.alerts == ()
        assert [s.title for s in report.suggestions] == ["Great Financial Health!"]
