from app.core.money import to_decimal
from app.services.stats import category_totals, monthly_totals


def _seed(add_expense):
    add_expense(amount="100.50", category="Food", date="2024-01-10")
    add_expense(amount="50.00", category="Transport", date="2024-01-15")
    add_expense(amount="20.00", category="Food", date="2024-02-01")


def test_monthly_totals_are_chronological(session, add_expense):
    add_expense(amount="1.00", category="Other", date="2023-12-31")
    _seed(add_expense)

    months = [(m.month, str(to_decimal(m.total_minor)), m.count) for m in monthly_totals(session)]
    assert months == [
        ("2023-12", "1.00", 1),
        ("2024-01", "150.50", 2),
        ("2024-02", "20.00", 1),
    ]


def test_category_totals(session, add_expense):
    _seed(add_expense)

    by_category = {c.category: (c.total_minor, c.count) for c in category_totals(session)}
    assert by_category == {"Food": (12050, 2), "Transport": (5000, 1)}


def test_sums_do_not_drift(session, add_expense):
    for _ in range(10):
        add_expense(amount="0.10", category="Food", date="2024-03-05")

    assert monthly_totals(session)[0].total_minor == 100
    assert str(to_decimal(category_totals(session)[0].total_minor)) == "1.00"


def test_empty_store_has_no_buckets(session):
    assert monthly_totals(session) == []
    assert category_totals(session) == []
