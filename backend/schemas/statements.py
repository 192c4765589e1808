from schemas.common import CamelModel, Money


class PeriodTotals(CamelModel):
    count: int
    quantity: Money
    amount: Money

class CounterpartyStats(CamelModel):
    """Current calendar month next to lifetime totals of completed records."""
    monthly: PeriodTotals
    total: PeriodTotals
