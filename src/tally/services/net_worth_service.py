"""Net worth service: read-only views over accounts and balance snapshots."""

from datetime import date, timedelta
from typing import Callable, Iterator, Optional, Union

from tally.core.dates import DateLike, add_months, month_end, parse_iso_date, today_in
from tally.core.exceptions import NotFoundError, ValidationError
from tally.domain.models import Account, Granularity
from tally.domain.views import (
    AccountBalanceView,
    CurrentBalanceView,
    NetWorthStats,
    NetWorthView,
)
from tally.repositories.protocols import AccountRepository, BalanceRepository


class NetWorthSeries:
    """
    Net worth sampled over a date range.

    Nothing is read until iteration starts, and every iteration reads the
    store again, so the same series object can be replayed after new
    snapshots are recorded. Points are in ascending date order.
    """

    def __init__(
        self,
        service: "NetWorthService",
        start: Optional[date],
        end: date,
        granularity: Granularity,
    ):
        self.start = start
        self.end = end
        self.granularity = granularity
        self._service = service

    def __iter__(self) -> Iterator[NetWorthView]:
        accounts = self._service._active_accounts()
        for point in self._service._sample_dates(accounts, self.start, self.end, self.granularity):
            yield self._service._net_worth_for(accounts, point)


class NetWorthService:
    """
    Derives balances and net worth from the ledger.

    Only active accounts count towards net worth. Liabilities are subtracted
    by magnitude, so a loan recorded as 500 or -500 lowers net worth by 500.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        balance_repo: BalanceRepository,
        timezone: str = "Europe/London",
        clock: Optional[Callable[[], date]] = None,
    ):
        self._account_repo = account_repo
        self._balance_repo = balance_repo
        self._clock = clock or (lambda: today_in(timezone))

    def today(self) -> date:
        return self._clock()

    def current_balance(self, account_id: str) -> CurrentBalanceView:
        """Latest balance on or before today; empty view when nothing is recorded."""
        if not self._account_repo.get_by_id(account_id):
            raise NotFoundError("Account", account_id)
        entry = self._balance_repo.latest_on_or_before(account_id, self.today())
        if entry is None:
            return CurrentBalanceView(account_id=account_id)
        return CurrentBalanceView(
            account_id=account_id,
            balance=entry.balance,
            as_of=entry.date,
            entry_id=entry.entry_id,
        )

    def list_account_balances(self) -> list[AccountBalanceView]:
        """Active accounts with their most recent snapshot."""
        return [
            AccountBalanceView(
                account=account,
                latest=self._balance_repo.latest_for_account(account.account_id),
            )
            for account in self._active_accounts()
        ]

    def net_worth_as_of(self, as_of: DateLike) -> NetWorthView:
        """
        Net worth on a date from each active account's latest snapshot.

        Accounts with no snapshot on or before the date are left out of the
        sum and reported in ``excluded_account_ids``.
        """
        as_of_date = parse_iso_date(as_of, "as_of")
        return self._net_worth_for(self._active_accounts(), as_of_date)

    def net_worth_series(
        self,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
        granularity: Union[Granularity, str] = Granularity.SNAPSHOT,
    ) -> NetWorthSeries:
        """
        Net worth at each sample point in [start, end].

        ``start`` defaults to the earliest snapshot and ``end`` to today.
        Inactive accounts are left out of every point, as they are for
        ``net_worth_as_of``.
        """
        try:
            granularity = Granularity(granularity)
        except ValueError as exc:
            raise ValidationError(f"Unknown granularity: {granularity!r}") from exc
        start_date = parse_iso_date(start, "start") if start is not None else None
        end_date = parse_iso_date(end, "end") if end is not None else self.today()
        if start_date and start_date > end_date:
            raise ValidationError("start must not be after end")
        return NetWorthSeries(self, start_date, end_date, granularity)

    def net_worth_stats(self, today: Optional[DateLike] = None) -> NetWorthStats:
        """Year-to-date, one-year and all-time figures over the snapshot history."""
        today_date = parse_iso_date(today, "today") if today is not None else self.today()
        points = list(self.net_worth_series(end=today_date))
        if not points:
            return NetWorthStats(all_time_high_date=today_date)

        current = points[-1].net_worth

        year_start = date(today_date.year, 1, 1)
        ytd_base = next((p for p in points if p.as_of >= year_start), points[0]).net_worth
        one_year_ago = add_months(today_date, -12)
        year_base = next((p for p in points if p.as_of >= one_year_ago), points[0]).net_worth

        high = points[0]
        for point in points[1:]:
            if point.net_worth > high.net_worth:
                high = point

        avg_change = 0.0
        if len(points) > 1:
            avg_change = (points[-1].net_worth - points[0].net_worth) / (len(points) - 1)

        return NetWorthStats(
            current_net_worth=current,
            ytd_change=current - ytd_base,
            ytd_change_percent=_percent_change(current, ytd_base),
            one_year_return=current - year_base,
            one_year_return_percent=_percent_change(current, year_base),
            monthly_avg_change=round(avg_change, 2),
            all_time_high=high.net_worth,
            all_time_high_date=high.as_of,
        )

    def _active_accounts(self) -> list[Account]:
        return self._account_repo.list_all(is_active=True)

    def _net_worth_for(self, accounts: list[Account], as_of: date) -> NetWorthView:
        view = NetWorthView(as_of=as_of)
        for account in accounts:
            entry = self._balance_repo.latest_on_or_before(account.account_id, as_of)
            if entry is None:
                view.excluded_account_ids.append(account.account_id)
                continue
            if account.is_liability:
                view.liabilities += abs(entry.balance)
            else:
                view.assets += entry.balance
            view.included_account_ids.append(account.account_id)
        view.net_worth = view.assets - view.liabilities
        return view

    def _sample_dates(
        self,
        accounts: list[Account],
        start: Optional[date],
        end: date,
        granularity: Granularity,
    ) -> Iterator[date]:
        account_ids = [a.account_id for a in accounts]
        if granularity == Granularity.SNAPSHOT:
            yield from self._balance_repo.distinct_dates(account_ids, start, end)
            return

        if start is None:
            recorded = self._balance_repo.distinct_dates(account_ids, None, end)
            if not recorded:
                return
            start = recorded[0]

        if granularity == Granularity.DAILY:
            cursor = start
            while cursor <= end:
                yield cursor
                cursor += timedelta(days=1)
            return

        cursor = month_end(start)
        last = None
        while cursor <= end:
            yield cursor
            last = cursor
            cursor = month_end(cursor + timedelta(days=1))
        if last != end:
            yield end


def _percent_change(current: float, base: float) -> float:
    if base == 0:
        return 0.0
    return round((current - base) / abs(base) * 100, 1)
