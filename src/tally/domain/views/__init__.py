"""View models for service outputs."""

from tally.domain.views.net_worth import (
    CurrentBalanceView,
    AccountBalanceView,
    NetWorthView,
    NetWorthStats,
)

__all__ = [
    "CurrentBalanceView",
    "AccountBalanceView",
    "NetWorthView",
    "NetWorthStats",
]
