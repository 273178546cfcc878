"""
Settlement actors.

Importing this package registers the actors with the broker.
"""

from jobs.tasks.daily_returns import process_daily_returns
from jobs.tasks.payment_deadlines import check_payment_deadlines


__all__ = ["check_payment_deadlines", "process_daily_returns"]
