"""
Bill Service.

Calendar views over one owner's bills (a day, a month, the days of a
month that have something due, month totals) and the paid toggle.
Everything reads and writes through the sync facade.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from billtracker.logger import StructuredLogger
from billtracker.models.bill import Bill, BillUpdate
from billtracker.models.service_models import MonthSummary, ServiceResult
from billtracker.services.base_service import BaseService
from billtracker.services.sync_service import SyncService


class BillService(BaseService):
    """Calendar queries and bill status changes for a single owner."""

    def __init__(self, sync: SyncService, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._sync = sync

    # ------------------------------------------------------------------
    # Calendar queries
    # ------------------------------------------------------------------

    def bills_on_day(self, owner_id: str, day: date) -> list[Bill]:
        return [bill for bill in self._sync.list_bills(owner_id) if bill.due_date == day]

    def bills_in_month(self, owner_id: str, year: int, month: int) -> list[Bill]:
        return [
            bill
            for bill in self._sync.list_bills(owner_id)
            if bill.due_date.year == year and bill.due_date.month == month
        ]

    def days_with_bills(self, owner_id: str, year: int, month: int) -> list[int]:
        """Distinct days of the month with at least one bill, ascending."""
        return sorted({bill.due_date.day for bill in self.bills_in_month(owner_id, year, month)})

    def month_summary(self, owner_id: str, year: int, month: int) -> MonthSummary:
        bills = self.bills_in_month(owner_id, year, month)
        paid = sum((bill.amount for bill in bills if bill.paid), Decimal("0"))
        unpaid = sum((bill.amount for bill in bills if not bill.paid), Decimal("0"))
        return MonthSummary(
            year=year,
            month=month,
            count=len(bills),
            total_amount=paid + unpaid,
            paid_amount=paid,
            unpaid_amount=unpaid,
        )

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def toggle_paid(self, owner_id: str, bill_id: str) -> ServiceResult[Bill]:
        """Flip the paid flag of one of *owner_id*'s bills."""
        current = next(
            (bill for bill in self._sync.list_bills(owner_id) if bill.id == bill_id),
            None,
        )
        if current is None:
            return ServiceResult.not_found("Bill")

        result = self._sync.update_bill(bill_id, BillUpdate(paid=not current.paid))
        if result.success:
            self._logger.info(
                "Bill %s marked %s.", bill_id, "paid" if not current.paid else "unpaid"
            )
        return result
