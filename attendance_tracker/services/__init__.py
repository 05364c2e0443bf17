"""Attendance core: issuance, check-in and read-side reports."""
from attendance_tracker.services.checkin import CheckInService
from attendance_tracker.services.issuance import TokenIssuer
from attendance_tracker.services.ledger import fan_out_pending
from attendance_tracker.services.reports import AttendanceReports

__all__ = ["CheckInService", "TokenIssuer", "fan_out_pending", "AttendanceReports"]
