"""
                        Services Module

View logic over booking snapshots plus the boundary clients it talks to.
Boundary clients have Mock/In-memory (development) and Real (production)
implementations.

Services:
    - pricing, status_policy, kitchen, day_summary, filters: pure view logic
    - transitions: validated status and payment changes
    - booking_api: booking service client
    - notifications: Twilio SMS and SendGrid email
    - printing: receipts and kitchen dockets
    - excel_manager: process-safe spreadsheet export
"""

from catering.services.excel_manager import ExcelManager

__all__ = ["ExcelManager"]
