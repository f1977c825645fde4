"""
Excel File Manager with Concurrency Control

Process-safe spreadsheet export of bookings. Each export upserts rows by
booking reference, so re-exporting a booking replaces its earlier row.

Author: Khalil Bannouri
Version: 1.0.0
"""

from datetime import datetime, timezone
from typing import Any
from pathlib import Path

import pandas as pd
from filelock import FileLock, Timeout

from catering.core.config import get_settings
from catering.models import Booking
from catering.services.pricing import calculate_payment_summary
from catering.services.printing import format_datetime
import logging

settings = get_settings()
logger = logging.getLogger(__name__)

DATA_DIR = Path(settings.data_directory)
BOOKINGS_FILE = DATA_DIR / settings.excel_filename
BOOKINGS_LOCK = DATA_DIR / f"{settings.excel_filename}.lock"

REFERENCE_COLUMN = "Booking Reference"


def _address_line(booking: Booking) -> str:
    if booking.address is None:
        return ""
    parts = [
        booking.address.street,
        booking.address.suburb,
        booking.address.state,
        booking.address.postcode,
    ]
    return ", ".join(part for part in parts if part)


def booking_export_row(booking: Booking) -> dict[str, Any]:
    """Flatten a booking into one spreadsheet row."""
    summary = calculate_payment_summary(booking)
    source = booking.order_source

    return {
        REFERENCE_COLUMN: booking.booking_reference,
        "Order Date": format_datetime(booking.order_date),
        "Order Type": f"{booking.order_type_label} Order",
        "Customer Name": booking.customer_details.name,
        "Customer Email": booking.customer_details.email,
        "Customer Phone": booking.customer_details.phone,
        "People Count": booking.people_count,
        "Delivery Type": booking.delivery_type.value if booking.delivery_type else "",
        "Delivery Date": format_datetime(booking.delivery_date),
        "Delivery Address": _address_line(booking),
        "Menu/Package Name": source.source_name,
        "Service Name": source.service_name,
        "Location Name": source.location_name,
        "Selected Items": "; ".join(item.name for item in booking.selected_items if item.name),
        "Items Count": len(booking.selected_items),
        "Base Price": booking.pricing.base_price,
        "Addons Price": booking.pricing.addons_price,
        "Total Price": summary.total,
        "Deposit Paid": summary.paid,
        "Balance Due": summary.balance,
        "Status": booking.status.value,
        "Payment Status": booking.payment_status.value,
        "Admin Notes": booking.admin_notes,
    }


class ExcelManager:
    """Process-safe Excel file manager."""

    LOCK_TIMEOUT = settings.excel_lock_timeout

    BOOKING_COLUMNS = [
        REFERENCE_COLUMN,
        "Order Date",
        "Order Type",
        "Customer Name",
        "Customer Email",
        "Customer Phone",
        "People Count",
        "Delivery Type",
        "Delivery Date",
        "Delivery Address",
        "Menu/Package Name",
        "Service Name",
        "Location Name",
        "Selected Items",
        "Items Count",
        "Base Price",
        "Addons Price",
        "Total Price",
        "Deposit Paid",
        "Balance Due",
        "Status",
        "Payment Status",
        "Admin Notes",
        "Exported At",
    ]

    @classmethod
    def _ensure_data_dir(cls) -> None:
        """Create data directory if needed."""
        if not DATA_DIR.exists():
            DATA_DIR.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {DATA_DIR}")

    @classmethod
    def _load_or_create_df(cls, file_path: Path, columns: list) -> pd.DataFrame:
        """Load existing file or create new DataFrame."""
        if file_path.exists():
            try:
                return pd.read_excel(file_path, engine="openpyxl", dtype={REFERENCE_COLUMN: str})
            except Exception as e:
                logger.warning(f"Error reading {file_path}: {e}")
                return pd.DataFrame(columns=columns)
        return pd.DataFrame(columns=columns)

    @classmethod
    def export_bookings(cls, rows: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Write booking rows to the workbook with file locking.

        Args:
            rows: Rows built by ``booking_export_row``

        Returns:
            Dict with success, message, count and exported_at
        """
        cls._ensure_data_dir()

        result = {
            "success": False,
            "message": "",
            "count": len(rows),
            "exported_at": None,
        }

        if not rows:
            result["success"] = True
            result["message"] = "No bookings to export"
            return result

        try:
            lock = FileLock(str(BOOKINGS_LOCK), timeout=cls.LOCK_TIMEOUT)

            with lock:
                logger.debug(f"Lock acquired for export of {len(rows)} bookings")

                df = cls._load_or_create_df(BOOKINGS_FILE, cls.BOOKING_COLUMNS)

                export_time = datetime.now(timezone.utc).isoformat()
                new_df = pd.DataFrame(
                    [{**row, "Exported At": export_time} for row in rows],
                    columns=cls.BOOKING_COLUMNS,
                )

                references = set(new_df[REFERENCE_COLUMN].astype(str))
                if not df.empty:
                    df = df[~df[REFERENCE_COLUMN].astype(str).isin(references)]
                    df = pd.concat([df, new_df], ignore_index=True)
                else:
                    df = new_df

                df.to_excel(str(BOOKINGS_FILE), index=False, engine="openpyxl")

                logger.info(f"{len(rows)} bookings exported to Excel")

                result["success"] = True
                result["message"] = f"{len(rows)} bookings exported"
                result["exported_at"] = export_time

            logger.debug("Lock released for booking export")

        except Timeout:
            result["message"] = f"Lock timeout ({cls.LOCK_TIMEOUT}s)"
            logger.error("Lock timeout for booking export")

        except Exception as e:
            result["message"] = str(e)
            logger.exception("Error exporting bookings")

        return result

    @classmethod
    def get_exported_bookings(cls) -> list[dict[str, Any]]:
        """Get all exported booking rows."""
        if not BOOKINGS_FILE.exists():
            return []

        try:
            df = pd.read_excel(BOOKINGS_FILE, engine="openpyxl", dtype={REFERENCE_COLUMN: str})
            return df.to_dict("records")
        except Exception as e:
            logger.error(f"Error reading bookings export: {e}")
            return []

    @classmethod
    def clear_all(cls) -> bool:
        """Delete the workbook and its lock file."""
        try:
            for f in [BOOKINGS_FILE, BOOKINGS_LOCK]:
                if f.exists():
                    f.unlink()
            logger.info("Bookings export cleared")
            return True
        except OSError as e:
            logger.error(f"Error clearing files: {e}")
            return False
