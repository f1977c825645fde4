"""
Excel Verification Script

Checks the bookings workbook written by the export task.
Run from project root after `pip install -e .`: python scripts/verify.py

Author: Khalil Bannouri
Version: 1.0.0
"""

import sys
from datetime import datetime

import pandas as pd

from catering.services.excel_manager import BOOKINGS_FILE, ExcelManager, REFERENCE_COLUMN

REQUIRED_COLUMNS = [REFERENCE_COLUMN, "Customer Name", "Total Price", "Deposit Paid", "Balance Due", "Status"]


def verify_excel() -> bool:
    """Verify the exported bookings workbook."""

    print("=" * 60)
    print("BOOKINGS EXPORT VERIFICATION")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"File: {BOOKINGS_FILE}")
    print("=" * 60)

    if not BOOKINGS_FILE.exists():
        print("\nExport file not found!")
        print("   Queue an export first: POST /api/bookings/export")
        return False

    try:
        df = pd.read_excel(BOOKINGS_FILE, engine='openpyxl', dtype={REFERENCE_COLUMN: str})
        print("\nFile loaded successfully")
    except (OSError, ValueError) as e:
        print(f"\nCould not read export file: {e}")
        return False

    ok = True

    print("\nSTATISTICS:")
    print(f"   Bookings: {len(df)}")
    print(f"   Columns: {len(df.columns)}")

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        print(f"\nMissing columns: {missing}")
        ok = False
    else:
        print("\nAll required columns present")

    unexpected = [col for col in df.columns if col not in ExcelManager.BOOKING_COLUMNS]
    if unexpected:
        print(f"Unexpected columns: {unexpected}")

    if REFERENCE_COLUMN in df.columns:
        duplicates = df[REFERENCE_COLUMN].duplicated().sum()
        if duplicates > 0:
            print(f"\n{duplicates} duplicate booking references found!")
            ok = False
        else:
            print("No duplicate booking references")

    if not missing:
        # Balance must equal total minus paid on every row
        drift = (df["Total Price"] - df["Deposit Paid"] - df["Balance Due"]).abs()
        bad_rows = int((drift > 0.01).sum())
        if bad_rows:
            print(f"\n{bad_rows} rows where balance != total - paid")
            ok = False
        else:
            print("Balances consistent")

        active = df[df["Status"] != "cancelled"]
        print("\nREVENUE (active bookings):")
        print(f"   Total: ${active['Total Price'].sum():,.2f}")
        print(f"   Paid: ${active['Deposit Paid'].sum():,.2f}")
        print(f"   Outstanding: ${active['Balance Due'].sum():,.2f}")

    print("\nRECENT BOOKINGS:")
    print("-" * 60)
    if len(df) > 0:
        cols = [c for c in REQUIRED_COLUMNS if c in df.columns]
        print(df[cols].tail(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("VERIFICATION PASSED" if ok else "VERIFICATION FAILED")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    sys.exit(0 if verify_excel() else 1)
