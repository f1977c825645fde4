import pytest

from catering.services import excel_manager
from catering.services.excel_manager import ExcelManager, booking_export_row
from tests.factories import make_booking, make_item


@pytest.fixture
def workbook(tmp_path, monkeypatch):
    monkeypatch.setattr(excel_manager, "DATA_DIR", tmp_path)
    monkeypatch.setattr(excel_manager, "BOOKINGS_FILE", tmp_path / "bookings.xlsx")
    monkeypatch.setattr(excel_manager, "BOOKINGS_LOCK", tmp_path / "bookings.xlsx.lock")
    return tmp_path / "bookings.xlsx"


class TestBookingExportRow:

    def test_row_columns_and_money(self):
        booking = make_booking(
            booking_reference="MC25030010",
            total=150.0,
            deposit_amount=45.0,
            selected_items=[make_item("Butter Chicken"), make_item("Samosa")],
            address={"street": "1 George St", "suburb": "Sydney", "state": "NSW", "postcode": "2000"},
        )

        row = booking_export_row(booking)

        assert list(row) == ExcelManager.BOOKING_COLUMNS[:-1]
        assert row["Booking Reference"] == "MC25030010"
        assert row["Order Type"] == "Regular Order"
        assert row["Selected Items"] == "Butter Chicken; Samosa"
        assert row["Items Count"] == 2
        assert row["Delivery Address"] == "1 George St, Sydney, NSW, 2000"
        assert row["Total Price"] == 150.0
        assert row["Deposit Paid"] == 45.0
        assert row["Balance Due"] == 105.0

    def test_custom_order_without_address(self):
        booking = make_booking(order_source={"source_type": "customOrder"})

        row = booking_export_row(booking)

        assert row["Order Type"] == "Custom Order"
        assert row["Delivery Address"] == ""


class TestExcelManager:

    def test_export_and_read_back(self, workbook):
        rows = [booking_export_row(make_booking(status=s)) for s in ("pending", "confirmed")]

        result = ExcelManager.export_bookings(rows)
        exported = ExcelManager.get_exported_bookings()

        assert result["success"] is True
        assert result["count"] == 2
        assert workbook.exists()
        assert [r["Status"] for r in exported] == ["pending", "confirmed"]
        assert all(r["Exported At"] for r in exported)

    def test_reexport_replaces_rows_by_reference(self, workbook):
        booking = make_booking(booking_reference="MC25030020", status="pending")
        other = make_booking(booking_reference="MC25030021")
        ExcelManager.export_bookings([booking_export_row(booking), booking_export_row(other)])

        updated = booking.model_copy(update={"status": "confirmed"})
        ExcelManager.export_bookings([booking_export_row(updated)])

        exported = ExcelManager.get_exported_bookings()
        by_ref = {r["Booking Reference"]: r for r in exported}
        assert len(exported) == 2
        assert by_ref["MC25030020"]["Status"] == "confirmed"

    def test_empty_export_writes_nothing(self, workbook):
        result = ExcelManager.export_bookings([])

        assert result["success"] is True
        assert not workbook.exists()

    def test_clear_all(self, workbook):
        ExcelManager.export_bookings([booking_export_row(make_booking())])

        assert ExcelManager.clear_all() is True
        assert not workbook.exists()
        assert ExcelManager.get_exported_bookings() == []


class TestExportTask:

    def test_task_runs_locally(self, workbook):
        from catering.tasks import export_bookings_to_excel

        rows = [booking_export_row(make_booking())]

        result = export_bookings_to_excel.apply(args=[rows]).get()

        assert result["success"] is True
        assert "processing_time_seconds" in result
        assert workbook.exists()
