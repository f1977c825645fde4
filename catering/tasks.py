"""
Celery Tasks
Background tasks for exporting bookings to the spreadsheet.
"""

import logging
import time
from datetime import datetime, timezone

from catering.celery_worker import celery_app
from catering.services.excel_manager import ExcelManager

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(OSError,),
    retry_backoff=True
)
def export_bookings_to_excel(self, rows: list) -> dict:
    """
    Export booking rows to the Excel workbook.
    This task runs asynchronously via Celery worker.

    Args:
        rows: Rows built by ``booking_export_row``

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    logger.info(f"Task {task_id}: exporting {len(rows)} bookings")
    start_time = time.time()

    result = ExcelManager.export_bookings(rows)

    elapsed = round(time.time() - start_time, 3)
    result['task_id'] = task_id
    result['processing_time_seconds'] = elapsed

    if result['success']:
        logger.info(f"Task {task_id}: export completed in {elapsed}s")
    else:
        logger.warning(f"Task {task_id}: export failed - {result['message']}")

    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now(timezone.utc).isoformat()
    }


@celery_app.task
def clear_export_file() -> dict:
    """
    Delete the exported workbook (for testing/reset purposes).
    """
    success = ExcelManager.clear_all()
    return {
        'success': success,
        'message': 'Export file cleared' if success else 'Failed to clear export file',
        'timestamp': datetime.now(timezone.utc).isoformat()
    }
