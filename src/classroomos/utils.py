import csv
import os
from datetime import datetime
from typing import Optional

from .database import get_attendance_rows, get_batch_by_id


def export_attendance_to_csv(batch_id: str, date_str: str, directory: Optional[str] = None):
    """Export the attendance roster of a batch on one date to a CSV file."""
    batch = get_batch_by_id(batch_id)
    rows = get_attendance_rows(batch_id, date_str)
    code = batch.internal_name if batch else batch_id
    filename = f"attendance_{code}_{date_str}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    if directory:
        filename = os.path.join(directory, filename)
    with open(filename, 'w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['Student ID', 'Name', 'Punch In', 'Punch Out', 'Status', 'Corrections'])
        for row in rows:
            writer.writerow([row.student_id, row.student_name, row.punch_in or '',
                             row.punch_out or '', row.status, len(row.correction_log)])
    return filename
