"""Contoh: memakai service layer tanpa Flask.

Mengirim satu batch presensi sesi tim ke ledger lalu membaca bulan berjalan.
"""

import importlib

from config import get_settings_module

from src.mutabaah.mutabaah.common.datetime_utils import month_key_of
from src.mutabaah.mutabaah.container import build_container
from src.mutabaah.mutabaah.core.enums import EvidenceSource


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = container.clock.now().date()
    report = container.ledger_service.ingest(
        EvidenceSource.TEAM_SESSION,
        [
            {"employeeId": "EMP001", "sessionType": "KIE", "date": today.isoformat(), "status": "hadir"},
            {"employeeId": "EMP001", "sessionType": "Doa Bersama", "date": today.isoformat(), "status": "hadir"},
        ],
    )
    print(report.to_dict())

    view = container.ledger_service.month_view(employee_id="EMP001", month_key=month_key_of(today))
    print(view.to_dict())


if __name__ == "__main__":
    main()
