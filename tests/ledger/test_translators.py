from __future__ import annotations

from datetime import date, datetime

import pytest

from src.mutabaah.mutabaah.core.enums import EvidenceSource, RequestKind, RequestStatus
from src.mutabaah.mutabaah.core.exceptions import ValidationError
from src.mutabaah.mutabaah.ledger.factory import EvidenceTranslatorFactory
from src.mutabaah.mutabaah.ledger.translators.attendance import AttendanceTranslator
from src.mutabaah.mutabaah.ledger.translators.manual import ManualRequestTranslator, SelfReportTranslator
from src.mutabaah.mutabaah.ledger.translators.team_session import ScheduledActivityTranslator, TeamSessionTranslator
from src.mutabaah.mutabaah.requests.model import MissedPrayerRequest, TadarusRequest


@pytest.mark.parametrize(
    "source, cls",
    [
        (EvidenceSource.ATTENDANCE, AttendanceTranslator),
        (EvidenceSource.TEAM_SESSION, TeamSessionTranslator),
        (EvidenceSource.SCHEDULED_ACTIVITY, ScheduledActivityTranslator),
        (EvidenceSource.MANUAL_REQUEST, ManualRequestTranslator),
        (EvidenceSource.SELF_REPORT, SelfReportTranslator),
    ],
)
def test_factory_picks_translator_per_source(source, cls):
    translator = EvidenceTranslatorFactory().for_source(source)
    assert type(translator) is cls
    assert translator.source == source


def test_attendance_hadir_counts_as_shalat_berjamaah():
    ev = AttendanceTranslator().translate({"employeeId": "EMP001", "timestamp": "2024-03-05T04:41:00", "status": "Hadir"})

    assert ev.activity_id == "shalat_berjamaah"
    assert ev.date == "2024-03-05"
    assert ev.present is True


def test_attendance_other_status_is_not_present():
    ev = AttendanceTranslator().translate({"employeeId": "EMP001", "date": "2024-03-05", "status": "alpa"})
    assert ev.present is False


@pytest.mark.parametrize(
    "session_type, expected",
    [
        ("KIE", "tepat_waktu_kie"),
        (" doa bersama ", "doa_bersama"),
        ("BBQ", "tadarus"),
        ("Umum", "tadarus"),
        ("Kajian Selasa", "kajian_selasa"),
        ("Pengajian Persyarikatan", "persyarikatan"),
        ("Membaca Al-Quran dan Buku", "baca_alquran_buku"),
        ("infaq", "infaq"),
    ],
)
def test_team_session_vocabulary(session_type, expected):
    ev = TeamSessionTranslator().translate({"employeeId": "E", "sessionType": session_type, "date": "2024-03-05"})
    assert ev.activity_id == expected
    assert ev.source == EvidenceSource.TEAM_SESSION


def test_unknown_session_type_is_passed_through_for_the_merge_to_drop():
    ev = TeamSessionTranslator().translate({"employeeId": "E", "sessionType": "Senam Pagi", "date": "2024-03-05"})
    assert ev.activity_id == "Senam Pagi"


def test_scheduled_activity_present_only_when_hadir():
    t = ScheduledActivityTranslator()
    hadir = t.translate({"employeeId": "E", "activityType": "Kajian Selasa", "activityDate": "2024-03-05", "status": "hadir"})
    izin = t.translate({"employeeId": "E", "activityType": "Kajian Selasa", "activityDate": "2024-03-05", "status": "izin"})

    assert (hadir.activity_id, hadir.present) == ("kajian_selasa", True)
    assert izin.present is False


@pytest.mark.parametrize("payload", [{"date": "2024-03-05"}, {"employeeId": "E"}, {"employeeId": "", "date": "2024-03-05"}])
def test_payload_without_employee_or_date_is_invalid(payload):
    with pytest.raises(ValidationError):
        TeamSessionTranslator().translate(dict(payload, sessionType="KIE"))


def _tadarus(category):
    return TadarusRequest(
        request_id=1,
        mentee_id="EMP001",
        date=date(2024, 3, 5),
        category=category,
        status=RequestStatus.APPROVED,
        requested_at=datetime(2024, 3, 5, 10, 0),
    )


def test_tadarus_request_defaults_to_tadarus():
    ev = ManualRequestTranslator(RequestKind.TADARUS).for_request(_tadarus(""))
    assert (ev.employee_id, ev.activity_id, ev.date, ev.present) == ("EMP001", "tadarus", date(2024, 3, 5), True)
    assert ev.source == EvidenceSource.MANUAL_REQUEST


def test_tadarus_request_uses_session_vocabulary():
    ev = EvidenceTranslatorFactory().for_request_kind(RequestKind.TADARUS).for_request(_tadarus("Kajian Selasa"))
    assert ev.activity_id == "kajian_selasa"


def test_missed_prayer_maps_to_default_prayer_activity():
    req = MissedPrayerRequest(
        request_id=2,
        mentee_id="EMP001",
        date=date(2024, 3, 5),
        prayer_id="Subuh",
        status=RequestStatus.APPROVED,
        requested_at=datetime(2024, 3, 5, 10, 0),
    )
    ev = ManualRequestTranslator(RequestKind.MISSED_PRAYER).for_request(req)
    assert ev.activity_id == "subuh-default"


def test_tahajud_request_maps_to_its_prayer_activity():
    req = MissedPrayerRequest(
        request_id=3,
        mentee_id="EMP001",
        date=date(2024, 3, 6),
        prayer_id="tahajud",
        status=RequestStatus.APPROVED,
        requested_at=datetime(2024, 3, 6, 4, 0),
    )
    ev = ManualRequestTranslator(RequestKind.MISSED_PRAYER).for_request(req)
    assert ev.activity_id == "tahajud-default"


def test_unknown_request_activity_is_rejected():
    with pytest.raises(ValidationError):
        ManualRequestTranslator(RequestKind.TADARUS).for_request(_tadarus("Senam Pagi"))


def test_self_report_accepts_canonical_ids_only():
    t = SelfReportTranslator()
    assert t.translate({"employeeId": "E", "activityId": "infaq", "date": "2024-03-05"}).activity_id == "infaq"
    assert t.resolve_activity("Infaq") is None
