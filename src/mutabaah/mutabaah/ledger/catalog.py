from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from ..core.constants import PRAYER_ACTIVITY_SUFFIX, PRAYER_IDS


@dataclass(frozen=True)
class ActivityDefinition:
    activity_id: str
    category: str
    title: str
    monthly_target: int
    trigger: str
    trigger_value: Optional[str] = None


# Triggers: how evidence for the activity normally reaches the ledger.
MANUAL_USER_REPORT = "MANUAL_USER_REPORT"
TEAM_ATTENDANCE = "TEAM_ATTENDANCE"
PRAYER_WAJIB = "PRAYER_WAJIB"
TADARUS_SESSION = "TADARUS_SESSION"
BOOK_READING_REPORT = "BOOK_READING_REPORT"

SELF_REPORTABLE_TRIGGERS = frozenset({MANUAL_USER_REPORT, BOOK_READING_REPORT})

DAILY_ACTIVITIES: Tuple[ActivityDefinition, ...] = (
    # SIDIQ (Integritas)
    ActivityDefinition("infaq", "SIDIQ (Integritas)", "Gemar berinfaq", 1, MANUAL_USER_REPORT),
    ActivityDefinition("jujur", "SIDIQ (Integritas)", "Jujur menyampaikan informasi", 4, MANUAL_USER_REPORT),
    ActivityDefinition("tanggung_jawab", "SIDIQ (Integritas)", "Tanggung jawab terhadap pekerjaan", 1, MANUAL_USER_REPORT),
    # TABLIGH (Teamwork)
    ActivityDefinition("persyarikatan", "TABLIGH (Teamwork)", "Aktif dalam kegiatan persyarikatan", 1, MANUAL_USER_REPORT),
    ActivityDefinition("doa_bersama", "TABLIGH (Teamwork)", "Doa bersama mengawali pekerjaan", 20, TEAM_ATTENDANCE, "Doa Bersama"),
    ActivityDefinition("lima_s", "TABLIGH (Teamwork)", "5S (Salam, Senyum, Sapa, Sopan, Santun)", 20, MANUAL_USER_REPORT),
    # AMANAH (Disiplin)
    ActivityDefinition("shalat_berjamaah", "AMANAH (Disiplin)", "Sholat lima waktu berjamaah", 20, PRAYER_WAJIB),
    ActivityDefinition("penampilan_diri", "AMANAH (Disiplin)", "Menjaga penampilan diri", 20, MANUAL_USER_REPORT),
    ActivityDefinition("tepat_waktu_kie", "AMANAH (Disiplin)", "Tepat waktu menghadiri KIE", 1, TEAM_ATTENDANCE, "KIE"),
    # FATONAH (Belajar)
    ActivityDefinition("tadarus", "FATONAH (Belajar)", "RSIJ bertadarus (berkelompok)", 3, TADARUS_SESSION),
    ActivityDefinition("kajian_selasa", "FATONAH (Belajar)", "Kajian Selasa", 2, MANUAL_USER_REPORT),
    ActivityDefinition("baca_alquran_buku", "FATONAH (Belajar)", "Membaca Al-Quran dan buku", 20, BOOK_READING_REPORT),
)

PRAYER_ACTIVITY_IDS: Tuple[str, ...] = tuple(f"{p}{PRAYER_ACTIVITY_SUFFIX}" for p in PRAYER_IDS)

KNOWN_ACTIVITY_IDS: FrozenSet[str] = frozenset(a.activity_id for a in DAILY_ACTIVITIES) | frozenset(PRAYER_ACTIVITY_IDS)

_BY_ID = {a.activity_id: a for a in DAILY_ACTIVITIES}


def get_activity(activity_id: str) -> Optional[ActivityDefinition]:
    return _BY_ID.get(activity_id)


def prayer_activity_id(prayer_id: str) -> Optional[str]:
    p = (prayer_id or "").strip().lower()
    return f"{p}{PRAYER_ACTIVITY_SUFFIX}" if p in PRAYER_IDS else None
