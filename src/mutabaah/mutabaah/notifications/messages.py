"""User-facing notification texts."""

from __future__ import annotations

from typing import Optional

from ..core.enums import RequestKind, ReviewerRole

REPORT_SUBMITTED_TITLE = "Laporan Bulanan Baru"
REPORT_APPROVED_TITLE = "Laporan Bulanan Disetujui"
REPORT_REJECTED_TITLE = "Laporan Bulanan Ditolak"
NEEDS_REVIEW_TITLE = "Validasi Laporan Diperlukan"

_KIND_LABELS = {
    RequestKind.TADARUS: "tadarus",
    RequestKind.MISSED_PRAYER: "sholat",
}


def report_submitted(mentee_name: str, month_key: str) -> str:
    return f"{mentee_name} mengirim laporan bulanan {month_key} dan menunggu tinjauan Anda."


def report_approved(month_key: str, role: ReviewerRole) -> str:
    return f"Laporan bulanan bulan {month_key} telah disetujui oleh {role.value}."


def report_rejected(month_key: str, role: ReviewerRole, notes: Optional[str]) -> str:
    msg = f"Laporan bulanan bulan {month_key} DITOLAK oleh {role.value}."
    if notes and notes.strip():
        msg += f" Catatan: {notes.strip()}"
    return msg


def needs_review(mentee_name: str, role: ReviewerRole) -> str:
    return f"Laporan {mentee_name} telah disetujui oleh {role.value} dan menunggu validasi Anda."


def request_created_title(kind: RequestKind) -> str:
    return f"Pengajuan {_KIND_LABELS[kind]} baru"


def request_created(kind: RequestKind, mentee_name: str, day: str) -> str:
    return f"{mentee_name} mengajukan presensi {_KIND_LABELS[kind]} manual untuk tanggal {day}."


def request_decided_title(kind: RequestKind, approved: bool) -> str:
    return f"Pengajuan {_KIND_LABELS[kind]} {'disetujui' if approved else 'ditolak'}"


def request_decided(kind: RequestKind, day: str, approved: bool, notes: Optional[str]) -> str:
    msg = f"Pengajuan {_KIND_LABELS[kind]} tanggal {day} {'disetujui' if approved else 'ditolak'}."
    if notes and notes.strip():
        msg += f" Catatan: {notes.strip()}"
    return msg
