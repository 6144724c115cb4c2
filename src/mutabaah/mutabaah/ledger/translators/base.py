from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from ...core.enums import EvidenceSource
from ...core.exceptions import ValidationError
from ..catalog import KNOWN_ACTIVITY_IDS
from ..model import Evidence

# Session / scheduled-activity vocabulary shared by several producers.
SESSION_VOCABULARY = {
    "kie": "tepat_waktu_kie",
    "doa bersama": "doa_bersama",
    "bbq": "tadarus",
    "umum": "tadarus",
    "tadarus": "tadarus",
    "kajian selasa": "kajian_selasa",
    "pengajian persyarikatan": "persyarikatan",
    "persyarikatan": "persyarikatan",
    "membaca al-quran dan buku": "baca_alquran_buku",
    "baca alquran buku": "baca_alquran_buku",
}

PRESENT_STATUS = "hadir"


def pick(payload: Mapping[str, Any], *names: str) -> Any:
    for n in names:
        if payload.get(n) not in (None, ""):
            return payload[n]
    return None


class EvidenceTranslator(ABC):
    """Strategy Pattern: map one producer's vocabulary onto ledger evidence."""

    source: EvidenceSource

    @abstractmethod
    def resolve_activity(self, ref: Optional[str]) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def translate(self, payload: Mapping[str, Any]) -> Evidence:
        """Build evidence from a producer payload.

        Raises ValidationError when the payload lacks an employee or a date.
        An unresolvable activity is passed through as-is so the merge drops
        and logs it.
        """

        raise NotImplementedError

    def _evidence(self, payload: Mapping[str, Any], *, activity_ref: Optional[str], date_value: Any, present: bool) -> Evidence:
        employee_id = pick(payload, "employeeId", "employee_id", "userId", "user_id")
        if employee_id is None:
            raise ValidationError("employeeId wajib diisi")
        if date_value in (None, ""):
            raise ValidationError("Tanggal wajib diisi")

        resolved = self.resolve_activity(activity_ref)
        return Evidence(
            employee_id=str(employee_id),
            activity_id=resolved or str(activity_ref or ""),
            date=date_value,
            present=bool(present),
            source=self.source,
        )


def canonical(ref: Optional[str]) -> Optional[str]:
    r = (ref or "").strip()
    return r if r in KNOWN_ACTIVITY_IDS else None


def from_session_vocabulary(ref: Optional[str]) -> Optional[str]:
    return canonical(ref) or SESSION_VOCABULARY.get((ref or "").strip().lower())


def present_flag(payload: Mapping[str, Any]) -> bool:
    if "present" in payload and payload["present"] is not None:
        return bool(payload["present"])
    status = payload.get("status")
    if status is not None:
        return str(status).strip().lower() == PRESENT_STATUS
    return True


def date_part(value: Any) -> Any:
    """Keep the YYYY-MM-DD part of a timestamp string."""

    if isinstance(value, str) and len(value) > 10 and value[10] in ("T", " "):
        return value[:10]
    return value
