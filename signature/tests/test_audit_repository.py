from __future__ import annotations

from datetime import datetime, timedelta, timezone

from signature.models.audit_record import AuditRecord
from signature.models.field import Field, FieldCoordinates, FieldType

BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _record(pdf_id="doc1", original="o" * 64, signed="s" * 64, minutes=0, fields=()) -> AuditRecord:
    return AuditRecord(
        pdf_id=pdf_id,
        original_hash=original,
        signed_hash=signed,
        fields=tuple(fields),
        timestamp=BASE + timedelta(minutes=minutes),
        ip_address="127.0.0.1",
        user_agent="pytest",
    )


def test_save_assigns_id_and_round_trips(audit_repo) -> None:
    fields = [
        Field(FieldType.TEXT, FieldCoordinates(1, 2, 3, 4, 2), "Alice"),
        Field(FieldType.SIGNATURE, FieldCoordinates(5, 6, 7, 8, 1), "raw-image"),
    ]
    saved = audit_repo.save(_record(fields=fields))

    assert saved.id
    loaded = audit_repo.find_by_id(saved.id)
    assert loaded == saved
    assert loaded.metadata.total_fields == 2
    assert loaded.metadata.has_signature
    assert loaded.metadata.page_count == 2
    assert loaded.fields[1].value is None
    assert loaded.timestamp == BASE


def test_unknown_id_is_none(audit_repo) -> None:
    assert audit_repo.find_by_id("missing") is None


def test_find_recent_is_newest_first_and_bounded(audit_repo) -> None:
    for minute in (5, 1, 9, 3):
        audit_repo.save(_record(pdf_id=f"doc{minute}", minutes=minute))

    recent = audit_repo.find_recent(3)
    assert [r.pdf_id for r in recent] == ["doc9", "doc5", "doc3"]
    assert audit_repo.count() == 4


def test_find_by_hash_matches_either_side(audit_repo) -> None:
    audit_repo.save(_record(original="x" * 64, signed="y" * 64, minutes=1))
    audit_repo.save(_record(original="y" * 64, signed="z" * 64, minutes=2))
    audit_repo.save(_record(original="q" * 64, signed="r" * 64, minutes=3))

    hits = audit_repo.find_by_hash("y" * 64)
    assert [(r.original_hash[0], r.signed_hash[0]) for r in hits] == [("y", "z"), ("x", "y")]


def test_same_document_may_be_signed_repeatedly(audit_repo) -> None:
    audit_repo.save(_record(minutes=1))
    audit_repo.save(_record(minutes=2))
    audit_repo.save(_record(pdf_id="other", minutes=3))

    history = audit_repo.find_by_pdf_id("doc1")
    assert len(history) == 2
    assert history[0].timestamp > history[1].timestamp
    assert len(audit_repo.find_by_hash("o" * 64)) == 3
