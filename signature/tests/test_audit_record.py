from __future__ import annotations

import dataclasses

import pytest

from signature.models.audit_record import AuditMetadata, AuditRecord
from signature.models.field import Field, FieldCoordinates, FieldType


def _f(kind: FieldType, page: int = 1, value=None) -> Field:
    return Field(type=kind, coordinates=FieldCoordinates(0, 0, 10, 10, page), value=value)


def _record(fields) -> AuditRecord:
    return AuditRecord.create(pdf_id="doc1", original_hash="a" * 64, signed_hash="b" * 64, fields=fields)


def test_metadata_is_derived_from_fields() -> None:
    rec = _record([_f(FieldType.TEXT, 2, "x"), _f(FieldType.SIGNATURE, 5), _f(FieldType.DATE, 1)])
    assert rec.metadata == AuditMetadata(total_fields=3, has_signature=True, page_count=5)


def test_metadata_of_empty_field_list() -> None:
    assert _record([]).metadata == AuditMetadata(total_fields=0, has_signature=False, page_count=1)


def test_metadata_cannot_be_passed_in() -> None:
    with pytest.raises(TypeError):
        AuditRecord(pdf_id="d", original_hash="a", signed_hash="b", fields=(),
                    metadata=AuditMetadata(9, True, 9))  # type: ignore[call-arg]


def test_only_text_values_are_kept() -> None:
    rec = _record([
        _f(FieldType.TEXT, value="Alice"),
        _f(FieldType.SIGNATURE, value="data:image/png;base64,AAAA"),
        _f(FieldType.RADIO, value="on"),
    ])
    assert [f.value for f in rec.fields] == ["Alice", None, None]
    assert "value" not in rec.to_dict()["fields"][1]


def test_with_id_keeps_derived_metadata() -> None:
    rec = _record([_f(FieldType.SIGNATURE, 3)]).with_id("abc")
    assert rec.id == "abc"
    assert rec.metadata.page_count == 3


def test_record_is_immutable() -> None:
    rec = _record([])
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.pdf_id = "other"  # type: ignore[misc]


def test_verify_integrity_compares_hashes() -> None:
    assert _record([]).verify_integrity()
    same = AuditRecord.create(pdf_id="d", original_hash="c" * 64, signed_hash="c" * 64, fields=[])
    assert not same.verify_integrity()


def test_wire_shape() -> None:
    body = _record([_f(FieldType.TEXT, value="Hi")]).with_id("id1").to_dict()
    assert set(body) == {"id", "pdfId", "originalHash", "signedHash", "fields",
                         "timestamp", "ipAddress", "userAgent", "metadata"}
    assert body["metadata"] == {"totalFields": 1, "hasSignature": False, "pageCount": 1}
    assert body["fields"][0]["coordinates"] == {"x": 0, "y": 0, "width": 10, "height": 10, "page": 1}
