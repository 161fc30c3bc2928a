# signature/logic/coordinate_validator.py
"""Request validation for the sign operation.

A request is accepted only as a whole: one malformed field rejects the batch
before any document is loaded.
"""
from __future__ import annotations

import math
from numbers import Real
from typing import Any, List, Mapping, Sequence

from ..exceptions.errors import InvalidRequestError
from ..models.field import Field, FieldType, raw_coordinates
from ..models.sign_request import SignRequest


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_coordinates(candidate: Any) -> bool:
    """True iff *candidate* is a well-formed coordinate mapping."""
    if not isinstance(candidate, Mapping):
        return False
    keys = ("x", "y", "width", "height", "page")
    if not all(_is_number(candidate.get(k)) for k in keys):
        return False
    return (
        candidate["x"] >= 0
        and candidate["y"] >= 0
        and candidate["width"] > 0
        and candidate["height"] > 0
        and candidate["page"] >= 1
    )


def find_invalid_fields(raw_fields: Sequence[Any]) -> List[int]:
    """Indices of entries with an unknown type or invalid coordinates."""
    invalid: List[int] = []
    for idx, raw in enumerate(raw_fields):
        if not isinstance(raw, Mapping):
            invalid.append(idx)
        elif FieldType.parse(raw.get("type")) is None:
            invalid.append(idx)
        elif not validate_coordinates(raw_coordinates(raw)):
            invalid.append(idx)
    return invalid


def parse_sign_request(payload: Any) -> SignRequest:
    """
    Checks the request shape and every field, then builds a SignRequest.

    Raises:
        InvalidRequestError: pdfId missing, fields not a list, or any field invalid
    """
    if not isinstance(payload, Mapping):
        raise InvalidRequestError("Request body must be a JSON object")

    pdf_id = payload.get("pdfId")
    raw_fields = payload.get("fields")
    if not pdf_id or not isinstance(raw_fields, list):
        raise InvalidRequestError(
            "Missing required fields: pdfId and fields array are required"
        )

    invalid = find_invalid_fields(raw_fields)
    if invalid:
        indices = ", ".join(str(i) for i in invalid)
        raise InvalidRequestError(
            f"Invalid coordinates for {len(invalid)} field(s) (indices: {indices})"
        )

    signature_image = payload.get("signatureImage")
    if signature_image is not None and not isinstance(signature_image, str):
        raise InvalidRequestError("signatureImage must be a data URI string")

    return SignRequest(
        pdf_id=str(pdf_id),
        fields=tuple(Field.from_dict(raw) for raw in raw_fields),
        signature_image=signature_image or None,
    )
