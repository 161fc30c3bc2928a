from .audit_record import AuditMetadata, AuditRecord
from .field import Field, FieldCoordinates, FieldType
from .sign_request import SignRequest, SignResult

__all__ = [
    "AuditMetadata",
    "AuditRecord",
    "Field",
    "FieldCoordinates",
    "FieldType",
    "SignRequest",
    "SignResult",
]
