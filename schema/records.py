"""
Record Shapes for the Pregnancy Dataset.

Defines the entity tags used to key every configuration table and the
record shapes that flow through validation and filtering.

Hierarchy:
    Client -> Pregnancy -> Birth -> Child
                        -> CareAfter
                        -> CareAfterPhone

Records stay plain dicts (they are read from and written back to JSON).
All shapes are declared with ``total=False``: an optional field is either
present in the mapping or absent, and the filters only ever copy keys that
are present.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict


class EntityType(Enum):
    """Entity kinds in the client hierarchy."""
    CLIENT = "client"
    PREGNANCY = "pregnancy"
    BIRTH = "birth"
    CHILD = "child"
    CARE_AFTER = "care_after"
    CARE_AFTER_PHONE = "care_after_phone"


# Open-ended key/value payload attached to pregnancies, births, children
# and after-care visits.
DataEncr = Dict[str, Any]


class ChildRecord(TypedDict, total=False):
    id: Any
    id_birth: Any
    date_birth: Any
    data_encr: DataEncr
    created_at: Any
    updated_at: Any
    deleted_at: Any
    created_by: Any
    updated_by: Any
    in_dashboard: Any
    pregnancy_id: Any
    client_id: Any


class BirthRecord(TypedDict, total=False):
    id: Any
    id_pregnancy: Any
    data_encr: DataEncr
    children: List[ChildRecord]


class CareAfterRecord(TypedDict, total=False):
    id: Any
    id_pregnancy: Any
    data_encr: DataEncr
    date_start: Any
    date_end: Any


class CareAfterPhoneRecord(TypedDict, total=False):
    id: Any
    id_user: Any
    id_pregnancy: Any
    date_start: Any
    date_end: Any
    is_breast_feeding: Any


class PregnancyRecord(TypedDict, total=False):
    id: Any
    id_client: Any
    data_encr: DataEncr
    expected_birth_date: Any
    birth: Optional[BirthRecord]
    cares_after: List[CareAfterRecord]
    cares_after_phone: List[CareAfterPhoneRecord]


class ClientRecord(TypedDict, total=False):
    id: Any
    pregnancies: List[PregnancyRecord]


def record_id(record: Any) -> Any:
    """Return the ``id`` of a record, or None when the record is not a mapping."""
    if isinstance(record, dict):
        return record.get("id")
    return None
