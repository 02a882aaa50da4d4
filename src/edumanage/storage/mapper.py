"""Field Mapper: translation between domain entities, native rows and wire payloads.

Every adapter goes through these mappers so that field naming and value
normalization are identical whichever backend is active:

* domain: frozen dataclasses with snake_case attributes and typed values
  (``date``, aware ``datetime``, enums);
* native: snake_case columns/document keys with JSON-friendly values
  (ISO-8601 strings, enum values);
* wire: camelCase JSON payloads used by the HTTP API.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from ..academics.model import Attendance, Event, NewAttendance, NewClass, NewEvent, NewTestResult, SchoolClass, TestResult
from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.validators import coerce_enum
from ..core.enums import AttendanceStatus, InstallmentStatus, NoteCondition, PaymentStatus, ResultStatus, Role
from ..core.exceptions import ValidationError
from ..finance.model import Installment, NewInstallment, NewTeacherPayment, TeacherPayment
from ..publications.model import NewPublicationNote, NewStudentNote, PublicationNote, StudentNote
from ..users.model import NewStudent, NewUser, Student, User

T = TypeVar("T")

_TRUE = {"true", "1", "yes", "on"}


def camelize(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class Field:
    attr: str
    kind: str = "str"
    enum: Optional[Type[Enum]] = None
    column: Optional[str] = None
    wire: Optional[str] = None
    public: bool = True

    @property
    def column_name(self) -> str:
        return self.column or self.attr

    @property
    def wire_name(self) -> str:
        return self.wire or camelize(self.attr)


def _parse(field: Field, raw: Any) -> Any:
    if raw is None:
        return None
    try:
        if field.kind == "str":
            return str(raw)
        if field.kind == "int":
            if isinstance(raw, bool):
                raise ValueError(raw)
            return int(raw)
        if field.kind == "float":
            if isinstance(raw, bool):
                raise ValueError(raw)
            return float(raw)
        if field.kind == "bool":
            if isinstance(raw, bool):
                return raw
            return str(raw).strip().lower() in _TRUE
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid value for {field.wire_name}: {raw!r}")
    if field.kind == "date":
        return parse_iso_date(raw)
    if field.kind == "datetime":
        return parse_iso_datetime(raw)
    if field.kind == "enum":
        return coerce_enum(field.enum, raw, field.wire_name)
    raise TypeError(f"Unknown field kind: {field.kind!r}")


def _dump(field: Field, value: Any) -> Any:
    value = _parse(field, value)
    if value is None:
        return None
    if field.kind in ("date", "datetime"):
        return value.isoformat()
    if field.kind == "enum":
        return value.value
    return value


def _as_mapping(values: Any) -> Dict[str, Any]:
    if dataclasses.is_dataclass(values) and not isinstance(values, type):
        return {f.name: getattr(values, f.name) for f in dataclasses.fields(values)}
    if isinstance(values, Mapping):
        return dict(values)
    raise TypeError(f"Cannot map value of type {type(values)!r}")


class EntityMapper(Generic[T]):
    """Bidirectional translator for one entity.

    ``id_key`` names the identifier in the native shape: ``"id"`` for
    relational rows, ``"_id"`` for documents.
    """

    def __init__(self, entity_cls: Type[T], table: str, fields: Iterable[Field], *, draft_cls: type):
        self.entity_cls = entity_cls
        self.table = table
        self.fields: List[Field] = list(fields)
        self.draft_cls = draft_cls
        self._defaults = {
            f.name: f.default
            for f in dataclasses.fields(entity_cls)
            if f.default is not dataclasses.MISSING
        }
        self._draft_fields = {f.name: f for f in dataclasses.fields(draft_cls)}

    def field(self, attr: str) -> Field:
        for f in self.fields:
            if f.attr == attr:
                return f
        raise KeyError(attr)

    def column(self, attr: str) -> str:
        return self.field(attr).column_name

    def to_domain(self, row: Mapping[str, Any], *, id_key: str = "id") -> T:
        raw_id = row.get(id_key)
        values: Dict[str, Any] = {"id": int(raw_id) if raw_id is not None else None}
        for f in self.fields:
            raw = row.get(f.column_name)
            values[f.attr] = _parse(f, raw) if raw is not None else self._defaults.get(f.attr)
        return self.entity_cls(**values)

    def to_native(self, values: Any, *, id_key: str = "id") -> Dict[str, Any]:
        """Translate an entity, draft or partial ``{attr: value}`` mapping.

        Only attributes present in ``values`` are emitted, so partial updates stay partial.
        """
        source = _as_mapping(values)
        row: Dict[str, Any] = {}
        if source.get("id") is not None:
            row[id_key] = int(source["id"])
        for f in self.fields:
            if f.attr in source:
                row[f.column_name] = _dump(f, source[f.attr])
        return row

    def to_wire(self, entity: T) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": getattr(entity, "id")}
        for f in self.fields:
            if f.public:
                out[f.wire_name] = _dump(f, getattr(entity, f.attr))
        return out

    def from_wire(self, payload: Mapping[str, Any]) -> Any:
        """Build a draft from a camelCase payload; unknown keys are ignored."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        values: Dict[str, Any] = {}
        for f in self.fields:
            draft_field = self._draft_fields.get(f.attr)
            if draft_field is None:
                continue
            raw = payload.get(f.wire_name)
            if raw is None or raw == "":
                has_default = (
                    draft_field.default is not dataclasses.MISSING
                    or draft_field.default_factory is not dataclasses.MISSING
                )
                if not has_default:
                    raise ValidationError(f"{f.wire_name} is required")
                continue
            values[f.attr] = _parse(f, raw)
        return self.draft_cls(**values)


USERS: EntityMapper[User] = EntityMapper(
    User,
    "users",
    [
        Field("username"),
        Field("password", public=False),
        Field("full_name"),
        Field("email"),
        Field("role", "enum", Role),
        Field("grade"),
        Field("join_date", "datetime"),
    ],
    draft_cls=NewUser,
)

STUDENTS: EntityMapper[Student] = EntityMapper(
    Student,
    "students",
    [
        Field("user_id", "int"),
        Field("parent_name"),
        Field("phone"),
        Field("address"),
        Field("date_of_birth", "date"),
    ],
    draft_cls=NewStudent,
)

CLASSES: EntityMapper[SchoolClass] = EntityMapper(
    SchoolClass,
    "classes",
    [
        Field("name"),
        Field("grade"),
        Field("teacher_id", "int"),
        Field("schedule"),
    ],
    draft_cls=NewClass,
)

ATTENDANCE: EntityMapper[Attendance] = EntityMapper(
    Attendance,
    "attendance",
    [
        Field("student_id", "int"),
        Field("class_id", "int"),
        Field("date", "date"),
        Field("status", "enum", AttendanceStatus),
    ],
    draft_cls=NewAttendance,
)

TEST_RESULTS: EntityMapper[TestResult] = EntityMapper(
    TestResult,
    "test_results",
    [
        Field("name"),
        Field("student_id", "int"),
        Field("class_id", "int"),
        Field("date", "date"),
        Field("score", "float"),
        Field("max_score", "float"),
        Field("status", "enum", ResultStatus),
    ],
    draft_cls=NewTestResult,
)

INSTALLMENTS: EntityMapper[Installment] = EntityMapper(
    Installment,
    "installments",
    [
        Field("student_id", "int"),
        Field("amount", "float"),
        Field("due_date", "date"),
        Field("payment_date", "date"),
        Field("status", "enum", InstallmentStatus),
    ],
    draft_cls=NewInstallment,
)

EVENTS: EntityMapper[Event] = EntityMapper(
    Event,
    "events",
    [
        Field("title"),
        Field("description"),
        Field("date", "date"),
        Field("time"),
        Field("target_grades"),
    ],
    draft_cls=NewEvent,
)

TEACHER_PAYMENTS: EntityMapper[TeacherPayment] = EntityMapper(
    TeacherPayment,
    "teacher_payments",
    [
        Field("teacher_id", "int"),
        Field("amount", "float"),
        Field("month"),
        Field("description"),
        Field("payment_date", "date"),
        Field("status", "enum", PaymentStatus),
    ],
    draft_cls=NewTeacherPayment,
)

PUBLICATION_NOTES: EntityMapper[PublicationNote] = EntityMapper(
    PublicationNote,
    "publication_notes",
    [
        Field("title"),
        Field("subject"),
        Field("grade"),
        Field("total_stock", "int"),
        Field("available_stock", "int"),
        Field("low_stock_threshold", "int"),
        Field("last_restocked", "datetime"),
        Field("description"),
    ],
    draft_cls=NewPublicationNote,
)

STUDENT_NOTES: EntityMapper[StudentNote] = EntityMapper(
    StudentNote,
    "student_notes",
    [
        Field("student_id", "int"),
        Field("note_id", "int"),
        Field("date_issued", "date"),
        Field("is_returned", "bool"),
        Field("return_date", "date"),
        Field("condition", "enum", NoteCondition),
        Field("notes"),
    ],
    draft_cls=NewStudentNote,
)

ALL_MAPPERS = (
    USERS,
    STUDENTS,
    CLASSES,
    ATTENDANCE,
    TEST_RESULTS,
    INSTALLMENTS,
    EVENTS,
    TEACHER_PAYMENTS,
    PUBLICATION_NOTES,
    STUDENT_NOTES,
)
