"""
In‑memory entity store for clients, health programs and enrollments.

``HealthSystemStore`` owns three insertion‑ordered collections and
exposes lookups, relational accessors (a client with its enrollments
and programs, a program with its enrollments and clients), client
search, and create/update/delete operations.  Deleting a client or a
program also removes every enrollment that references it.

Absence is never an exception: lookups, updates and enrollments
return ``None`` and deletes return ``False`` when the referenced id
does not exist.  The store performs no field validation; that is the
job of the request schemas.

Updates are applied through explicit per‑entity patch functions
(``patch_client``, ``patch_program``, ``patch_enrollment``).  Only the
fields listed in the corresponding ``*_PATCHABLE_FIELDS`` tuple can
change; generated fields and enrollment references are ignored.

The store is an ordinary object: the application creates one at
startup and hands it to request handlers through a dependency.  All
operations are synchronous and run to completion, so calling them from
``async`` handlers on a single event loop serializes them.  There is
no locking; concurrent writers get last‑write‑wins.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from .storage import SnapshotError, SnapshotStorage


logger = logging.getLogger(__name__)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    WITHDRAWN = "withdrawn"


@dataclass
class Client:
    id: str
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    contact_number: str
    address: str
    created_at: datetime
    updated_at: datetime
    email: Optional[str] = None
    medical_history: Optional[str] = None


@dataclass
class HealthProgram:
    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Enrollment:
    id: str
    client_id: str
    program_id: str
    enrollment_date: datetime
    status: EnrollmentStatus
    created_at: datetime
    updated_at: datetime
    notes: Optional[str] = None


@dataclass
class EnrollmentWithProgram:
    enrollment: Enrollment
    program: Optional[HealthProgram]


@dataclass
class EnrollmentWithClient:
    enrollment: Enrollment
    client: Optional[Client]


@dataclass
class ClientWithEnrollments:
    client: Client
    enrollments: List[EnrollmentWithProgram]


@dataclass
class ProgramWithEnrollments:
    program: HealthProgram
    enrollments: List[EnrollmentWithClient]


CLIENT_PATCHABLE_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "contact_number",
    "email",
    "address",
    "medical_history",
)
PROGRAM_PATCHABLE_FIELDS = ("name", "description")
ENROLLMENT_PATCHABLE_FIELDS = ("status", "notes", "enrollment_date")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_date(value: Any) -> date:
    """Accept a ``date`` or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def to_datetime(value: Any) -> datetime:
    """Accept a ``datetime`` or an ISO 8601 string; naive values are taken as UTC."""
    if not isinstance(value, datetime):
        text = str(value)
        # fromisoformat does not accept a trailing "Z" before Python 3.11
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def patch_client(client: Client, changes: Mapping[str, Any]) -> None:
    """Copy patchable fields present in ``changes`` onto ``client``."""
    for name in CLIENT_PATCHABLE_FIELDS:
        if name not in changes:
            continue
        value = changes[name]
        if name == "gender":
            value = Gender(value)
        elif name == "date_of_birth":
            value = to_date(value)
        setattr(client, name, value)


def patch_program(program: HealthProgram, changes: Mapping[str, Any]) -> None:
    """Copy patchable fields present in ``changes`` onto ``program``."""
    for name in PROGRAM_PATCHABLE_FIELDS:
        if name in changes:
            setattr(program, name, changes[name])


def patch_enrollment(enrollment: Enrollment, changes: Mapping[str, Any]) -> None:
    """Copy patchable fields present in ``changes`` onto ``enrollment``."""
    for name in ENROLLMENT_PATCHABLE_FIELDS:
        if name not in changes:
            continue
        value = changes[name]
        if name == "status":
            value = EnrollmentStatus(value)
        elif name == "enrollment_date":
            value = to_datetime(value)
        setattr(enrollment, name, value)


def _touch(entity: Any) -> None:
    # updated_at never moves backwards, even if the wall clock does
    entity.updated_at = max(utcnow(), entity.updated_at)


class HealthSystemStore:
    """Owner of the client, program and enrollment collections.

    Parameters
    ----------
    storage : Optional[SnapshotStorage]
        When given, every mutation writes the resulting state to it
        before taking effect, and ``load`` restores state from it.
    """

    def __init__(self, storage: Optional[SnapshotStorage] = None) -> None:
        self._storage = storage
        self._clients: Dict[str, Client] = {}
        self._programs: Dict[str, HealthProgram] = {}
        self._enrollments: Dict[str, Enrollment] = {}

    # ------------------------------------------------------------------
    # Collections and lookups
    # ------------------------------------------------------------------

    @property
    def clients(self) -> List[Client]:
        return list(self._clients.values())

    @property
    def programs(self) -> List[HealthProgram]:
        return list(self._programs.values())

    @property
    def enrollments(self) -> List[Enrollment]:
        return list(self._enrollments.values())

    def is_empty(self) -> bool:
        return not (self._clients or self._programs or self._enrollments)

    def get_client_by_id(self, client_id: str) -> Optional[Client]:
        return self._clients.get(client_id)

    def get_program_by_id(self, program_id: str) -> Optional[HealthProgram]:
        return self._programs.get(program_id)

    def get_enrollment_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        return self._enrollments.get(enrollment_id)

    # ------------------------------------------------------------------
    # Relational accessors
    # ------------------------------------------------------------------

    def get_client_with_programs(self, client_id: str) -> Optional[ClientWithEnrollments]:
        """Return the client with all of its enrollments, each paired with its program.

        Enrollments of every status are included; callers split active
        and past enrollments themselves.
        """
        client = self.get_client_by_id(client_id)
        if client is None:
            return None
        enrollments = [
            EnrollmentWithProgram(enrollment=e, program=self.get_program_by_id(e.program_id))
            for e in self._enrollments.values()
            if e.client_id == client_id
        ]
        return ClientWithEnrollments(client=client, enrollments=enrollments)

    def get_program_with_clients(self, program_id: str) -> Optional[ProgramWithEnrollments]:
        """Return the program with all of its enrollments, each paired with its client."""
        program = self.get_program_by_id(program_id)
        if program is None:
            return None
        enrollments = [
            EnrollmentWithClient(enrollment=e, client=self.get_client_by_id(e.client_id))
            for e in self._enrollments.values()
            if e.program_id == program_id
        ]
        return ProgramWithEnrollments(program=program, enrollments=enrollments)

    def search_clients(self, term: Optional[str]) -> List[Client]:
        """Return clients matching ``term``.

        Names and email are matched case‑insensitively, the contact
        number case‑sensitively.  An empty or missing term returns
        every client.
        """
        if not term:
            return self.clients
        lowered = term.lower()
        return [
            c
            for c in self._clients.values()
            if lowered in c.first_name.lower()
            or lowered in c.last_name.lower()
            or (c.email is not None and lowered in c.email.lower())
            or term in c.contact_number
        ]

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def add_client(self, data: Mapping[str, Any]) -> Client:
        now = utcnow()
        client = Client(
            id=self._new_id(self._clients),
            first_name=data["first_name"],
            last_name=data["last_name"],
            date_of_birth=to_date(data["date_of_birth"]),
            gender=Gender(data["gender"]),
            contact_number=data["contact_number"],
            address=data["address"],
            email=data.get("email"),
            medical_history=data.get("medical_history"),
            created_at=now,
            updated_at=now,
        )
        self._commit(clients={**self._clients, client.id: client})
        return client

    def update_client(self, client_id: str, changes: Mapping[str, Any]) -> Optional[Client]:
        current = self._clients.get(client_id)
        if current is None:
            return None
        updated = dataclasses.replace(current)
        patch_client(updated, changes)
        _touch(updated)
        self._commit(clients={**self._clients, client_id: updated})
        return updated

    def delete_client(self, client_id: str) -> bool:
        if client_id not in self._clients:
            return False
        clients = {k: v for k, v in self._clients.items() if k != client_id}
        enrollments = self._enrollments_without(lambda e: e.client_id == client_id)
        self._commit(clients=clients, enrollments=enrollments)
        return True

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def add_program(self, data: Mapping[str, Any]) -> HealthProgram:
        now = utcnow()
        program = HealthProgram(
            id=self._new_id(self._programs),
            name=data["name"],
            description=data["description"],
            created_at=now,
            updated_at=now,
        )
        self._commit(programs={**self._programs, program.id: program})
        return program

    def update_program(self, program_id: str, changes: Mapping[str, Any]) -> Optional[HealthProgram]:
        current = self._programs.get(program_id)
        if current is None:
            return None
        updated = dataclasses.replace(current)
        patch_program(updated, changes)
        _touch(updated)
        self._commit(programs={**self._programs, program_id: updated})
        return updated

    def delete_program(self, program_id: str) -> bool:
        if program_id not in self._programs:
            return False
        programs = {k: v for k, v in self._programs.items() if k != program_id}
        enrollments = self._enrollments_without(lambda e: e.program_id == program_id)
        self._commit(programs=programs, enrollments=enrollments)
        return True

    # ------------------------------------------------------------------
    # Enrollments
    # ------------------------------------------------------------------

    def find_active_enrollment(self, client_id: str, program_id: str) -> Optional[Enrollment]:
        for enrollment in self._enrollments.values():
            if (
                enrollment.client_id == client_id
                and enrollment.program_id == program_id
                and enrollment.status == EnrollmentStatus.ACTIVE
            ):
                return enrollment
        return None

    def enroll_client_in_program(
        self, client_id: str, program_id: str, notes: Optional[str] = None
    ) -> Optional[Enrollment]:
        """Enroll a client in a program.

        Returns ``None`` if the client or the program does not exist.
        If the pair already has an active enrollment, that enrollment
        is returned unchanged.  Completed and withdrawn enrollments do
        not block a new one, so re‑enrolling after a withdrawal keeps
        the old record as history.
        """
        if self.get_client_by_id(client_id) is None or self.get_program_by_id(program_id) is None:
            return None
        existing = self.find_active_enrollment(client_id, program_id)
        if existing is not None:
            return existing
        now = utcnow()
        enrollment = Enrollment(
            id=self._new_id(self._enrollments),
            client_id=client_id,
            program_id=program_id,
            enrollment_date=now,
            status=EnrollmentStatus.ACTIVE,
            notes=notes or "",
            created_at=now,
            updated_at=now,
        )
        self._commit(enrollments={**self._enrollments, enrollment.id: enrollment})
        return enrollment

    def update_enrollment(self, enrollment_id: str, changes: Mapping[str, Any]) -> Optional[Enrollment]:
        current = self._enrollments.get(enrollment_id)
        if current is None:
            return None
        updated = dataclasses.replace(current)
        patch_enrollment(updated, changes)
        _touch(updated)
        self._commit(enrollments={**self._enrollments, enrollment_id: updated})
        return updated

    def cancel_enrollment(self, enrollment_id: str) -> bool:
        return self.update_enrollment(enrollment_id, {"status": EnrollmentStatus.WITHDRAWN}) is not None

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict[str, Any]:
        """Return the full state as JSON‑compatible data."""
        return _snapshot_of(self._clients, self._programs, self._enrollments)

    def restore_snapshot(self, state: Mapping[str, Any]) -> None:
        """Replace all collections with the entities in ``state``.

        Raises
        ------
        SnapshotError
            If an entity is missing a field or holds a value that
            cannot be decoded.  The current collections are left as
            they were.
        """
        try:
            clients = [_client_from_dict(item) for item in state.get("clients", [])]
            programs = [_program_from_dict(item) for item in state.get("programs", [])]
            enrollments = [_enrollment_from_dict(item) for item in state.get("enrollments", [])]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SnapshotError(f"Snapshot contains an invalid entity: {exc!r}") from exc
        self._clients = {c.id: c for c in clients}
        self._programs = {p.id: p for p in programs}
        self._enrollments = {e.id: e for e in enrollments}

    def load(self) -> None:
        """Restore state from the attached storage, if any."""
        if self._storage is None:
            return
        state = self._storage.load()
        if state is None:
            return
        self.restore_snapshot(state)
        logger.info(
            "Restored %d clients, %d programs and %d enrollments",
            len(self._clients),
            len(self._programs),
            len(self._enrollments),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _new_id(existing: Mapping[str, Any]) -> str:
        while True:
            candidate = uuid.uuid4().hex
            if candidate not in existing:
                return candidate

    def _enrollments_without(self, doomed: Callable[[Enrollment], bool]) -> Dict[str, Enrollment]:
        kept = {k: e for k, e in self._enrollments.items() if not doomed(e)}
        removed = len(self._enrollments) - len(kept)
        if removed:
            logger.debug("Cascade removed %d enrollments", removed)
        return kept

    def _commit(
        self,
        clients: Optional[Dict[str, Client]] = None,
        programs: Optional[Dict[str, HealthProgram]] = None,
        enrollments: Optional[Dict[str, Enrollment]] = None,
    ) -> None:
        """Save the new collections, then make them current.

        The snapshot is written first; if the write fails the store
        keeps its previous state and the error propagates.
        """
        clients = self._clients if clients is None else clients
        programs = self._programs if programs is None else programs
        enrollments = self._enrollments if enrollments is None else enrollments
        if self._storage is not None:
            try:
                self._storage.save(_snapshot_of(clients, programs, enrollments))
            except Exception:
                logger.exception("Failed to write snapshot, change discarded")
                raise
        self._clients = clients
        self._programs = programs
        self._enrollments = enrollments


def _snapshot_of(
    clients: Mapping[str, Client],
    programs: Mapping[str, HealthProgram],
    enrollments: Mapping[str, Enrollment],
) -> Dict[str, Any]:
    return {
        "clients": [_entity_to_dict(c) for c in clients.values()],
        "programs": [_entity_to_dict(p) for p in programs.values()],
        "enrollments": [_entity_to_dict(e) for e in enrollments.values()],
    }


def _entity_to_dict(entity: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for f in dataclasses.fields(entity):
        value = getattr(entity, f.name)
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        data[f.name] = value
    return data


def _client_from_dict(data: Mapping[str, Any]) -> Client:
    return Client(
        id=data["id"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        date_of_birth=to_date(data["date_of_birth"]),
        gender=Gender(data["gender"]),
        contact_number=data["contact_number"],
        address=data["address"],
        email=data.get("email"),
        medical_history=data.get("medical_history"),
        created_at=to_datetime(data["created_at"]),
        updated_at=to_datetime(data["updated_at"]),
    )


def _program_from_dict(data: Mapping[str, Any]) -> HealthProgram:
    return HealthProgram(
        id=data["id"],
        name=data["name"],
        description=data["description"],
        created_at=to_datetime(data["created_at"]),
        updated_at=to_datetime(data["updated_at"]),
    )


def _enrollment_from_dict(data: Mapping[str, Any]) -> Enrollment:
    return Enrollment(
        id=data["id"],
        client_id=data["client_id"],
        program_id=data["program_id"],
        enrollment_date=to_datetime(data["enrollment_date"]),
        status=EnrollmentStatus(data["status"]),
        notes=data.get("notes"),
        created_at=to_datetime(data["created_at"]),
        updated_at=to_datetime(data["updated_at"]),
    )
