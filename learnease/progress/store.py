"""Enrollment persistence.

One record per (learner, course), written to two tables:
- ``enrollments`` (partition course_id): authoritative, guarded by LWT
- ``enrollments_by_user`` (partition user_id): full copy for learner queries

Creation uses ``IF NOT EXISTS`` so two concurrent enrollments of the same
pair cannot both succeed; updates use ``IF EXISTS`` so a record is never
resurrected by a late write. Within an existing record the last write wins.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from learnease.core.logging import get_logger
from learnease.progress.exceptions import AlreadyEnrolledError, EnrollmentNotFoundError
from learnease.progress.models import Enrollment, EnrollmentStatus


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = get_logger(__name__)

_COLUMNS = (
    "status, progress, completed_modules, quiz_scores, "
    "enrolled_at, updated_at, completed_at"
)


class EnrollmentStore:
    """Cassandra-backed enrollment records."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        self._insert_enrollment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.enrollments
            (course_id, user_id, {_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            IF NOT EXISTS
        """)

        self._update_enrollment = self.session.prepare(f"""
            UPDATE {self.keyspace}.enrollments
            SET status = ?, progress = ?, completed_modules = ?, quiz_scores = ?,
                updated_at = ?, completed_at = ?
            WHERE course_id = ? AND user_id = ?
            IF EXISTS
        """)

        self._get_enrollment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.enrollments
            WHERE course_id = ? AND user_id = ?
        """)

        self._get_course_enrollments = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.enrollments
            WHERE course_id = ?
        """)

        # Enrollments by user (lookup)
        self._upsert_enrollment_by_user = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.enrollments_by_user
            (user_id, course_id, {_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_user_enrollments = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.enrollments_by_user
            WHERE user_id = ?
        """)

    async def _write_by_user(self, enrollment: Enrollment) -> None:
        await self.session.aexecute(
            self._upsert_enrollment_by_user,
            [
                enrollment.user_id,
                enrollment.course_id,
                enrollment.status,
                enrollment.progress,
                set(enrollment.completed_modules),
                enrollment.quiz_scores,
                enrollment.enrolled_at,
                enrollment.updated_at,
                enrollment.completed_at,
            ],
        )

    async def create(
        self,
        user_id: UUID,
        course_id: UUID,
        enrollment: Enrollment | None = None,
    ) -> Enrollment:
        """Create the enrollment of ``user_id`` in ``course_id``.

        A fresh record has progress 0 and no completed modules unless a
        prepared ``enrollment`` is given (demo seeding).

        Raises:
            AlreadyEnrolledError: If the pair is already enrolled
        """
        now = datetime.now(UTC)
        enrollment = enrollment or Enrollment(
            user_id=user_id,
            course_id=course_id,
            status=EnrollmentStatus.NOT_STARTED.value,
            enrolled_at=now,
            updated_at=now,
        )

        result = await self.session.aexecute(
            self._insert_enrollment,
            [
                enrollment.course_id,
                enrollment.user_id,
                enrollment.status,
                enrollment.progress,
                set(enrollment.completed_modules),
                enrollment.quiz_scores,
                enrollment.enrolled_at,
                enrollment.updated_at,
                enrollment.completed_at,
            ],
        )
        if not result.was_applied:
            raise AlreadyEnrolledError

        await self._write_by_user(enrollment)

        logger.info(
            "enrollment_created",
            user_id=str(user_id),
            course_id=str(course_id),
        )
        return enrollment

    async def get(self, user_id: UUID, course_id: UUID) -> Enrollment | None:
        """Get enrollment by learner and course."""
        result = await self.session.aexecute(self._get_enrollment, [course_id, user_id])
        row = result.one()
        return Enrollment.from_row(row) if row else None

    async def update(self, enrollment: Enrollment) -> Enrollment:
        """Replace the stored record with ``enrollment``.

        Raises:
            EnrollmentNotFoundError: If the record was never created
        """
        result = await self.session.aexecute(
            self._update_enrollment,
            [
                enrollment.status,
                enrollment.progress,
                set(enrollment.completed_modules),
                enrollment.quiz_scores,
                enrollment.updated_at,
                enrollment.completed_at,
                enrollment.course_id,
                enrollment.user_id,
            ],
        )
        if not result.was_applied:
            raise EnrollmentNotFoundError

        await self._write_by_user(enrollment)

        logger.debug(
            "enrollment_updated",
            user_id=str(enrollment.user_id),
            course_id=str(enrollment.course_id),
            progress=enrollment.progress,
        )
        return enrollment

    async def list_by_user(self, user_id: UUID) -> list[Enrollment]:
        """All enrollments of a learner."""
        rows = await self.session.aexecute(self._get_user_enrollments, [user_id])
        return [Enrollment.from_row(row) for row in rows]

    async def list_by_course(self, course_id: UUID) -> list[Enrollment]:
        """All enrollments of a course."""
        rows = await self.session.aexecute(self._get_course_enrollments, [course_id])
        return [Enrollment.from_row(row) for row in rows]
