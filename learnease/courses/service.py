"""Course store.

Business logic for:
- Course CRUD from validated drafts
- Listing by catalogue category and by instructor
- Read-through Redis cache of course definitions
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import orjson
from redis.exceptions import RedisError

from learnease.auth.schemas import SessionUser
from learnease.core.logging import get_logger
from learnease.core.redis import course_cache_key
from learnease.courses.exceptions import CourseAccessDeniedError, CourseNotFoundError
from learnease.courses.models import Course, Module, Question, Quiz
from learnease.courses.schemas import (
    CourseDraft,
    CourseResponse,
    CourseSummaryResponse,
)


if TYPE_CHECKING:
    from cassandra.cluster import Session
    from redis.asyncio import Redis


logger = get_logger(__name__)


def build_course(draft: CourseDraft, **fields) -> Course:
    """Turn a validated draft into a course entity."""
    return Course(
        title=draft.title,
        description=draft.description,
        category=draft.category,
        mode=draft.mode.value,
        thumbnail_url=draft.thumbnail_url,
        modules=[
            Module(
                id=m.id,
                title=m.title,
                type=m.type.value,
                content=m.content,
                duration=m.duration,
            )
            for m in draft.modules
        ],
        quizzes=[
            Quiz(
                id=q.id,
                title=q.title,
                questions=[
                    Question(
                        id=qq.id,
                        question=qq.question,
                        options=qq.options,
                        correct_index=qq.correct_index,
                    )
                    for qq in q.questions
                ],
            )
            for q in draft.quizzes
        ],
        **fields,
    )


class CourseService:
    """Service for course definitions."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        redis: "Redis | None" = None,
        cache_ttl: int = 300,
    ):
        """Initialize with Cassandra session and optional Redis client."""
        self.session = session
        self.keyspace = keyspace
        self.redis = redis
        self.cache_ttl = cache_ttl
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_course_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._list_courses = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses LIMIT ?"
        )
        self._insert_course = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.courses
            (id, title, description, category, mode, thumbnail_url,
             instructor_id, instructor_name, modules, quizzes,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._delete_course = self.session.prepare(
            f"DELETE FROM {self.keyspace}.courses WHERE id = ?"
        )

        # Lookup tables
        self._insert_course_by_instructor = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.courses_by_instructor
            (instructor_id, created_at, course_id, title)
            VALUES (?, ?, ?, ?)
        """)
        self._delete_course_by_instructor = self.session.prepare(
            f"DELETE FROM {self.keyspace}.courses_by_instructor "
            "WHERE instructor_id = ? AND created_at = ? AND course_id = ?"
        )
        self._get_courses_by_instructor = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses_by_instructor "
            "WHERE instructor_id = ? LIMIT ?"
        )

        self._insert_course_by_category = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.courses_by_category
            (category, created_at, course_id, title)
            VALUES (?, ?, ?, ?)
        """)
        self._delete_course_by_category = self.session.prepare(
            f"DELETE FROM {self.keyspace}.courses_by_category "
            "WHERE category = ? AND created_at = ? AND course_id = ?"
        )
        self._get_courses_by_category = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses_by_category "
            "WHERE category = ? LIMIT ?"
        )

    # --------------------------------------------------------------------------
    # Cache
    # --------------------------------------------------------------------------

    async def _cache_get(self, course_id: UUID) -> Course | None:
        if self.redis is None:
            return None
        try:
            raw = await self.redis.get(course_cache_key(course_id))
        except RedisError as e:
            logger.warning("course_cache_read_failed", course_id=str(course_id), error=str(e))
            return None
        return Course.from_dict(orjson.loads(raw)) if raw else None

    async def _cache_set(self, course: Course) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.set(
                course_cache_key(course.id),
                orjson.dumps(course.to_dict()),
                ex=self.cache_ttl,
            )
        except RedisError as e:
            logger.warning("course_cache_write_failed", course_id=str(course.id), error=str(e))

    async def _cache_invalidate(self, course_id: UUID) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.delete(course_cache_key(course_id))
        except RedisError as e:
            logger.warning(
                "course_cache_invalidate_failed", course_id=str(course_id), error=str(e)
            )

    # --------------------------------------------------------------------------
    # Course CRUD
    # --------------------------------------------------------------------------

    async def _write(self, course: Course) -> None:
        await self.session.aexecute(
            self._insert_course,
            [
                course.id,
                course.title,
                course.description,
                course.category,
                course.mode,
                course.thumbnail_url,
                course.instructor_id,
                course.instructor_name,
                course.modules_json(),
                course.quizzes_json(),
                course.created_at,
                course.updated_at,
            ],
        )

    async def _write_lookups(self, course: Course) -> None:
        await self.session.aexecute(
            self._insert_course_by_instructor,
            [course.instructor_id, course.created_at, course.id, course.title],
        )
        await self.session.aexecute(
            self._insert_course_by_category,
            [course.category, course.created_at, course.id, course.title],
        )

    async def create_course(
        self,
        draft: CourseDraft,
        instructor: SessionUser,
        course_id: UUID | None = None,
    ) -> Course:
        """Create a course owned by ``instructor``."""
        course = build_course(
            draft,
            id=course_id,
            instructor_id=instructor.id,
            instructor_name=instructor.name,
        )

        await self._write(course)
        await self._write_lookups(course)

        logger.info(
            "course_created",
            course_id=str(course.id),
            module_count=len(course.modules),
            quiz_count=len(course.quizzes),
        )
        return course

    async def get_course(self, course_id: UUID) -> Course | None:
        """Get course by ID, from cache when possible."""
        cached = await self._cache_get(course_id)
        if cached is not None:
            return cached

        result = await self.session.aexecute(self._get_course_by_id, [course_id])
        row = result.one()
        if not row:
            return None

        course = Course.from_row(row)
        await self._cache_set(course)
        return course

    async def update_course(self, course_id: UUID, draft: CourseDraft) -> Course:
        """Replace a course definition, keeping its owner and creation time.

        Enrollments are left untouched; completed ids of removed modules stay
        in learners' completed sets.
        """
        existing = await self.get_course(course_id)
        if not existing:
            raise CourseNotFoundError

        course = build_course(
            draft,
            id=existing.id,
            instructor_id=existing.instructor_id,
            instructor_name=existing.instructor_name,
            created_at=existing.created_at,
            updated_at=datetime.now(UTC),
        )

        await self._write(course)
        if existing.category != course.category:
            await self.session.aexecute(
                self._delete_course_by_category,
                [existing.category, existing.created_at, existing.id],
            )
        await self._write_lookups(course)
        await self._cache_invalidate(course_id)

        logger.info(
            "course_updated",
            course_id=str(course_id),
            module_count=len(course.modules),
            removed_modules=sorted(set(existing.module_ids) - set(course.module_ids)),
        )
        return course

    async def delete_course(self, course_id: UUID) -> None:
        """Delete course. Enrollments referencing it are orphaned."""
        course = await self.get_course(course_id)
        if not course:
            raise CourseNotFoundError

        await self.session.aexecute(
            self._delete_course_by_instructor,
            [course.instructor_id, course.created_at, course.id],
        )
        await self.session.aexecute(
            self._delete_course_by_category,
            [course.category, course.created_at, course.id],
        )
        await self.session.aexecute(self._delete_course, [course_id])
        await self._cache_invalidate(course_id)

        logger.info("course_deleted", course_id=str(course_id))

    async def _resolve(self, rows) -> list[Course]:
        courses = []
        for row in rows:
            course = await self.get_course(row.course_id)
            if course:
                courses.append(course)
        return courses

    async def list_courses(
        self,
        limit: int = 50,
        category: str | None = None,
    ) -> list[Course]:
        """List courses with optional category filter."""
        if category:
            rows = await self.session.aexecute(
                self._get_courses_by_category, [category, limit]
            )
            return await self._resolve(rows)

        rows = await self.session.aexecute(self._list_courses, [limit])
        return [Course.from_row(row) for row in rows]

    async def list_courses_by_instructor(
        self, instructor_id: UUID, limit: int = 50
    ) -> list[Course]:
        """List courses owned by an instructor, newest first."""
        rows = await self.session.aexecute(
            self._get_courses_by_instructor, [instructor_id, limit]
        )
        return await self._resolve(rows)

    # --------------------------------------------------------------------------
    # Access and responses
    # --------------------------------------------------------------------------

    @staticmethod
    def ensure_can_manage(course: Course, user: SessionUser) -> None:
        """Raise unless ``user`` owns the course or is an admin."""
        if not user.can_manage(course.instructor_id):
            raise CourseAccessDeniedError

    def to_summary(self, course: Course) -> CourseSummaryResponse:
        return CourseSummaryResponse(
            id=course.id,
            title=course.title,
            description=course.description,
            category=course.category,
            mode=course.mode,
            thumbnail_url=course.thumbnail_url,
            instructor_id=course.instructor_id,
            instructor_name=course.instructor_name,
            module_count=len(course.modules),
            created_at=course.created_at,
            updated_at=course.updated_at,
        )

    def to_response(self, course: Course, viewer: SessionUser) -> CourseResponse:
        """Course view; answer keys only for the owner or an admin."""
        include_answers = viewer.can_manage(course.instructor_id)
        data = course.to_dict(include_answers=include_answers)
        data["module_count"] = len(course.modules)
        return CourseResponse.model_validate(data)
