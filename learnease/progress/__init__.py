"""Learner progress.

Provides:
- Enrollment records (one per learner and course)
- The progress engine: active module, completion percentage, quiz gating
- Quiz scoring
"""

from .models import PROGRESS_TABLES_CQL, Enrollment, EnrollmentStatus


__all__ = [
    "PROGRESS_TABLES_CQL",
    "Enrollment",
    "EnrollmentStatus",
]
