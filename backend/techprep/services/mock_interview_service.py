"""Mock interview sessions.

A session draws a random set of approved questions for a role and level,
accepts exactly one answer per question, scores each answer with a simple
text heuristic and completes once every question is answered. Sessions left
active past the timeout are marked abandoned, either lazily on the next
submit or by the periodic cleanup sweep.
"""

import asyncio
import random
import re
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from techprep.core.cache import CacheKeys, cache_service
from techprep.core.config import get_settings
from techprep.core.database import session_scope, utcnow
from techprep.core.errors import BadRequestError, NotFoundError, SessionTimeoutError
from techprep.core.logging import get_logger
from techprep.models.enums import Difficulty, InterviewStatus, Level
from techprep.models.mock_interview import InterviewQuestion, MockInterview
from techprep.models.question import Question
from techprep.models.role import Role
from techprep.schemas.mock_interview import (
    InterviewFeedback,
    InterviewQuestionContent,
    InterviewSummaryDetails,
    MockInterviewSession,
    MockInterviewSummary,
    MockInterviewWithDetails,
    StartMockInterviewRequest,
    SubmitAnswerResult,
)
from techprep.services.question_service import json_list_contains_any

logger = get_logger(__name__)
settings = get_settings()

DETAILS_CACHE_TTL = 1800

DEFAULT_QUESTION_COUNT = 5
MAX_QUESTION_COUNT = 10
DEFAULT_TIME_LIMIT = 30  # minutes per question

LEVEL_DIFFICULTIES: dict[Level, list[Difficulty]] = {
    Level.JUNIOR: [Difficulty.EASY, Difficulty.MEDIUM],
    Level.MID: [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD],
    Level.SENIOR: [Difficulty.MEDIUM, Difficulty.HARD],
}

_IDENTIFIER = re.compile(r"[a-zA-Z][a-zA-Z0-9]*")


def session_timeout() -> timedelta:
    return timedelta(minutes=settings.MOCK_INTERVIEW_SESSION_TIMEOUT_MINUTES)


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def _to_score(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


async def _clear_interview_cache(interview_id: str) -> None:
    await cache_service.delete(CacheKeys.mock_interview_details(interview_id))


# ============================================================================
# Feedback heuristic
# ============================================================================


def generate_feedback(user_code: str) -> InterviewFeedback:
    """Score an answer from surface features of its text.

    Deterministic stand-in for a real reviewer: same input, same feedback.
    """
    has_comments = any(marker in user_code for marker in ("//", "/*", "#"))
    has_naming = _IDENTIFIER.search(user_code) is not None
    has_branching = any(word in user_code for word in ("try", "catch", "if"))

    code_quality = 60
    problem_solving = 70
    efficiency = 65
    if has_comments:
        code_quality += 10
    if has_naming:
        code_quality += 10
    if has_branching:
        problem_solving += 15
    if len(user_code) > 100:
        efficiency += 10

    code_quality = min(100, max(0, code_quality))
    problem_solving = min(100, max(0, problem_solving))
    efficiency = min(100, max(0, efficiency))
    mean = (code_quality + problem_solving + efficiency) / 3

    strengths = []
    if code_quality >= 80:
        strengths.append("Clean and readable code structure")
    if problem_solving >= 80:
        strengths.append("Strong problem-solving approach")
    if efficiency >= 80:
        strengths.append("Efficient algorithm implementation")
    if has_comments:
        strengths.append("Good code documentation")

    improvements = []
    if code_quality < 70:
        improvements.append("Improve code readability and structure")
    if problem_solving < 70:
        improvements.append("Work on problem decomposition skills")
    if efficiency < 70:
        improvements.append("Consider more efficient algorithms")
    if not has_comments:
        improvements.append("Add comments to explain complex logic")

    if mean >= 80:
        grade = "strong"
        remark = "Excellent work with clean implementation and good practices."
    elif mean >= 60:
        grade = "adequate"
        remark = "Good effort with room for improvement in code quality and efficiency."
    else:
        grade = "basic"
        remark = "Keep practicing to improve problem-solving and coding skills."

    return InterviewFeedback(
        score=int(Decimal(str(mean)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
        strengths=strengths or ["Attempted to solve the problem"],
        improvements=improvements or ["Continue practicing coding problems"],
        code_quality=code_quality,
        problem_solving=problem_solving,
        efficiency=efficiency,
        ai_analysis=f"The solution demonstrates {grade} understanding of the problem. {remark}",
    )


def generate_recommendations(average_score: float, improvements: list[str]) -> list[str]:
    if average_score >= 80:
        recommendations = [
            "Excellent performance! Consider practicing system design questions.",
            "Focus on advanced algorithms and data structures.",
        ]
    elif average_score >= 60:
        recommendations = [
            "Good foundation. Practice more coding problems daily.",
            "Review fundamental algorithms and time complexity analysis.",
        ]
    else:
        recommendations = [
            "Focus on basic programming concepts and problem-solving patterns.",
            "Practice simple coding problems before attempting complex ones.",
        ]

    if any("readability" in item for item in improvements):
        recommendations.append("Study clean code principles and best practices.")
    # Stem, so "Consider more efficient algorithms" counts
    if any("efficien" in item for item in improvements):
        recommendations.append("Learn about algorithm optimization and Big O notation.")
    if any("problem" in item for item in improvements):
        recommendations.append("Practice breaking down complex problems into smaller parts.")
    return recommendations


# ============================================================================
# Session lifecycle
# ============================================================================


async def _pick_questions(db: AsyncSession, role_name: str, level: Level, count: int) -> list[Question]:
    result = await db.execute(
        select(Question)
        .where(
            Question.is_approved.is_(True),
            Question.difficulty.in_(LEVEL_DIFFICULTIES[level]),
            json_list_contains_any(Question.roles, [role_name]),
        )
        .order_by(func.random())
        .limit(count * 2)
    )
    candidates = list(result.scalars().all())
    random.shuffle(candidates)
    return candidates[:count]


async def start_mock_interview(
    db: AsyncSession,
    request: StartMockInterviewRequest,
) -> MockInterviewSession:
    """Create an active session with up to ``questionCount`` questions.

    Raises:
        NotFoundError: ``ROLE_NOT_FOUND``.
        BadRequestError: ``NO_QUESTIONS_AVAILABLE`` when nothing matches the role and level.
    """
    role = await db.get(Role, str(request.role_id))
    if role is None:
        raise NotFoundError("The specified role was not found", code="ROLE_NOT_FOUND")

    count = min(max(1, request.question_count or DEFAULT_QUESTION_COUNT), MAX_QUESTION_COUNT)
    time_limit = request.time_limit or DEFAULT_TIME_LIMIT

    questions = await _pick_questions(db, role.name, request.level, count)
    if not questions:
        raise BadRequestError(
            "No suitable questions found for this role and level",
            code="NO_QUESTIONS_AVAILABLE",
        )

    interview = MockInterview(
        role_id=role.id,
        level=request.level,
        status=InterviewStatus.ACTIVE,
        start_time=utcnow(),
        total_questions=len(questions),
        completed_questions=0,
    )
    db.add(interview)
    await db.flush()

    for order, question in enumerate(questions, start=1):
        db.add(
            InterviewQuestion(
                mock_interview_id=interview.id,
                question_id=question.id,
                order=order,
                time_limit=time_limit,
            )
        )
    await db.commit()
    await db.refresh(interview)

    session = MockInterviewSession.model_validate(interview)

    logger.info(
        "Mock interview started",
        interview_id=interview.id,
        role=role.name,
        level=request.level.value,
        question_count=len(questions),
    )
    return session


async def get_mock_interview_by_id(
    db: AsyncSession,
    interview_id: str,
) -> MockInterviewWithDetails | None:
    cache_key = CacheKeys.mock_interview_details(interview_id)
    cached = await cache_service.get(cache_key)
    if cached is not None:
        return MockInterviewWithDetails.model_validate(cached)

    result = await db.execute(
        select(MockInterview)
        .where(MockInterview.id == interview_id)
        .options(
            selectinload(MockInterview.role),
            selectinload(MockInterview.interview_questions).selectinload(InterviewQuestion.question),
        )
    )
    interview = result.scalar_one_or_none()
    if interview is None:
        return None

    details = MockInterviewWithDetails.model_validate(
        {
            **MockInterviewSession.model_validate(interview).model_dump(),
            "role": interview.role,
            "questions": sorted(interview.interview_questions, key=lambda iq: iq.order),
        }
    )
    await cache_service.set(cache_key, details.to_json(), DETAILS_CACHE_TTL)
    return details


async def _get_interview(db: AsyncSession, interview_id: str) -> MockInterview:
    interview = await db.get(MockInterview, interview_id)
    if interview is None:
        raise NotFoundError("Mock interview not found", code="INTERVIEW_NOT_FOUND")
    return interview


async def submit_answer(
    db: AsyncSession,
    interview_id: str,
    question_id: str,
    user_code: str,
) -> SubmitAnswerResult:
    """Record the answer to one question and score it.

    The interview completes when the last unanswered question is submitted.

    Raises:
        NotFoundError: ``INTERVIEW_NOT_FOUND`` or ``QUESTION_NOT_FOUND``.
        BadRequestError: ``INTERVIEW_NOT_ACTIVE`` or ``QUESTION_ALREADY_COMPLETED``.
        SessionTimeoutError: the session outlived the timeout; it is now abandoned.
    """
    interview = await _get_interview(db, interview_id)
    if interview.status != InterviewStatus.ACTIVE:
        raise BadRequestError("Mock interview is not active", code="INTERVIEW_NOT_ACTIVE")

    now = utcnow()
    if now - interview.start_time > session_timeout():
        interview.status = InterviewStatus.ABANDONED
        interview.end_time = now
        interview.duration = _minutes_between(interview.start_time, now)
        await db.commit()
        await _clear_interview_cache(interview_id)
        logger.info("Mock interview timed out", interview_id=interview_id)
        raise SessionTimeoutError("Mock interview session has timed out", code="SESSION_TIMEOUT")

    result = await db.execute(
        select(InterviewQuestion).where(
            InterviewQuestion.mock_interview_id == interview_id,
            InterviewQuestion.question_id == question_id,
        )
    )
    slot = result.scalar_one_or_none()
    if slot is None:
        raise NotFoundError("Question not found in this interview", code="QUESTION_NOT_FOUND")
    if slot.completed_at is not None:
        raise BadRequestError("Question already completed", code="QUESTION_ALREADY_COMPLETED")

    feedback = generate_feedback(user_code)

    # Conditional on completed_at so a concurrent duplicate submit cannot score twice
    answered = await db.execute(
        update(InterviewQuestion)
        .where(InterviewQuestion.id == slot.id, InterviewQuestion.completed_at.is_(None))
        .values(
            user_code=user_code,
            feedback=feedback.model_dump(mode="json", by_alias=True),
            score=Decimal(feedback.score),
            completed_at=now,
        )
    )
    if answered.rowcount == 0:
        raise BadRequestError("Question already completed", code="QUESTION_ALREADY_COMPLETED")

    # Increment in SQL; concurrent answers to different questions serialize on the row
    counted = await db.execute(
        update(MockInterview)
        .where(MockInterview.id == interview_id, MockInterview.status == InterviewStatus.ACTIVE)
        .values(completed_questions=MockInterview.completed_questions + 1)
        .returning(MockInterview.completed_questions)
        .execution_options(synchronize_session=False)
    )
    completed = counted.scalar_one_or_none()
    if completed is None:
        raise BadRequestError("Mock interview is not active", code="INTERVIEW_NOT_ACTIVE")
    is_complete = completed >= interview.total_questions

    next_question = None
    if is_complete:
        scores = (
            await db.execute(
                select(InterviewQuestion.score).where(
                    InterviewQuestion.mock_interview_id == interview_id,
                    InterviewQuestion.score.is_not(None),
                )
            )
        ).scalars().all()
        overall = sum(float(s) for s in scores) / len(scores) if scores else 0.0
        await db.execute(
            update(MockInterview)
            .where(MockInterview.id == interview_id)
            .values(
                overall_score=_to_score(overall),
                status=InterviewStatus.COMPLETED,
                end_time=now,
                duration=_minutes_between(interview.start_time, now),
            )
            .execution_options(synchronize_session=False)
        )
    else:
        pending = await db.execute(
            select(Question)
            .join(InterviewQuestion, InterviewQuestion.question_id == Question.id)
            .where(
                InterviewQuestion.mock_interview_id == interview_id,
                InterviewQuestion.completed_at.is_(None),
            )
            .order_by(InterviewQuestion.order)
            .limit(1)
        )
        upcoming = pending.scalar_one_or_none()
        if upcoming is not None:
            next_question = InterviewQuestionContent.model_validate(upcoming)

    await db.commit()
    await _clear_interview_cache(interview_id)

    logger.info(
        "Answer submitted",
        interview_id=interview_id,
        question_id=question_id,
        score=feedback.score,
        completed=completed,
        is_complete=is_complete,
    )
    return SubmitAnswerResult(feedback=feedback, next_question=next_question, is_complete=is_complete)


async def get_interview_feedback(db: AsyncSession, interview_id: str) -> MockInterviewSummary:
    """Aggregate feedback of a completed interview.

    Raises:
        NotFoundError: ``INTERVIEW_NOT_FOUND``.
        BadRequestError: ``INTERVIEW_NOT_COMPLETED``.
    """
    interview = await _get_interview(db, interview_id)
    if interview.status != InterviewStatus.COMPLETED:
        raise BadRequestError("Mock interview is not completed yet", code="INTERVIEW_NOT_COMPLETED")

    rows = await db.execute(
        select(InterviewQuestion.feedback, InterviewQuestion.score)
        .where(InterviewQuestion.mock_interview_id == interview_id)
        .order_by(InterviewQuestion.order)
    )
    strengths: list[str] = []
    improvements: list[str] = []
    scores: list[float] = []
    for raw_feedback, score in rows.all():
        if score is not None:
            scores.append(float(score))
        if raw_feedback is None:
            continue
        feedback = InterviewFeedback.model_validate(raw_feedback)
        strengths.extend(s for s in feedback.strengths if s not in strengths)
        improvements.extend(i for i in feedback.improvements if i not in improvements)

    average = sum(scores) / len(scores) if scores else 0.0
    return MockInterviewSummary(
        overall_score=float(interview.overall_score or 0),
        summary=InterviewSummaryDetails(
            total_questions=interview.total_questions,
            completed_questions=interview.completed_questions,
            average_score=round(average, 2),
            strengths=strengths,
            areas_for_improvement=improvements,
            recommendations=generate_recommendations(average, improvements),
        ),
    )


async def end_mock_interview(db: AsyncSession, interview_id: str) -> MockInterviewSession:
    """End an active interview early; it becomes abandoned."""
    interview = await _get_interview(db, interview_id)
    if interview.status != InterviewStatus.ACTIVE:
        raise BadRequestError("Mock interview is not active", code="INTERVIEW_NOT_ACTIVE")

    now = utcnow()
    interview.status = InterviewStatus.ABANDONED
    interview.end_time = now
    interview.duration = _minutes_between(interview.start_time, now)
    await db.commit()
    await db.refresh(interview)
    await _clear_interview_cache(interview_id)

    logger.info("Mock interview ended", interview_id=interview_id)
    return MockInterviewSession.model_validate(interview)


# ============================================================================
# Cleanup
# ============================================================================


async def cleanup_abandoned_sessions(db: AsyncSession) -> int:
    """Mark active sessions older than the timeout as abandoned.

    Returns:
        Number of sessions marked.
    """
    now = utcnow()
    stale = (
        MockInterview.status == InterviewStatus.ACTIVE,
        MockInterview.start_time < now - session_timeout(),
    )
    ids = (await db.execute(select(MockInterview.id).where(*stale))).scalars().all()
    if not ids:
        return 0

    await db.execute(
        update(MockInterview)
        .where(MockInterview.id.in_(ids), MockInterview.status == InterviewStatus.ACTIVE)
        .values(status=InterviewStatus.ABANDONED, end_time=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    for interview_id in ids:
        await _clear_interview_cache(interview_id)

    logger.info("Abandoned mock interviews cleaned up", count=len(ids))
    return len(ids)


async def run_cleanup_loop(interval_seconds: float) -> None:
    """Sweep stale sessions every ``interval_seconds`` until cancelled."""
    logger.info("Mock interview cleanup loop started", interval_seconds=interval_seconds)
    while True:
        try:
            async with session_scope() as db:
                await cleanup_abandoned_sessions(db)
        except Exception as e:
            logger.error("Mock interview cleanup failed", error=str(e), exc_info=True)
        await asyncio.sleep(interval_seconds)
