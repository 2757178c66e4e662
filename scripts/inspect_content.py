"""Quick DB inspector for generated study content.

Summarizes flashcard sets, quizzes, tutors and recent usage records so a
deployment can be sanity-checked without going through the API.

Usage:
  uv run scripts/inspect_content.py
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Ensure project root is on sys.path so `app` package imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas import (
    Flashcard,
    FlashcardSet,
    Generation,
    Quiz,
    QuizQuestion,
    Tutor,
    TutorMessage,
)


async def _count(session, column) -> int:
    return (await session.execute(select(func.count(column)))).scalar() or 0


async def main() -> int:
    async for session in get_session():  # get_session is an async generator
        print("Content DB summary:")
        print(f"- Flashcard sets: {await _count(session, FlashcardSet.id)}")
        print(f"- Flashcards: {await _count(session, Flashcard.id)}")
        print(f"- Quizzes: {await _count(session, Quiz.id)}")
        print(f"- Quiz questions: {await _count(session, QuizQuestion.id)}")
        print(f"- Tutors: {await _count(session, Tutor.id)}")
        print(f"- Tutor messages: {await _count(session, TutorMessage.id)}")

        # Usage inside the current quota window, per user
        since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(
            hours=settings.generation.window_hours
        )
        usage_rows = (
            await session.execute(
                select(Generation.user_id, func.count(Generation.id))
                .where(Generation.created_at >= since)
                .group_by(Generation.user_id)
                .order_by(func.count(Generation.id).desc())
                .limit(10)
            )
        ).all()
        print(
            f"\nGenerations in the last {settings.generation.window_hours}h "
            f"(limit {settings.generation.limit}):"
        )
        if not usage_rows:
            print("- None.")
        for user_id, used in usage_rows:
            print(f"  • user {user_id}: {used}")

        recent_sets = (
            (
                await session.execute(
                    select(FlashcardSet)
                    .options(selectinload(FlashcardSet.flashcards))
                    .order_by(FlashcardSet.created_at.desc())
                    .limit(5)
                )
            )
            .scalars()
            .all()
        )
        if recent_sets:
            print("\nRecent sets:")
            for s in recent_sets:
                print(
                    f"  • ID {s.id} | title={s.title!r} | difficulty={s.difficulty} | "
                    f"cards={len(s.flashcards)}"
                )
            print("\nSample cards (first recent set):")
            for c in recent_sets[0].flashcards[:3]:
                print(f"  - Q: {c.question[:100]!r}")
                print(f"    A: {c.answer[:120]!r}")

        recent_quizzes = (
            (
                await session.execute(
                    select(Quiz)
                    .options(selectinload(Quiz.questions))
                    .order_by(Quiz.created_at.desc())
                    .limit(5)
                )
            )
            .scalars()
            .all()
        )
        if recent_quizzes:
            print("\nRecent quizzes:")
            for q in recent_quizzes:
                print(
                    f"  • ID {q.id} | title={q.title!r} | difficulty={q.difficulty} | "
                    f"questions={len(q.questions)}"
                )

        return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
