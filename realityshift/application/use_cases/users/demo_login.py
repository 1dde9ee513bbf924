# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Log into the shared demo account, seeding sample data the first time."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, time, timedelta

from realityshift.application.services.session_tokens import SessionCodec, claim_payload
from realityshift.domain.goals.entities import ChallengeStatus, Goal, NewChallenge
from realityshift.domain.goals.repositories import ChallengeRepository, GoalRepository
from realityshift.domain.journal.entities import DailySurvey
from realityshift.domain.journal.repositories import SurveyRepository
from realityshift.domain.users.entities import User
from realityshift.domain.users.exceptions import UserAlreadyExistsError
from realityshift.domain.users.repositories import PasswordHasher, UserRepository
from realityshift.shared.logging import logger

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123"
DEMO_DISPLAY_NAME = "Demo User"
DEMO_HISTORY_DAYS = 5


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DemoLoginUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        goals: GoalRepository,
        challenges: ChallengeRepository,
        surveys: SurveyRepository,
        password_hasher: PasswordHasher,
        sessions: SessionCodec,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._goals = goals
        self._challenges = challenges
        self._surveys = surveys
        self._password_hasher = password_hasher
        self._sessions = sessions
        self._clock = clock

    def execute(self) -> tuple[User, str]:
        user = self._users.find_by_email(DEMO_EMAIL) or self._create_demo_user()

        try:
            if not self._goals.list_for_user(user.id):
                self._seed(user.id)
        except Exception:
            # Seeding is best effort; the demo login itself must still succeed
            logger.exception(f"auth.demo: seeding failed for user_id={user.id}")

        token = self._sessions.sign(
            claim_payload(user.id, user.email, user.display_name, isDemo=True)
        )
        return user, token

    def _create_demo_user(self) -> User:
        try:
            user = self._users.add(
                User(
                    id="",
                    email=DEMO_EMAIL,
                    password_hash=self._password_hasher.hash(DEMO_PASSWORD),
                    display_name=DEMO_DISPLAY_NAME,
                    created_at=self._clock(),
                )
            )
        except UserAlreadyExistsError:
            # another first-time demo login created it in between
            existing = self._users.find_by_email(DEMO_EMAIL)
            if existing is None:
                raise
            return existing
        logger.info(f"auth.demo: created demo user id={user.id}")
        return user

    def _seed(self, user_id: str) -> None:
        logger.info(f"auth.demo: seeding sample data for user_id={user_id}")
        now = self._clock()
        today = now.date()
        goal = self._goals.add(
            Goal(
                id="",
                user_id=user_id,
                domain_id=3,
                title="Morning Meditation 🧘",
                description="Start every day with 10 mins of mindfulness.",
                current_state="Reactive and stressed",
                desired_state="Calm and focused mornings",
                difficulty_level=5,
                started_at=now - timedelta(days=DEMO_HISTORY_DAYS),
            )
        )

        for offset in range(1, DEMO_HISTORY_DAYS + 1):
            day = today - timedelta(days=offset)
            challenge = self._challenges.add(
                NewChallenge(
                    user_id=user_id,
                    goal_id=goal.id,
                    title=f"Meditation Session {offset}",
                    description="10 minutes breathing focus.",
                    difficulty=4,
                    scheduled_date=day,
                )
            )
            # Backdated so the streak reflects the sample history
            completed_at = datetime.combine(day, time(hour=8), tzinfo=UTC)
            self._challenges.settle(challenge.id, ChallengeStatus.COMPLETED, at=completed_at)

        self._challenges.add(
            NewChallenge(
                user_id=user_id,
                goal_id=goal.id,
                title="Mindful Walking",
                description=(
                    "Take a 10 minute walk without your phone. Notice 5 things you see, 4 you hear..."
                ),
                difficulty=5,
                scheduled_date=today,
            )
        )

        self._surveys.upsert(
            DailySurvey(
                id="",
                user_id=user_id,
                survey_date=today,
                energy_level=7,
                motivation_level=8,
                overall_mood=8,
                gratitude_note="Grateful for this demo mode working!",
            )
        )


__all__ = ["DEMO_EMAIL", "DemoLoginUseCase"]
