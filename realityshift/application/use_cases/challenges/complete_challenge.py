# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from realityshift.domain.goals.entities import Challenge, ChallengeLog, ChallengeStatus
from realityshift.domain.goals.exceptions import (
    ChallengeAlreadyCompletedError,
    ChallengeAlreadySkippedError,
    ChallengeNotFoundError,
)
from realityshift.domain.goals.repositories import ChallengeRepository
from realityshift.shared.logging import logger

from .streak import completion_streak

DEFAULT_SKIP_REASON = "Skipped by user"


@dataclass(slots=True, frozen=True)
class CompletionResult:
    challenge: Challenge
    log: ChallengeLog
    streak_count: int


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CompleteChallengeUseCase:
    def __init__(
        self, *, challenges: ChallengeRepository, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._challenges = challenges
        self._clock = clock

    def execute(
        self,
        user_id: str,
        challenge_id: str,
        *,
        difficulty_felt: int | None = None,
        satisfaction: int | None = None,
        notes: str | None = None,
    ) -> CompletionResult:
        challenge = self._challenges.get_for_user(challenge_id, user_id)
        if challenge is None:
            raise ChallengeNotFoundError()
        if challenge.status is ChallengeStatus.COMPLETED:
            raise ChallengeAlreadyCompletedError()

        now = self._clock()
        updated = self._challenges.settle(challenge.id, ChallengeStatus.COMPLETED, at=now)
        log = self._challenges.add_log(
            ChallengeLog(
                id="",
                challenge_id=challenge.id,
                user_id=user_id,
                completed_at=now,
                difficulty_felt=difficulty_felt,
                satisfaction=satisfaction,
                notes=notes,
            )
        )
        streak = completion_streak(self._challenges, user_id, now.date())
        logger.info(f"challenges.complete: challenge_id={challenge.id} streak={streak}")
        return CompletionResult(challenge=updated, log=log, streak_count=streak)


class SkipChallengeUseCase:
    """Close a pending challenge as skipped; settled challenges cannot be skipped."""

    def __init__(
        self, *, challenges: ChallengeRepository, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._challenges = challenges
        self._clock = clock

    def execute(self, user_id: str, challenge_id: str, reason: str | None = None) -> Challenge:
        challenge = self._challenges.get_for_user(challenge_id, user_id)
        if challenge is None:
            raise ChallengeNotFoundError()
        if challenge.status is ChallengeStatus.COMPLETED:
            raise ChallengeAlreadyCompletedError()
        if challenge.status is ChallengeStatus.SKIPPED:
            raise ChallengeAlreadySkippedError()

        skipped = self._challenges.settle(
            challenge.id,
            ChallengeStatus.SKIPPED,
            at=self._clock(),
            reason=reason or DEFAULT_SKIP_REASON,
        )
        logger.info(f"challenges.skip: challenge_id={challenge.id}")
        return skipped
