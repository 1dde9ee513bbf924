from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from typing import Any

import pytest

from realityshift.application.use_cases.challenges.accept_template import (
    DEFAULT_ACCEPT_NOTE,
    AcceptTemplateUseCase,
)
from realityshift.application.use_cases.challenges.complete_challenge import (
    DEFAULT_SKIP_REASON,
    CompleteChallengeUseCase,
    SkipChallengeUseCase,
)
from realityshift.application.use_cases.challenges.generate_challenge import (
    GenerateChallengeUseCase,
)
from realityshift.application.use_cases.goals.create_goal import CreateGoalInput, CreateGoalUseCase
from realityshift.application.use_cases.goals.goal_action import GoalActionUseCase
from realityshift.domain.goals.entities import (
    Challenge,
    ChallengeLog,
    ChallengeStatus,
    ChallengeTemplate,
    DifficultyBand,
    Goal,
    GoalStatus,
    NewChallenge,
)
from realityshift.domain.goals.exceptions import (
    ChallengeAlreadyCompletedError,
    ChallengeAlreadySkippedError,
    ChallengeNotFoundError,
    GoalNotFoundError,
    InvalidGoalActionError,
    TemplateNotFoundError,
)
from realityshift.domain.goals.repositories import (
    ChallengeRepository,
    ChallengeTemplateRepository,
    GoalRepository,
)
from realityshift.domain.users.entities import UserPreferences
from realityshift.domain.users.repositories import PreferencesRepository
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError

NOW = datetime(2025, 6, 15, 10, 0, tzinfo=UTC)
TODAY = NOW.date()


class InMemoryGoalRepository(GoalRepository):
    def __init__(self) -> None:
        self._goals: dict[str, Goal] = {}
        self._seq = 1

    def list_for_user(self, user_id: str) -> Sequence[Goal]:
        return [goal for goal in self._goals.values() if goal.user_id == user_id]

    def get_for_user(self, goal_id: str, user_id: str) -> Goal | None:
        goal = self._goals.get(goal_id)
        return goal if goal and goal.user_id == user_id else None

    def get_active(self, user_id: str) -> Goal | None:
        for goal in self.list_for_user(user_id):
            if goal.status is GoalStatus.ACTIVE:
                return goal
        return None

    def find_active_in_domain(self, user_id: str, domain_id: int) -> Goal | None:
        for goal in self.list_for_user(user_id):
            if goal.status is GoalStatus.ACTIVE and goal.domain_id == domain_id:
                return goal
        return None

    def add(self, goal: Goal) -> Goal:
        stored = replace(goal, id=f"goal-{self._seq}", created_at=goal.started_at)
        self._seq += 1
        self._goals[stored.id] = stored
        return stored

    def set_status(self, goal_id: str, status: GoalStatus) -> Goal:
        updated = replace(self._goals[goal_id], status=status)
        self._goals[goal_id] = updated
        return updated


class InMemoryTemplateRepository(ChallengeTemplateRepository):
    def __init__(self, templates: Sequence[ChallengeTemplate]) -> None:
        self._templates = {template.id: template for template in templates}

    def get(self, template_id: str) -> ChallengeTemplate | None:
        return self._templates.get(template_id)

    def first_for_domain(
        self,
        domain_id: int,
        *,
        max_difficulty: int | None = None,
        is_reality_shift: bool | None = None,
    ) -> ChallengeTemplate | None:
        for template in self._templates.values():
            if template.domain_id != domain_id:
                continue
            if max_difficulty is not None and template.difficulty > max_difficulty:
                continue
            if is_reality_shift is not None and template.is_reality_shift != is_reality_shift:
                continue
            return template
        return None

    def search(self, *, domain_id: int | None, band: DifficultyBand) -> Sequence[ChallengeTemplate]:
        low, high = band.bounds()
        return [
            template
            for template in self._templates.values()
            if (domain_id is None or template.domain_id == domain_id)
            and (low is None or template.difficulty >= low)
            and (high is None or template.difficulty <= high)
        ]


class InMemoryChallengeRepository(ChallengeRepository):
    def __init__(self) -> None:
        self.challenges: dict[str, Challenge] = {}
        self.logs: list[ChallengeLog] = []
        self._seq = 1

    def add(self, challenge: NewChallenge) -> Challenge:
        stored = Challenge(
            id=f"ch-{self._seq}",
            user_id=challenge.user_id,
            title=challenge.title,
            description=challenge.description,
            difficulty=challenge.difficulty,
            scheduled_date=challenge.scheduled_date,
            goal_id=challenge.goal_id,
            template_id=challenge.template_id,
            personalization_notes=challenge.personalization_notes,
            is_reality_shift=challenge.is_reality_shift,
            created_at=NOW,
        )
        self._seq += 1
        self.challenges[stored.id] = stored
        return stored

    def get_for_user(self, challenge_id: str, user_id: str) -> Challenge | None:
        challenge = self.challenges.get(challenge_id)
        return challenge if challenge and challenge.user_id == user_id else None

    def list_for_user(self, user_id: str, *, limit: int = 30) -> Sequence[Challenge]:
        owned = [c for c in self.challenges.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.scheduled_date, reverse=True)[:limit]

    def scheduled_on(self, user_id: str, day: date) -> Sequence[Challenge]:
        return [c for c in self.challenges.values() if c.user_id == user_id and c.scheduled_date == day]

    def recent_completed(self, user_id: str, *, limit: int = 30) -> Sequence[Challenge]:
        done = [
            c
            for c in self.challenges.values()
            if c.user_id == user_id and c.status is ChallengeStatus.COMPLETED
        ]
        return sorted(done, key=lambda c: c.completed_at, reverse=True)[:limit]

    def settle(
        self,
        challenge_id: str,
        status: ChallengeStatus,
        *,
        at: datetime,
        reason: str | None = None,
    ) -> Challenge:
        current = self.challenges[challenge_id]
        if status is ChallengeStatus.COMPLETED:
            updated = replace(current, status=status, completed_at=at)
        else:
            updated = replace(current, status=status, skipped_reason=reason)
        self.challenges[challenge_id] = updated
        return updated

    def add_log(self, log: ChallengeLog) -> ChallengeLog:
        stored = replace(log, id=f"log-{len(self.logs) + 1}")
        self.logs.append(stored)
        return stored


class StaticPreferences(PreferencesRepository):
    def get_or_create(self, user_id: str) -> UserPreferences:
        return UserPreferences(user_id=user_id, focus_areas=("mornings",))

    def save(self, user_id: str, changes: Any) -> UserPreferences:
        raise NotImplementedError


class ScriptedGenerator:
    def __init__(self, result: dict[str, Any] | Exception) -> None:
        self._result = result
        self.prompts: list[str] = []

    async def generate_challenge(self, prompt: str) -> dict[str, Any]:
        self.prompts.append(prompt)
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


STARTER = ChallengeTemplate(
    id="tpl-easy", domain_id=1, title="Immersion Hour", description="Switch languages", difficulty=3
)
HARD = ChallengeTemplate(
    id="tpl-hard",
    domain_id=1,
    title="Stranger Conversation",
    description="Talk to a native speaker",
    difficulty=7,
    is_reality_shift=True,
    success_criteria="Hold a five minute conversation",
)


@pytest.fixture()
def goals() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture()
def challenges() -> InMemoryChallengeRepository:
    return InMemoryChallengeRepository()


@pytest.fixture()
def templates() -> InMemoryTemplateRepository:
    return InMemoryTemplateRepository([HARD, STARTER])


def _pending(challenges: InMemoryChallengeRepository, user_id: str = "u1", day: date = TODAY) -> Challenge:
    return challenges.add(
        NewChallenge(user_id=user_id, title="Walk", description="Go outside", difficulty=4, scheduled_date=day)
    )


def test_create_goal_schedules_easy_first_challenge(goals, templates, challenges) -> None:
    use_case = CreateGoalUseCase(goals=goals, templates=templates, challenges=challenges, clock=lambda: NOW)

    result = use_case.execute(CreateGoalInput(user_id="u1", title="Learn German", domain_id=1))

    assert result.goal.status is GoalStatus.ACTIVE
    assert result.first_challenge is not None
    assert result.first_challenge.template_id == "tpl-easy"
    assert result.first_challenge.scheduled_date == TODAY
    assert result.first_challenge.personalization_notes.startswith("Day 1 of your Learn German journey!")


def test_create_goal_without_starter_template_has_no_first_challenge(goals, challenges) -> None:
    use_case = CreateGoalUseCase(
        goals=goals,
        templates=InMemoryTemplateRepository([HARD]),
        challenges=challenges,
        clock=lambda: NOW,
    )

    result = use_case.execute(CreateGoalInput(user_id="u1", title="Learn German", domain_id=1))

    assert result.first_challenge is None
    assert challenges.challenges == {}


def test_complete_challenge_logs_feedback_and_reports_streak(challenges) -> None:
    for offset in (1, 2):
        earlier = _pending(challenges, day=TODAY - timedelta(days=offset))
        challenges.settle(earlier.id, ChallengeStatus.COMPLETED, at=NOW - timedelta(days=offset))
    today = _pending(challenges)

    result = CompleteChallengeUseCase(challenges=challenges, clock=lambda: NOW).execute(
        "u1", today.id, difficulty_felt=6, satisfaction=9, notes="tough but good"
    )

    assert result.challenge.status is ChallengeStatus.COMPLETED
    assert result.challenge.completed_at == NOW
    assert result.log.satisfaction == 9
    assert result.log.notes == "tough but good"
    assert result.streak_count == 3


def test_complete_twice_is_rejected(challenges) -> None:
    challenge = _pending(challenges)
    use_case = CompleteChallengeUseCase(challenges=challenges, clock=lambda: NOW)
    use_case.execute("u1", challenge.id)

    with pytest.raises(ChallengeAlreadyCompletedError):
        use_case.execute("u1", challenge.id)
    assert len(challenges.logs) == 1


def test_complete_someone_elses_challenge_is_not_found(challenges) -> None:
    challenge = _pending(challenges, user_id="u2")

    with pytest.raises(ChallengeNotFoundError):
        CompleteChallengeUseCase(challenges=challenges).execute("u1", challenge.id)


def test_skip_uses_default_reason(challenges) -> None:
    challenge = _pending(challenges)

    skipped = SkipChallengeUseCase(challenges=challenges, clock=lambda: NOW).execute("u1", challenge.id)

    assert skipped.status is ChallengeStatus.SKIPPED
    assert skipped.skipped_reason == DEFAULT_SKIP_REASON


def test_skip_settled_challenge_is_rejected(challenges) -> None:
    use_case = SkipChallengeUseCase(challenges=challenges, clock=lambda: NOW)
    skipped = _pending(challenges)
    use_case.execute("u1", skipped.id, "tired")
    completed = _pending(challenges)
    CompleteChallengeUseCase(challenges=challenges, clock=lambda: NOW).execute("u1", completed.id)

    with pytest.raises(ChallengeAlreadySkippedError):
        use_case.execute("u1", skipped.id)
    with pytest.raises(ChallengeAlreadyCompletedError):
        use_case.execute("u1", completed.id)
    assert challenges.challenges[skipped.id].skipped_reason == "tired"


def test_accept_template_attaches_active_goal_in_domain(goals, templates, challenges) -> None:
    goal = goals.add(Goal(id="", user_id="u1", domain_id=1, title="Learn German", started_at=NOW))

    challenge = AcceptTemplateUseCase(
        templates=templates, goals=goals, challenges=challenges, clock=lambda: NOW
    ).execute("u1", "tpl-hard")

    assert challenge.goal_id == goal.id
    assert challenge.is_reality_shift is True
    assert challenge.scheduled_date == TODAY
    assert challenge.personalization_notes == "Hold a five minute conversation"


def test_accept_template_without_goal_or_criteria(goals, templates, challenges) -> None:
    later = TODAY + timedelta(days=3)

    challenge = AcceptTemplateUseCase(
        templates=templates, goals=goals, challenges=challenges, clock=lambda: NOW
    ).execute("u1", "tpl-easy", later)

    assert challenge.goal_id is None
    assert challenge.scheduled_date == later
    assert challenge.personalization_notes == DEFAULT_ACCEPT_NOTE


def test_accept_unknown_template(goals, templates, challenges) -> None:
    with pytest.raises(TemplateNotFoundError):
        AcceptTemplateUseCase(templates=templates, goals=goals, challenges=challenges).execute(
            "u1", "tpl-missing"
        )


def test_templates_filter_by_band(templates) -> None:
    assert [t.id for t in templates.search(domain_id=1, band=DifficultyBand.HARD)] == ["tpl-hard"]
    assert [t.id for t in templates.search(domain_id=None, band=DifficultyBand.EASY)] == ["tpl-easy"]


async def test_generate_schedules_tomorrow_with_defaults(goals, challenges) -> None:
    goal = goals.add(Goal(id="", user_id="u1", domain_id=1, title="Learn German", started_at=NOW))
    generator = ScriptedGenerator({"title": "Order coffee in German", "difficulty": 42})
    use_case = GenerateChallengeUseCase(
        goals=goals,
        preferences=StaticPreferences(),
        challenges=challenges,
        generator=generator,
        clock=lambda: NOW,
    )

    challenge = await use_case.execute("u1", goal.id)

    assert challenge.title == "Order coffee in German"
    assert challenge.description == "No description provided"
    assert challenge.difficulty == 5
    assert challenge.is_reality_shift is False
    assert challenge.scheduled_date == TODAY + timedelta(days=1)
    assert "Learn German" in generator.prompts[0]


async def test_generate_for_unknown_goal(goals, challenges) -> None:
    use_case = GenerateChallengeUseCase(
        goals=goals,
        preferences=StaticPreferences(),
        challenges=challenges,
        generator=ScriptedGenerator({}),
    )

    with pytest.raises(GoalNotFoundError):
        await use_case.execute("u1", "goal-404")


async def test_generate_timeout_becomes_gateway_timeout(goals, challenges) -> None:
    goal = goals.add(Goal(id="", user_id="u1", domain_id=1, title="Learn German", started_at=NOW))
    use_case = GenerateChallengeUseCase(
        goals=goals,
        preferences=StaticPreferences(),
        challenges=challenges,
        generator=ScriptedGenerator(RequestTimeoutError("openai:chat.completions", 30000)),
    )

    with pytest.raises(UpstreamTimeoutError) as excinfo:
        await use_case.execute("u1", goal.id)

    assert excinfo.value.status == 504
    assert challenges.challenges == {}


def test_goal_actions(goals) -> None:
    goal = goals.add(Goal(id="", user_id="u1", domain_id=2, title="Touch toes", started_at=NOW))
    use_case = GoalActionUseCase(goals=goals, clock=lambda: NOW)

    assert use_case.execute("u1", goal.id, "archive").status is GoalStatus.ARCHIVED
    assert use_case.execute("u1", goal.id, "extend").status is GoalStatus.ACTIVE

    follow_up = use_case.execute("u1", goal.id, "levelup")

    assert follow_up.title == "Touch toes (Level 2)"
    assert follow_up.domain_id == 2
    assert goals.get_for_user(goal.id, "u1").status is GoalStatus.COMPLETED


def test_goal_action_checks_ownership_before_action_name(goals) -> None:
    goal = goals.add(Goal(id="", user_id="u1", domain_id=2, title="Touch toes", started_at=NOW))
    use_case = GoalActionUseCase(goals=goals)

    with pytest.raises(GoalNotFoundError):
        use_case.execute("u2", goal.id, "explode")
    with pytest.raises(InvalidGoalActionError):
        use_case.execute("u1", goal.id, "explode")
