from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from typing import Any

import pytest

from realityshift.application.services.habit_interpreters import KeywordHabitInterpreter
from realityshift.application.use_cases.habits.interpret_habits import (
    NO_HABITS_MESSAGE,
    TIMEOUT_MESSAGE,
    InterpretHabitsUseCase,
)
from realityshift.application.use_cases.habits.log_habits import (
    GetHabitDayUseCase,
    LogHabitsUseCase,
    LogRequest,
)
from realityshift.application.use_cases.habits.manage_habits import (
    CreateHabitUseCase,
    DeleteHabitUseCase,
    ListHabitsUseCase,
    UpdateHabitUseCase,
)
from realityshift.application.use_cases.journal.surveys import (
    ListSurveysUseCase,
    SubmitSurveyUseCase,
    SurveyInput,
)
from realityshift.domain.habits.entities import Habit, HabitLog, LogSource
from realityshift.domain.habits.exceptions import HabitNotFoundError
from realityshift.domain.habits.repositories import HabitLogRepository, HabitRepository
from realityshift.domain.journal.entities import DailySurvey
from realityshift.domain.journal.repositories import SurveyRepository
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError, ValidationError

NOW = datetime(2025, 6, 15, 20, 0, tzinfo=UTC)
TODAY = NOW.date()


class InMemoryHabitRepository(HabitRepository):
    def __init__(self) -> None:
        self.habits: dict[str, Habit] = {}
        self._seq = 1

    def list_for_user(self, user_id: str, *, include_inactive: bool = False) -> Sequence[Habit]:
        return [
            habit
            for habit in self.habits.values()
            if habit.user_id == user_id and (include_inactive or habit.is_active)
        ]

    def get_for_user(self, habit_id: str, user_id: str) -> Habit | None:
        habit = self.habits.get(habit_id)
        return habit if habit and habit.user_id == user_id else None

    def add(self, habit: Habit) -> Habit:
        stored = replace(habit, id=f"habit-{self._seq}", created_at=NOW)
        self._seq += 1
        self.habits[stored.id] = stored
        return stored

    def update(self, habit_id: str, changes: Mapping[str, Any]) -> Habit:
        updated = replace(self.habits[habit_id], **changes)
        self.habits[habit_id] = updated
        return updated

    def delete(self, habit_id: str) -> None:
        self.habits.pop(habit_id, None)


class InMemoryHabitLogRepository(HabitLogRepository):
    def __init__(self, habits: InMemoryHabitRepository) -> None:
        self._habits = habits
        self.logs: dict[tuple[str, date], HabitLog] = {}

    def upsert(
        self,
        habit_id: str,
        log_date: date,
        *,
        completed: bool,
        notes: str | None,
        source: LogSource,
    ) -> HabitLog:
        key = (habit_id, log_date)
        existing = self.logs.get(key)
        log = HabitLog(
            id=existing.id if existing else f"log-{len(self.logs) + 1}",
            habit_id=habit_id,
            log_date=log_date,
            completed=completed,
            notes=notes,
            source=source,
        )
        self.logs[key] = log
        return log

    def for_day(self, user_id: str, day: date) -> Sequence[HabitLog]:
        owned = {habit.id for habit in self._habits.list_for_user(user_id, include_inactive=True)}
        return [log for (habit_id, log_day), log in self.logs.items() if habit_id in owned and log_day == day]

    def for_habit_since(self, habit_id: str, since: date) -> Sequence[HabitLog]:
        return [log for (owner, log_day), log in self.logs.items() if owner == habit_id and log_day >= since]


class InMemorySurveyRepository(SurveyRepository):
    def __init__(self) -> None:
        self.surveys: dict[tuple[str, date], DailySurvey] = {}

    def upsert(self, survey: DailySurvey) -> DailySurvey:
        key = (survey.user_id, survey.survey_date)
        existing = self.surveys.get(key)
        stored = replace(survey, id=existing.id if existing else f"survey-{len(self.surveys) + 1}")
        self.surveys[key] = stored
        return stored

    def since(self, user_id: str, start: date) -> Sequence[DailySurvey]:
        rows = [s for (owner, day), s in self.surveys.items() if owner == user_id and day >= start]
        return sorted(rows, key=lambda s: s.survey_date, reverse=True)


class TimingOutInterpreter:
    async def interpret(self, transcript: str, habits: Sequence[Habit]):
        raise RequestTimeoutError("anthropic", 30000)


@pytest.fixture()
def habits() -> InMemoryHabitRepository:
    return InMemoryHabitRepository()


@pytest.fixture()
def logs(habits: InMemoryHabitRepository) -> InMemoryHabitLogRepository:
    return InMemoryHabitLogRepository(habits)


def _habit(habits: InMemoryHabitRepository, name: str = "Meditate", user_id: str = "u1") -> Habit:
    return CreateHabitUseCase(habits=habits).execute(user_id, name)


def test_create_habit_applies_defaults(habits) -> None:
    habit = CreateHabitUseCase(habits=habits).execute("u1", "  Stretch  ", target_days=[1, 3, 5])

    assert habit.name == "Stretch"
    assert habit.icon == "✅"
    assert habit.frequency == "daily"
    assert habit.target_days == (1, 3, 5)


def test_create_habit_requires_name(habits) -> None:
    with pytest.raises(ValidationError) as excinfo:
        CreateHabitUseCase(habits=habits).execute("u1", "   ")

    assert excinfo.value.message == "Name is required"


def test_update_and_delete_check_ownership(habits) -> None:
    habit = _habit(habits)

    with pytest.raises(HabitNotFoundError):
        UpdateHabitUseCase(habits=habits).execute("u2", habit.id, {"name": "x"})
    with pytest.raises(ValidationError):
        DeleteHabitUseCase(habits=habits).execute("u1", None)

    updated = UpdateHabitUseCase(habits=habits).execute("u1", habit.id, {"icon": "🧘"})
    assert updated.icon == "🧘"
    assert updated.name == "Meditate"

    DeleteHabitUseCase(habits=habits).execute("u1", habit.id)
    assert habits.get_for_user(habit.id, "u1") is None


def test_relogging_same_day_overwrites(habits, logs) -> None:
    habit = _habit(habits)
    use_case = LogHabitsUseCase(habits=habits, logs=logs, clock=lambda: NOW)

    first = use_case.log_one("u1", LogRequest(habit_id=habit.id, completed=True, notes="10 min"))
    second = use_case.log_one("u1", LogRequest(habit_id=habit.id, completed=False, source=LogSource.VOICE))

    assert first.id == second.id
    assert len(logs.logs) == 1
    assert logs.logs[(habit.id, TODAY)].completed is False
    assert logs.logs[(habit.id, TODAY)].source is LogSource.VOICE


def test_batch_logging_reports_unknown_habits(habits, logs) -> None:
    habit = _habit(habits)
    foreign = _habit(habits, "Swim", user_id="u2")

    outcomes = LogHabitsUseCase(habits=habits, logs=logs, clock=lambda: NOW).log_many(
        "u1",
        [LogRequest(habit_id=habit.id, completed=True), LogRequest(habit_id=foreign.id, completed=True)],
    )

    assert outcomes[0].log is not None and outcomes[0].error is None
    assert outcomes[1].log is None
    assert outcomes[1].error == "Habit not found"
    assert (foreign.id, TODAY) not in logs.logs


def test_habit_day_pairs_every_habit_with_its_log(habits, logs) -> None:
    done = _habit(habits, "Meditate")
    _habit(habits, "Read")
    yesterday = TODAY - timedelta(days=1)
    LogHabitsUseCase(habits=habits, logs=logs).log_one("u1", LogRequest(done.id, True), yesterday)

    day, entries = GetHabitDayUseCase(habits=habits, logs=logs, clock=lambda: NOW).execute("u1", yesterday)

    assert day == yesterday
    by_name = {entry.habit.name: entry.log for entry in entries}
    assert by_name["Meditate"].completed is True
    assert by_name["Read"] is None


def test_list_habits_reports_today_and_streak(habits, logs) -> None:
    habit = _habit(habits)
    log_use_case = LogHabitsUseCase(habits=habits, logs=logs)
    for offset in (1, 2, 3):
        log_use_case.log_one("u1", LogRequest(habit.id, True), TODAY - timedelta(days=offset))
    log_use_case.log_one("u1", LogRequest(habit.id, False, notes="rest day"), TODAY - timedelta(days=4))

    statuses = ListHabitsUseCase(habits=habits, logs=logs, clock=lambda: NOW).execute("u1")

    assert len(statuses) == 1
    assert statuses[0].completed_today is False
    assert statuses[0].streak == 3


async def test_interpret_requires_transcript(habits) -> None:
    use_case = InterpretHabitsUseCase(habits=habits, interpreter=KeywordHabitInterpreter())

    with pytest.raises(ValidationError):
        await use_case.execute("u1", "   ")


async def test_interpret_without_habits_explains_why(habits) -> None:
    use_case = InterpretHabitsUseCase(habits=habits, interpreter=KeywordHabitInterpreter())

    result = await use_case.execute("u1", "I meditated")

    assert result.logs == ()
    assert result.message == NO_HABITS_MESSAGE


async def test_interpret_timeout_is_gateway_timeout(habits) -> None:
    _habit(habits)
    use_case = InterpretHabitsUseCase(habits=habits, interpreter=TimingOutInterpreter())

    with pytest.raises(UpstreamTimeoutError) as excinfo:
        await use_case.execute("u1", "I meditated")

    assert excinfo.value.message == TIMEOUT_MESSAGE
    assert excinfo.value.to_dict()["errorType"] == "timeout"


def test_survey_requires_core_scores() -> None:
    use_case = SubmitSurveyUseCase(surveys=InMemorySurveyRepository(), clock=lambda: NOW)

    with pytest.raises(ValidationError) as excinfo:
        use_case.execute("u1", SurveyInput(energy_level=5, motivation_level=None, overall_mood=7))

    assert excinfo.value.message == "Energy, motivation, and mood are required"


def test_second_survey_same_day_replaces_first() -> None:
    surveys = InMemorySurveyRepository()
    use_case = SubmitSurveyUseCase(surveys=surveys, clock=lambda: NOW)

    first = use_case.execute("u1", SurveyInput(energy_level=3, motivation_level=4, overall_mood=5))
    second = use_case.execute(
        "u1", SurveyInput(energy_level=8, motivation_level=8, overall_mood=9, biggest_win="ran 5k")
    )

    assert first.id == second.id
    listed = ListSurveysUseCase(surveys=surveys, clock=lambda: NOW).execute("u1", days=7)
    assert len(listed) == 1
    assert listed[0].energy_level == 8
    assert listed[0].biggest_win == "ran 5k"
