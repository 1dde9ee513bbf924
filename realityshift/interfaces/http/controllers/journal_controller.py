# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, request

from realityshift.application.use_cases.journal.diary import (
    AddDiaryEntryUseCase,
    ListDiaryEntriesUseCase,
)
from realityshift.application.use_cases.journal.surveys import (
    ListSurveysUseCase,
    SubmitSurveyUseCase,
    SurveyInput,
)
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.journal import DiaryEntryDTO, SurveyDTO
from realityshift.interfaces.http.presenters import diary_entry_to_json, ok, survey_to_json


class JournalController:
    """Voice diary entries and the daily check-in survey."""

    def __init__(
        self,
        *,
        add_entry_use_case: AddDiaryEntryUseCase,
        list_entries_use_case: ListDiaryEntriesUseCase,
        submit_survey_use_case: SubmitSurveyUseCase,
        list_surveys_use_case: ListSurveysUseCase,
    ) -> None:
        self._add_entry = add_entry_use_case
        self._list_entries = list_entries_use_case
        self._submit_survey = submit_survey_use_case
        self._list_surveys = list_surveys_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("journal", __name__, url_prefix="/api")
        bp.add_url_rule("/diary", view_func=self.list_entries, methods=["GET"], endpoint="diary_list")
        bp.add_url_rule("/diary", view_func=self.add_entry, methods=["POST"], endpoint="diary_add")
        bp.add_url_rule("/surveys", view_func=self.list_surveys, methods=["GET"], endpoint="surveys_list")
        bp.add_url_rule(
            "/surveys", view_func=self.submit_survey, methods=["POST"], endpoint="surveys_submit"
        )
        return bp

    @auth_required
    def list_entries(self):
        entries = self._list_entries.execute(current_user_id())
        return ok({"entries": [diary_entry_to_json(entry) for entry in entries]})

    @auth_required
    def add_entry(self):
        dto = parse_json(DiaryEntryDTO)
        entry = self._add_entry.execute(
            current_user_id(),
            transcript=dto.transcript,
            audio_duration_seconds=dto.audio_duration_seconds,
            mood_score=dto.mood_score,
            goal_id=dto.goal_id,
            challenge_id=dto.challenge_id,
        )
        return ok({"entry": diary_entry_to_json(entry)})

    @auth_required
    def list_surveys(self):
        days = request.args.get("days", default=30, type=int)
        surveys = self._list_surveys.execute(current_user_id(), days=days)
        return ok({"surveys": [survey_to_json(survey) for survey in surveys]})

    @auth_required
    def submit_survey(self):
        dto = parse_json(SurveyDTO)
        survey = self._submit_survey.execute(
            current_user_id(),
            SurveyInput(
                energy_level=dto.energy_level,
                motivation_level=dto.motivation_level,
                overall_mood=dto.overall_mood,
                sleep_quality=dto.sleep_quality,
                stress_level=dto.stress_level,
                biggest_win=dto.biggest_win,
                biggest_blocker=dto.biggest_blocker,
                gratitude_note=dto.gratitude_note,
                tomorrow_intention=dto.tomorrow_intention,
                completion_level=dto.completion_level,
            ),
        )
        return ok({"survey": survey_to_json(survey)})
