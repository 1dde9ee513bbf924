# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from realityshift.application.services.coaching import (
    AICoachResponder,
    ContextualCoachResponder,
    FallbackCoachResponder,
)
from realityshift.application.services.habit_interpreters import (
    AIHabitInterpreter,
    FallbackInterpreter,
    KeywordHabitInterpreter,
)
from realityshift.application.services.onboarding import (
    AIGoalSuggester,
    DefaultGoalSuggester,
    FallbackGoalSuggester,
)
from realityshift.application.services.password_hashing import BcryptPasswordHasher
from realityshift.application.services.session_tokens import JwtSessionCodec
from realityshift.application.use_cases.challenges.accept_template import AcceptTemplateUseCase
from realityshift.application.use_cases.challenges.complete_challenge import (
    CompleteChallengeUseCase,
    SkipChallengeUseCase,
)
from realityshift.application.use_cases.challenges.generate_challenge import (
    GenerateChallengeUseCase,
)
from realityshift.application.use_cases.challenges.list_challenges import (
    ListChallengesUseCase,
    ListTemplatesUseCase,
)
from realityshift.application.use_cases.coaching.coaches import (
    CreateCoachUseCase,
    DeleteCoachUseCase,
    ListCoachesUseCase,
)
from realityshift.application.use_cases.coaching.expert_chat import (
    ExpertChatUseCase,
    GetChatHistoryUseCase,
)
from realityshift.application.use_cases.coaching.onboarding import AnalyzeOnboardingUseCase
from realityshift.application.use_cases.coaching.progress import ProgressSnapshotBuilder
from realityshift.application.use_cases.goals.create_goal import CreateGoalUseCase
from realityshift.application.use_cases.goals.goal_action import GoalActionUseCase
from realityshift.application.use_cases.goals.list_goals import ListDomainsUseCase, ListGoalsUseCase
from realityshift.application.use_cases.habits.interpret_habits import InterpretHabitsUseCase
from realityshift.application.use_cases.habits.log_habits import GetHabitDayUseCase, LogHabitsUseCase
from realityshift.application.use_cases.habits.manage_habits import (
    CreateHabitUseCase,
    DeleteHabitUseCase,
    ListHabitsUseCase,
    UpdateHabitUseCase,
)
from realityshift.application.use_cases.journal.diary import (
    AddDiaryEntryUseCase,
    ListDiaryEntriesUseCase,
)
from realityshift.application.use_cases.journal.surveys import ListSurveysUseCase, SubmitSurveyUseCase
from realityshift.application.use_cases.media.synthesize_speech import SynthesizeSpeechUseCase
from realityshift.application.use_cases.media.transcribe_audio import TranscribeAudioUseCase
from realityshift.application.use_cases.users.complete_onboarding import CompleteOnboardingUseCase
from realityshift.application.use_cases.users.demo_login import DemoLoginUseCase
from realityshift.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from realityshift.application.use_cases.users.login_user import LoginUserUseCase
from realityshift.application.use_cases.users.preferences import (
    GetPreferencesUseCase,
    SavePreferencesUseCase,
)
from realityshift.application.use_cases.users.register_user import RegisterUserUseCase
from realityshift.infrastructure.ai import AnthropicMessagesClient, OpenAIGateway
from realityshift.infrastructure.db.session import Database
from realityshift.infrastructure.repositories.coaching import (
    SqlAlchemyCoachRepository,
    SqlAlchemyConversationRepository,
)
from realityshift.infrastructure.repositories.goals import (
    SqlAlchemyChallengeRepository,
    SqlAlchemyChallengeTemplateRepository,
    SqlAlchemyGoalDomainRepository,
    SqlAlchemyGoalRepository,
)
from realityshift.infrastructure.repositories.habits import (
    SqlAlchemyHabitLogRepository,
    SqlAlchemyHabitRepository,
)
from realityshift.infrastructure.repositories.journal import (
    SqlAlchemyDiaryRepository,
    SqlAlchemySurveyRepository,
)
from realityshift.infrastructure.repositories.users import (
    SqlAlchemyPreferencesRepository,
    SqlAlchemyUserRepository,
)
from realityshift.interfaces.http.controllers.auth_controller import AuthController
from realityshift.interfaces.http.controllers.challenges_controller import ChallengesController
from realityshift.interfaces.http.controllers.coaching_controller import CoachingController
from realityshift.interfaces.http.controllers.goals_controller import GoalsController
from realityshift.interfaces.http.controllers.habits_controller import HabitsController
from realityshift.interfaces.http.controllers.journal_controller import JournalController
from realityshift.interfaces.http.controllers.media_controller import MediaController
from realityshift.interfaces.http.controllers.misc_controller import MiscController
from realityshift.interfaces.http.controllers.onboarding_controller import OnboardingController
from realityshift.interfaces.http.controllers.settings_controller import SettingsController
from realityshift.shared.config import AppConfig


class Container:
    """Wires repositories, AI adapters, use cases and controllers for one app."""

    def __init__(self, config: AppConfig, database: Database) -> None:
        self.config = config
        self.database = database

    # Core services

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.security.bcrypt_rounds)

    @cached_property
    def session_codec(self) -> JwtSessionCodec:
        security = self.config.security
        return JwtSessionCodec(
            security.session_secret, ttl=timedelta(days=security.session_ttl_days)
        )

    @cached_property
    def anthropic_client(self) -> AnthropicMessagesClient:
        ai = self.config.ai
        return AnthropicMessagesClient(
            api_key=ai.anthropic_api_key,
            base_url=ai.anthropic_base_url,
            version=ai.anthropic_version,
            model=ai.coach_model,
            timeout_ms=ai.default_timeout_ms,
        )

    @cached_property
    def openai_gateway(self) -> OpenAIGateway:
        ai = self.config.ai
        return OpenAIGateway(
            api_key=ai.openai_api_key,
            base_url=ai.openai_base_url,
            challenge_model=ai.challenge_model,
            transcription_model=ai.transcription_model,
            speech_model=ai.speech_model,
            timeout_ms=ai.default_timeout_ms,
            transcription_timeout_ms=ai.transcription_timeout_ms,
        )

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database.session_factory)

    @cached_property
    def preferences_repository(self) -> SqlAlchemyPreferencesRepository:
        return SqlAlchemyPreferencesRepository(self.database.session_factory)

    @cached_property
    def domain_repository(self) -> SqlAlchemyGoalDomainRepository:
        return SqlAlchemyGoalDomainRepository(self.database.session_factory)

    @cached_property
    def goal_repository(self) -> SqlAlchemyGoalRepository:
        return SqlAlchemyGoalRepository(self.database.session_factory)

    @cached_property
    def template_repository(self) -> SqlAlchemyChallengeTemplateRepository:
        return SqlAlchemyChallengeTemplateRepository(self.database.session_factory)

    @cached_property
    def challenge_repository(self) -> SqlAlchemyChallengeRepository:
        return SqlAlchemyChallengeRepository(self.database.session_factory)

    @cached_property
    def habit_repository(self) -> SqlAlchemyHabitRepository:
        return SqlAlchemyHabitRepository(self.database.session_factory)

    @cached_property
    def habit_log_repository(self) -> SqlAlchemyHabitLogRepository:
        return SqlAlchemyHabitLogRepository(self.database.session_factory)

    @cached_property
    def diary_repository(self) -> SqlAlchemyDiaryRepository:
        return SqlAlchemyDiaryRepository(self.database.session_factory)

    @cached_property
    def survey_repository(self) -> SqlAlchemySurveyRepository:
        return SqlAlchemySurveyRepository(self.database.session_factory)

    @cached_property
    def coach_repository(self) -> SqlAlchemyCoachRepository:
        return SqlAlchemyCoachRepository(self.database.session_factory)

    @cached_property
    def conversation_repository(self) -> SqlAlchemyConversationRepository:
        return SqlAlchemyConversationRepository(self.database.session_factory)

    # AI strategies

    @cached_property
    def habit_interpreter(self) -> FallbackInterpreter:
        return FallbackInterpreter(
            AIHabitInterpreter(
                self.anthropic_client, timeout_ms=self.config.ai.interpretation_timeout_ms
            ),
            KeywordHabitInterpreter(),
        )

    @cached_property
    def coach_responder(self) -> FallbackCoachResponder:
        return FallbackCoachResponder(
            AICoachResponder(self.anthropic_client), ContextualCoachResponder()
        )

    @cached_property
    def goal_suggester(self) -> FallbackGoalSuggester:
        return FallbackGoalSuggester(AIGoalSuggester(self.anthropic_client), DefaultGoalSuggester())

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=RegisterUserUseCase(
                users=self.user_repository,
                password_hasher=self.password_hasher,
                sessions=self.session_codec,
            ),
            login_use_case=LoginUserUseCase(
                users=self.user_repository,
                password_hasher=self.password_hasher,
                sessions=self.session_codec,
            ),
            demo_login_use_case=DemoLoginUseCase(
                users=self.user_repository,
                goals=self.goal_repository,
                challenges=self.challenge_repository,
                surveys=self.survey_repository,
                password_hasher=self.password_hasher,
                sessions=self.session_codec,
            ),
            current_user_use_case=GetCurrentUserUseCase(users=self.user_repository),
        )

    @cached_property
    def goals_controller(self) -> GoalsController:
        return GoalsController(
            list_goals_use_case=ListGoalsUseCase(goals=self.goal_repository),
            list_domains_use_case=ListDomainsUseCase(domains=self.domain_repository),
            create_goal_use_case=CreateGoalUseCase(
                goals=self.goal_repository,
                templates=self.template_repository,
                challenges=self.challenge_repository,
            ),
            goal_action_use_case=GoalActionUseCase(goals=self.goal_repository),
        )

    @cached_property
    def challenges_controller(self) -> ChallengesController:
        return ChallengesController(
            list_use_case=ListChallengesUseCase(challenges=self.challenge_repository),
            templates_use_case=ListTemplatesUseCase(templates=self.template_repository),
            generate_use_case=GenerateChallengeUseCase(
                goals=self.goal_repository,
                preferences=self.preferences_repository,
                challenges=self.challenge_repository,
                generator=self.openai_gateway,
            ),
            complete_use_case=CompleteChallengeUseCase(challenges=self.challenge_repository),
            skip_use_case=SkipChallengeUseCase(challenges=self.challenge_repository),
            accept_use_case=AcceptTemplateUseCase(
                templates=self.template_repository,
                goals=self.goal_repository,
                challenges=self.challenge_repository,
            ),
        )

    @cached_property
    def habits_controller(self) -> HabitsController:
        return HabitsController(
            list_use_case=ListHabitsUseCase(habits=self.habit_repository, logs=self.habit_log_repository),
            create_use_case=CreateHabitUseCase(habits=self.habit_repository),
            update_use_case=UpdateHabitUseCase(habits=self.habit_repository),
            delete_use_case=DeleteHabitUseCase(habits=self.habit_repository),
            day_use_case=GetHabitDayUseCase(habits=self.habit_repository, logs=self.habit_log_repository),
            log_use_case=LogHabitsUseCase(habits=self.habit_repository, logs=self.habit_log_repository),
            interpret_use_case=InterpretHabitsUseCase(
                habits=self.habit_repository, interpreter=self.habit_interpreter
            ),
        )

    @cached_property
    def journal_controller(self) -> JournalController:
        return JournalController(
            add_entry_use_case=AddDiaryEntryUseCase(diary=self.diary_repository),
            list_entries_use_case=ListDiaryEntriesUseCase(diary=self.diary_repository),
            submit_survey_use_case=SubmitSurveyUseCase(surveys=self.survey_repository),
            list_surveys_use_case=ListSurveysUseCase(surveys=self.survey_repository),
        )

    @cached_property
    def settings_controller(self) -> SettingsController:
        return SettingsController(
            get_use_case=GetPreferencesUseCase(preferences=self.preferences_repository),
            save_use_case=SavePreferencesUseCase(preferences=self.preferences_repository),
        )

    @cached_property
    def coaching_controller(self) -> CoachingController:
        return CoachingController(
            list_coaches_use_case=ListCoachesUseCase(coaches=self.coach_repository),
            create_coach_use_case=CreateCoachUseCase(coaches=self.coach_repository),
            delete_coach_use_case=DeleteCoachUseCase(coaches=self.coach_repository),
            history_use_case=GetChatHistoryUseCase(conversations=self.conversation_repository),
            chat_use_case=ExpertChatUseCase(
                progress=ProgressSnapshotBuilder(
                    goals=self.goal_repository,
                    challenges=self.challenge_repository,
                    surveys=self.survey_repository,
                ),
                coaches=self.coach_repository,
                conversations=self.conversation_repository,
                responder=self.coach_responder,
            ),
        )

    @cached_property
    def onboarding_controller(self) -> OnboardingController:
        return OnboardingController(
            analyze_use_case=AnalyzeOnboardingUseCase(suggester=self.goal_suggester),
            complete_use_case=CompleteOnboardingUseCase(users=self.user_repository),
        )

    @cached_property
    def media_controller(self) -> MediaController:
        return MediaController(
            transcribe_use_case=TranscribeAudioUseCase(transcriber=self.openai_gateway),
            speech_use_case=SynthesizeSpeechUseCase(speech=self.openai_gateway),
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def controllers(self) -> list:
        return [
            self.misc_controller,
            self.auth_controller,
            self.goals_controller,
            self.challenges_controller,
            self.habits_controller,
            self.journal_controller,
            self.settings_controller,
            self.coaching_controller,
            self.onboarding_controller,
            self.media_controller,
        ]
