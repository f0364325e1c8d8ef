"""ScoringEngine — the conversational driver for scoring tests.

The engine turns one inbound chat message into one reply.  It owns no
transport: callers (the HTTP service, the console simulator, a chat bot
adapter) pass ``(user_id, text)`` and send back ``ChatReply.text``.

Message dispatch:
    /start          — welcome text listing the test commands
    /<test command> — start (or restart) that test
    /cancel         — discard the active session
    anything else   — an answer to the current question

Answer handling:
    - numbered replies select an option of the current question
    - while ventilation status is unknown, the reply to the
      ``respiratory_rate`` question is read as yes/no; the same question is
      then shown again for its numeric answer
    - questions rejected by the :class:`SkipPolicy` are recorded as 0 and
      never shown
    - once every question is consumed the session is scored, the result is
      returned and the session is discarded

All work for one user runs under that user's lock from :class:`SessionStore`.
"""

from __future__ import annotations

import logging

from scoring_rulesets.constants import (
    CANCEL_COMMAND,
    NO_REPLIES,
    PARAMETER_HINTS,
    START_COMMAND,
    VENTILATION_CARRIER_PARAMETER,
    VENTILATION_PARAMETER,
    YES_REPLIES,
)
from scoring_rulesets.models.question import Question
from scoring_rulesets.models.session import (
    ChatReply,
    QuestionPayload,
    QuestionStep,
    ResultStep,
    SessionInfo,
)
from scoring_rulesets.mortality import estimate_mortality_risk
from scoring_rulesets.prompt import MessageRenderer
from scoring_rulesets.ruleset import TestStore
from scoring_rulesets.session import DiagnosisSession
from scoring_rulesets.skip_policy import SkipPolicy
from scoring_rulesets.store import SessionStore

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Drives scoring sessions one chat message at a time.

    Args:
        store: a loaded :class:`TestStore` instance
        sessions: session registry; a fresh one is created if omitted
        skip_policy: skip decision table; defaults to the APACHE policy
        renderer: message renderer; defaults to the bundled templates
    """

    def __init__(
        self,
        store: TestStore,
        sessions: SessionStore | None = None,
        skip_policy: SkipPolicy | None = None,
        renderer: MessageRenderer | None = None,
    ) -> None:
        self._store = store
        self._sessions = sessions or SessionStore()
        self._skip_policy = skip_policy or SkipPolicy()
        self._renderer = renderer or MessageRenderer()

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    # ==================================================================
    # Entry points
    # ==================================================================

    def handle_message(self, user_id: str, text: str) -> ChatReply:
        """Process one inbound message and return the reply."""
        message = text.strip()
        command = message.split(" ", 1)[0].lower() if message.startswith("/") else ""

        with self._sessions.user_lock(user_id):
            if command == START_COMMAND:
                return self._reply(user_id, self._renderer.welcome(self._store.commands()))
            if command == CANCEL_COMMAND:
                return self.cancel(user_id)
            test = self._store.find_by_command(command) if command else None
            if test is not None:
                return self.start_test(user_id, test.name)
            return self._handle_answer(user_id, message)

    def start_test(self, user_id: str, test_name: str) -> ChatReply:
        """Start *test_name* for *user_id*, replacing any active session."""
        with self._sessions.user_lock(user_id):
            try:
                test = self._store.get_test(test_name)
            except KeyError:
                logger.warning("User %s requested unknown test %r", user_id, test_name)
                return self._reply(user_id, self._renderer.notice("test_unavailable", name=test_name))

            session = self._sessions.start(user_id, test)
            return self._ask_next_question(user_id, session)

    def cancel(self, user_id: str) -> ChatReply:
        """Discard *user_id*'s session, if any."""
        with self._sessions.user_lock(user_id):
            if self._sessions.remove(user_id) is not None:
                logger.info("User %s cancelled the active session", user_id)
            return self._reply(
                user_id,
                self._renderer.notice("cancelled", commands=self._command_list()),
            )

    def session_info(self, user_id: str) -> SessionInfo | None:
        """Snapshot of *user_id*'s active session, or None."""
        with self._sessions.user_lock(user_id):
            session = self._sessions.get(user_id)
            if session is None:
                return None
            return SessionInfo(
                user_id=user_id,
                test_name=session.test.name,
                question_number=session.current_question_number,
                total_questions=session.total_questions,
                answers=session.collected_answers(),
                total_score=session.total_score(),
                complete=session.is_complete(),
            )

    # ==================================================================
    # Answer handling
    # ==================================================================

    def _handle_answer(self, user_id: str, message: str) -> ChatReply:
        session = self._sessions.get(user_id)
        if session is None:
            return self._reply(
                user_id,
                self._renderer.notice("no_active_test", commands=self._command_list()),
            )

        question = session.current_question()
        if question is None:
            return self._reply(user_id, self._renderer.notice("question_not_found"))

        if self._awaiting_ventilation(session, question):
            return self._handle_ventilation(user_id, session, question, message)

        try:
            index = int(message) - 1
        except ValueError:
            logger.warning("User %s sent a non-numeric answer", user_id)
            return self._reply(user_id, self._renderer.notice("enter_number"))

        options = question.possible_answers()
        if not 0 <= index < len(options):
            logger.warning("User %s chose option %d of %d", user_id, index + 1, len(options))
            return self._reply(user_id, self._renderer.notice("choose_listed"))

        session.record_answer(question.parameter_name, question.value_for_answer(options[index]))

        if session.is_complete():
            return self._finish(user_id, session)
        return self._ask_next_question(user_id, session)

    @staticmethod
    def _awaiting_ventilation(session: DiagnosisSession, question: Question) -> bool:
        return (
            question.parameter_name == VENTILATION_CARRIER_PARAMETER
            and not session.has_answer_for(VENTILATION_PARAMETER)
        )

    def _handle_ventilation(
        self,
        user_id: str,
        session: DiagnosisSession,
        question: Question,
        message: str,
    ) -> ChatReply:
        """Record the yes/no ventilation reply, then re-present the question."""
        reply = message.lower()
        if reply in YES_REPLIES:
            session.record_answer(VENTILATION_PARAMETER, 1)
        elif reply in NO_REPLIES:
            session.record_answer(VENTILATION_PARAMETER, 0)
        else:
            return self._reply(user_id, self._renderer.notice("ventilation_prompt"))
        return self._present(user_id, session, question)

    # ==================================================================
    # Step construction
    # ==================================================================

    def _ask_next_question(self, user_id: str, session: DiagnosisSession) -> ChatReply:
        """Serve the next question that the skip policy lets through.

        Skipped questions are recorded as 0; so are questions without any
        answer options, which cannot be answered.  If the questions run out, a
        test with no questions at all is reported as an error; otherwise the
        remaining questions were all skipped and the session is scored.
        """
        while True:
            question = session.next_question()
            if question is None:
                if session.total_questions == 0:
                    self._sessions.remove(user_id)
                    logger.warning("Test %r has no questions", session.test.name)
                    return self._reply(user_id, self._renderer.notice("no_questions"))
                return self._finish(user_id, session)

            if not question.answers:
                logger.warning(
                    "Question %s of %r has no answer options; recording 0",
                    question.parameter_name, session.test.name,
                )
                session.record_answer(question.parameter_name, 0)
                continue
            if self._skip_policy.should_skip(question, session.collected_answers()):
                session.record_answer(question.parameter_name, 0)
                continue
            return self._present(user_id, session, question)

    def _present(self, user_id: str, session: DiagnosisSession, question: Question) -> ChatReply:
        awaiting = self._awaiting_ventilation(session, question)
        hint = PARAMETER_HINTS.get(question.parameter_name)
        # ventilation already answered; the yes/no hint no longer applies
        if question.parameter_name == VENTILATION_CARRIER_PARAMETER and not awaiting:
            hint = None
        step = QuestionStep(
            test_name=session.test.name,
            question=QuestionPayload(
                number=session.current_question_number,
                total=session.total_questions,
                text=question.text,
                parameter_name=question.parameter_name,
                options=question.possible_answers(),
                hint=hint,
            ),
            awaiting_ventilation=awaiting,
        )
        return self._reply(user_id, self._renderer.question(step), step)

    def _finish(self, user_id: str, session: DiagnosisSession) -> ChatReply:
        """Score the session, drop it from the registry and report the result."""
        total = session.total_score()
        step = ResultStep(
            test_name=session.test.name,
            total_score=total,
            diagnosis=session.diagnosis_result(),
            mortality_risk=estimate_mortality_risk(total, session.test.name),
        )
        self._sessions.remove(user_id)
        logger.info(
            "User %s completed %s: score=%d diagnosis=%r",
            user_id, step.test_name, total, step.diagnosis,
        )
        return self._reply(user_id, self._renderer.result(step, self._store.commands()), step)

    # ==================================================================
    # Helpers
    # ==================================================================

    def _command_list(self) -> str:
        return " or ".join(self._store.commands())

    @staticmethod
    def _reply(user_id: str, text: str, step: QuestionStep | ResultStep | None = None) -> ChatReply:
        return ChatReply(user_id=user_id, text=text, step=step)
