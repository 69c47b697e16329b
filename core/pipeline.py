from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from base_classes import Declined, InvalidType, NotInRange, NotValid, QuestionError
from core.question import OnError, Question

if TYPE_CHECKING:
    from core.session import Session

CONFIRM_QUESTION = "Are you sure?  "


class Step(Enum):
    RENDER = 'render'
    READ = 'read'
    VALIDATE = 'validate'
    CONVERT = 'convert'
    RANGE_CHECK = 'range_check'
    CONFIRM = 'confirm'
    DONE = 'done'


class Outcome(Enum):
    SUCCESS = 'success'
    RETRY = 'retry'


@dataclass(frozen=True)
class StepResult:
    """
    Tagged result of one pipeline step. A retry carries the response key
    explaining it (None for a silent retry, e.g. a declined confirmation).
    """
    outcome: Outcome
    value: Any = None
    kind: Optional[str] = None
    step: Optional[Step] = None

    @classmethod
    def ok(cls, value: Any) -> 'StepResult':
        return cls(Outcome.SUCCESS, value)

    @classmethod
    def retry(cls, kind: Optional[str], value: Any = None) -> 'StepResult':
        return cls(Outcome.RETRY, value, kind)


class AnswerPipeline:
    """
    Drives one question through RENDER -> READ -> VALIDATE -> CONVERT ->
    RANGE_CHECK -> CONFIRM -> DONE.

    Every recoverable failure becomes a retry: its response is said, the
    ask_on_error directive is applied and input is read again. There is no
    limit on the number of retries. Any other exception propagates.

    The question is local to the pipeline; nothing is left behind on the
    session when run() returns or raises.
    """

    def __init__(self, session: 'Session', question: Question) -> None:
        self.session = session
        self.question = question
        self.attempts = 0

    def run(self) -> Any:
        q = self.question
        logger = self.session.logger
        try:
            q.freeze()
            if logger:
                logger.ask_begin(q.prompt, q.type_name())
            self._render()
            with self.session.completion(q):
                while True:
                    self.attempts += 1
                    result = self._attempt()
                    if result.outcome is Outcome.SUCCESS:
                        if logger:
                            logger.ask_done(self.attempts, result.value, secret=q.secret)
                        return result.value
                    if logger:
                        logger.ask_retry(result.kind, self.attempts, result.value, secret=q.secret)
                    self._explain_error(result.kind)
        except Exception as exc:
            if logger:
                logger.error('core.pipeline', exc)
            raise

    # States -------------------------------------------------------------
    def _steps(self) -> List[Tuple[Step, Callable[[Any], StepResult]]]:
        return [
            (Step.READ, self._read),
            (Step.VALIDATE, self._validate),
            (Step.CONVERT, self._convert),
            (Step.RANGE_CHECK, self._range_check),
            (Step.CONFIRM, self._confirm),
        ]

    def _attempt(self) -> StepResult:
        value: Any = None
        for step, handler in self._steps():
            result = handler(value)
            if result.outcome is Outcome.RETRY:
                return StepResult(result.outcome, result.value, result.kind, step)
            value = result.value
        return StepResult(Outcome.SUCCESS, value, step=Step.DONE)

    def _render(self) -> None:
        q = self.question
        self.session.say(q.statement(), q.template_context())

    def _read(self, _: Any) -> StepResult:
        return StepResult.ok(self.session.get_response(self.question))

    def _validate(self, raw: str) -> StepResult:
        raw = self.question.answer_or_default(raw)
        if not self.question.valid_answer(raw):
            return StepResult.retry(NotValid.kind, raw)
        return StepResult.ok(raw)

    def _convert(self, raw: str) -> StepResult:
        try:
            return StepResult.ok(self.question.convert(raw))
        except QuestionError as e:
            return StepResult.retry(e.kind, raw)
        except (ValueError, TypeError):
            return StepResult.retry(InvalidType.kind, raw)

    def _range_check(self, answer: Any) -> StepResult:
        if not self.question.in_range(answer):
            return StepResult.retry(NotInRange.kind, answer)
        return StepResult.ok(answer)

    def _confirm(self, answer: Any) -> StepResult:
        q = self.question
        if not q.confirm:
            return StepResult.ok(answer)
        if q.confirm is True:
            confirm_question = CONFIRM_QUESTION
        else:
            confirm_question = self.session.render(str(q.confirm), {'question': q.prompt, 'answer': answer})
        # A separate session keeps the confirmation independent of this question
        if self.session.nested().agree(confirm_question):
            return StepResult.ok(answer)
        return StepResult.retry(Declined.kind, answer)

    def _explain_error(self, kind: Optional[str]) -> None:
        q = self.question
        responses = q.responses
        if kind is not None:
            self.session.say(str(responses.get(kind, '')), q.template_context())
        directive = responses.get('ask_on_error')
        if directive is OnError.QUESTION or directive == OnError.QUESTION.value:
            self._render()
        elif directive:
            self.session.say(str(directive), q.template_context())
