"""Slide sequencing for the quiz funnel player.

A respondent walks the slides of a quiz in order. The only branching rule is
``conditionalLogic.showIf``: a slide carrying it is shown only when the
referenced slide was answered with the referenced option, otherwise it is
skipped. ``QuizRunner`` applies that rule on top of a ``SessionState`` and
hands every change to a progress callback so the caller can persist it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from funnel.config import LOADING_ITEM_DEFAULT_MS, LOADING_TAIL_MS
from funnel.errors import InvalidSelectionError, QuizCompletedError
from funnel.models.quizzes import (
    CHOICE_TYPES,
    SINGLE_CHOICE_TYPES,
    QuizDefinition,
    Slide,
    SlideType,
)
from funnel.models.responses import Answer
from funnel.utils.time_utils import epoch_ms

log = logging.getLogger(__name__)

ProgressCallback = Callable[["SessionState", bool], None]


@dataclass
class SessionState:
    """Where a respondent is in a quiz and what they answered so far."""

    session_id: str
    answers: list[Answer] = field(default_factory=list)
    current_slide: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "sessionId": self.session_id,
            "answers": [answer.model_dump() for answer in self.answers],
            "currentSlide": self.current_slide,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> SessionState:
        raw_answers = data.get("answers") or []
        answers = [
            Answer.model_validate(item)
            for item in raw_answers
            if isinstance(item, dict)
        ]
        current = data.get("currentSlide") or 0
        if not isinstance(current, int) or isinstance(current, bool):
            current = 0
        return cls(
            session_id=str(data.get("sessionId") or ""),
            answers=answers,
            current_slide=max(0, current),
        )


def find_answer(answers: Sequence[Answer], slide_id: str) -> Answer | None:
    """Return the first answer recorded for a slide."""
    return next((answer for answer in answers if answer.slideId == slide_id), None)


def is_slide_visible(slide: Slide, answers: Sequence[Answer]) -> bool:
    """Check the slide's showIf rule against the answers given so far."""
    logic = slide.conditionalLogic
    if logic is None or logic.showIf is None:
        return True
    condition = logic.showIf
    answer = find_answer(answers, condition.slideId)
    return answer is not None and condition.optionId in answer.selectedOptions


def next_slide_index(
    slides: Sequence[Slide],
    current_index: int,
    answers: Sequence[Answer],
) -> int:
    """Index of the next visible slide, or len(slides) when the funnel ends."""
    index = current_index + 1
    while index < len(slides):
        if is_slide_visible(slides[index], answers):
            return index
        log.debug("Skipping slide %s: showIf not satisfied", slides[index].id)
        index += 1
    return len(slides)


def loading_sequence_ms(slide: Slide) -> int:
    """Total time a loading slide stays on screen before auto-advancing."""
    items = slide.content.items or []
    total = sum(item.duration or LOADING_ITEM_DEFAULT_MS for item in items)
    return total + LOADING_TAIL_MS


class QuizRunner:
    """State machine driving one respondent through a quiz."""

    def __init__(
        self,
        quiz: QuizDefinition,
        state: SessionState,
        on_progress: ProgressCallback | None = None,
    ):
        self.quiz = quiz
        self.state = state
        self.on_progress = on_progress
        self.pending_selection: list[str] = []

    @property
    def slides(self) -> list[Slide]:
        return self.quiz.slides

    @property
    def is_complete(self) -> bool:
        return self.state.current_slide >= len(self.slides)

    @property
    def current_slide(self) -> Slide | None:
        if self.is_complete:
            return None
        return self.slides[self.state.current_slide]

    @property
    def progress(self) -> float:
        """Progress bar fill in percent, counting the slide on screen."""
        if not self.slides:
            return 100.0
        position = min(self.state.current_slide + 1, len(self.slides))
        return position / len(self.slides) * 100

    @property
    def can_go_back(self) -> bool:
        return self.quiz.settings.allowBack and self.state.current_slide > 0

    def _require_slide(self) -> Slide:
        slide = self.current_slide
        if slide is None:
            raise QuizCompletedError(
                f"Session {self.state.session_id} already completed quiz {self.quiz.slug}"
            )
        return slide

    def select_option(self, option_id: str) -> bool:
        """Handle a click on an option.

        Single-answer slides advance at once and return True. Multi-select
        slides toggle the option in the pending selection and return False.
        """
        slide = self._require_slide()
        if slide.type not in CHOICE_TYPES:
            raise InvalidSelectionError(f"Slide {slide.id} ({slide.type.value}) has no options")
        if option_id not in slide.option_ids():
            raise InvalidSelectionError(f"Unknown option {option_id} on slide {slide.id}")

        if slide.type == SlideType.MULTI_SELECT:
            if option_id in self.pending_selection:
                self.pending_selection.remove(option_id)
            else:
                self.pending_selection.append(option_id)
            return False

        self.advance([option_id])
        return True

    def continue_(self) -> int:
        """Press the continue button (info, multi-select, results, loading end)."""
        slide = self._require_slide()
        if slide.type in SINGLE_CHOICE_TYPES:
            raise InvalidSelectionError(f"Slide {slide.id} advances by picking an option")
        if slide.type == SlideType.MULTI_SELECT and not self.pending_selection:
            raise InvalidSelectionError(f"Select at least one option on slide {slide.id}")
        return self.advance(list(self.pending_selection))

    def advance(self, selected: Sequence[str] = ()) -> int:
        """Record the answer for the current slide and move to the next visible one."""
        slide = self._require_slide()
        self.state.answers.append(
            Answer(
                slideId=slide.id,
                slideType=slide.type.value,
                selectedOptions=list(selected),
                timestamp=epoch_ms(),
            )
        )
        self.state.current_slide = next_slide_index(
            self.slides, self.state.current_slide, self.state.answers
        )
        self.pending_selection = []
        if self.is_complete:
            log.info("Session %s completed quiz %s", self.state.session_id, self.quiz.slug)
        self._emit()
        return self.state.current_slide

    def go_back(self) -> int:
        """Return to the previously answered slide, dropping its answer."""
        if not self.can_go_back:
            return self.state.current_slide
        if self.state.answers:
            last = self.state.answers.pop()
            index = self.quiz.slide_index(last.slideId)
        else:
            index = None
        if index is None:
            index = self.state.current_slide - 1
        self.state.current_slide = max(0, min(index, len(self.slides) - 1))
        self.pending_selection = []
        self._emit()
        return self.state.current_slide

    def _emit(self) -> None:
        if self.on_progress is not None:
            self.on_progress(self.state, self.is_complete)
