"""Terminal rendering of a quiz funnel."""
from __future__ import annotations

import logging
import time
from typing import Callable

from funnel.errors import InvalidSelectionError
from funnel.models.quizzes import SINGLE_CHOICE_TYPES, Slide, SlideType
from funnel.services.sequencer import QuizRunner, loading_sequence_ms

log = logging.getLogger(__name__)

BACK_COMMANDS = {"b", "back"}


class TerminalPlayer:
    """Plays a quiz in the terminal with numbered options."""

    def __init__(
        self,
        runner: QuizRunner,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        wait: bool = True,
    ):
        self.runner = runner
        self.input_fn = input_fn
        self.output = output
        self.wait = wait

    def run(self) -> None:
        while not self.runner.is_complete:
            slide = self.runner.current_slide
            self.render(slide)
            self.step(slide)
        self.output("")
        self.output("Thank you! Your response has been recorded.")

    def render(self, slide: Slide) -> None:
        content = slide.content
        self.output("")
        if self.runner.quiz.settings.showProgressBar:
            filled = int(self.runner.progress // 5)
            self.output(f"[{'#' * filled}{'.' * (20 - filled)}] {self.runner.progress:.0f}%")
        for text in (content.headline, content.subheadline, content.body):
            if text:
                self.output(text)
        for number, option in enumerate(content.options or [], start=1):
            self.output(f"  {number}. {option.text}")
        for bullet in content.bullets or []:
            self.output(f"  * {bullet}")
        if content.offerText:
            self.output(content.offerText)
        if content.ctaText:
            self.output(f"{content.ctaText}: {content.ctaUrl or '#'}")
        if content.guaranteeText:
            self.output(content.guaranteeText)

    def step(self, slide: Slide) -> None:
        if slide.type == SlideType.LOADING:
            self._play_loading(slide)
            self.runner.continue_()
            return

        hint = self._prompt_hint(slide)
        raw = self.input_fn(hint).strip().lower()
        if raw in BACK_COMMANDS and self.runner.can_go_back:
            self.runner.go_back()
            return

        try:
            if slide.type in SINGLE_CHOICE_TYPES:
                self.runner.select_option(self._option_id(slide, raw))
            elif slide.type == SlideType.MULTI_SELECT:
                for part in filter(None, (item.strip() for item in raw.split(","))):
                    self.runner.select_option(self._option_id(slide, part))
                self.runner.continue_()
            else:
                self.runner.continue_()
        except InvalidSelectionError as exc:
            self.runner.pending_selection = []
            self.output(f"! {exc}")

    def _prompt_hint(self, slide: Slide) -> str:
        back = " (b = back)" if self.runner.can_go_back else ""
        if slide.type in SINGLE_CHOICE_TYPES:
            return f"Pick an option{back}: "
        if slide.type == SlideType.MULTI_SELECT:
            return f"Pick options, comma separated{back}: "
        return f"{slide.content.buttonText or 'Press Enter to continue'}{back} "

    def _option_id(self, slide: Slide, raw: str) -> str:
        options = slide.content.options or []
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1].id
        # Let the runner reject it with a proper message
        return raw

    def _play_loading(self, slide: Slide) -> None:
        for item in slide.content.items or []:
            self.output(f"  ... {item.text}")
        if self.wait:
            time.sleep(loading_sequence_ms(slide) / 1000)
