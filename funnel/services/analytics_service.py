"""Service layer for quiz funnel analytics."""
import csv
import io
import math
from typing import Sequence

from funnel.models.analytics import FunnelStep, QuizAnalytics, ResponseProgress
from funnel.models.db.response import QuizResponse
from funnel.models.quizzes import QuizDefinition, Slide
from funnel.utils import ensure_aware

RECENT_RESPONSES_LIMIT = 20


def round_half_up(value: float) -> int:
    """Round like the dashboard does (0.5 goes up, never to even)."""
    return int(math.floor(value + 0.5))


def percent(part: int, total: int) -> int:
    """Whole-number percentage, 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def slide_label(slide: Slide) -> str:
    return slide.content.headline or slide.type.value


def _answered_slide_ids(response: QuizResponse) -> set[str]:
    return {
        str(answer.get("slideId"))
        for answer in response.answers
        if isinstance(answer, dict) and answer.get("slideId")
    }


def completion_stats(responses: Sequence[QuizResponse]) -> dict[str, int]:
    """Totals, completion rate and mean minutes to complete."""
    total = len(responses)
    completed = [response for response in responses if response.is_completed]
    durations_ms = [
        (ensure_aware(item.completed_at) - ensure_aware(item.started_at)).total_seconds()
        * 1000
        for item in completed
    ]
    avg_minutes = (
        round_half_up(sum(durations_ms) / len(completed) / 1000 / 60) if completed else 0
    )
    return {
        "totalResponses": total,
        "completedResponses": len(completed),
        "completionRate": percent(len(completed), total),
        "avgTimeToCompleteMinutes": avg_minutes,
    }


def funnel_steps(
    slides: Sequence[Slide],
    responses: Sequence[QuizResponse],
) -> list[FunnelStep]:
    """
    Reach and drop-off per slide.

    A response reached slide i if it answered that slide or its saved
    position is at or past i. Drop-off at slide i is how many responses
    answered slide i-1 but did not reach slide i (for the first slide,
    how many never reached it at all). The count goes negative right
    after a slide that showIf hid from most respondents.
    """
    total = len(responses)
    answered = [_answered_slide_ids(response) for response in responses]
    steps: list[FunnelStep] = []

    for index, slide in enumerate(slides):
        reached = sum(
            1
            for response, slide_ids in zip(responses, answered)
            if slide.id in slide_ids or response.current_slide >= index
        )
        if index == 0:
            previous = total
        else:
            previous_id = slides[index - 1].id
            previous = sum(1 for slide_ids in answered if previous_id in slide_ids)
        drop_off = previous - reached

        steps.append(
            FunnelStep(
                slideId=slide.id,
                slideIndex=index,
                label=slide_label(slide),
                reached=reached,
                dropOff=drop_off,
                dropOffRate=percent(drop_off, total),
                percentage=percent(reached, total),
            )
        )
    return steps


def response_progress(response: QuizResponse, slide_count: int) -> int:
    """Share of slides answered, in percent."""
    return percent(len(response.answers), slide_count)


def response_status(response: QuizResponse) -> str:
    return "Completed" if response.is_completed else "In Progress"


def build_quiz_analytics(
    quiz: QuizDefinition,
    responses: Sequence[QuizResponse],
) -> QuizAnalytics:
    """Dashboard analytics for one quiz. Responses are expected newest first."""
    stats = completion_stats(responses)
    recent = [
        ResponseProgress(
            sessionId=response.session_id,
            startedAt=ensure_aware(response.started_at).isoformat(),
            progress=response_progress(response, len(quiz.slides)),
            status=response_status(response),
        )
        for response in responses[:RECENT_RESPONSES_LIMIT]
    ]
    return QuizAnalytics(
        quizId=quiz.id or "",
        funnel=funnel_steps(quiz.slides, responses),
        recentResponses=recent,
        **stats,
    )


def export_responses_csv(
    quiz: QuizDefinition,
    responses: Sequence[QuizResponse],
) -> str:
    """One row per response with the options picked on every slide."""
    headers = ["Session ID", "Started At", "Completed At", "Status"]
    headers.extend(
        f"Slide {index + 1}: {slide_label(slide)}"
        for index, slide in enumerate(quiz.slides)
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)

    for response in responses:
        answers_by_slide: dict[str, list[str]] = {}
        for answer in response.answers:
            if not isinstance(answer, dict):
                continue
            slide_id = answer.get("slideId")
            if slide_id and slide_id not in answers_by_slide:
                answers_by_slide[slide_id] = [
                    str(option) for option in answer.get("selectedOptions") or []
                ]

        row = [
            response.session_id,
            ensure_aware(response.started_at).isoformat(timespec="seconds"),
            ensure_aware(response.completed_at).isoformat(timespec="seconds")
            if response.is_completed
            else "Not completed",
            response_status(response),
        ]
        for slide in quiz.slides:
            selected = answers_by_slide.get(slide.id)
            row.append(", ".join(selected) if selected is not None else "-")
        writer.writerow(row)

    return buffer.getvalue()
