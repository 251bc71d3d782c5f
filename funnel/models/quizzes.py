"""Quiz-related Pydantic models."""
import enum

from pydantic import BaseModel, Field, model_validator

from funnel.models.db.quiz import QuizStatus


class SlideType(str, enum.Enum):
    """Slide types a quiz funnel can contain."""

    TEXT_CHOICE = "text-choice"
    IMAGE_CHOICE = "image-choice"
    MULTI_SELECT = "multi-select"
    INFO = "info"
    LOADING = "loading"
    RESULTS = "results"
    OFFER = "offer"


CHOICE_TYPES = {SlideType.TEXT_CHOICE, SlideType.IMAGE_CHOICE, SlideType.MULTI_SELECT}
SINGLE_CHOICE_TYPES = {SlideType.TEXT_CHOICE, SlideType.IMAGE_CHOICE}

# Fewest options a choice slide may carry
MIN_OPTIONS = {
    SlideType.TEXT_CHOICE: 2,
    SlideType.IMAGE_CHOICE: 2,
    SlideType.MULTI_SELECT: 1,
}


class SlideOption(BaseModel):
    """One selectable option on a choice slide."""

    id: str = Field(..., min_length=1)
    text: str = ""
    imageUrl: str | None = None
    nextSlide: str | None = None


class LoadingItem(BaseModel):
    """One step of a loading slide animation."""

    text: str
    duration: int | None = Field(None, ge=0)


class SlideContent(BaseModel):
    """Slide payload. Which fields matter depends on the slide type."""

    headline: str | None = None
    subheadline: str | None = None
    body: str | None = None
    imageUrl: str | None = None
    videoUrl: str | None = None
    buttonText: str | None = None
    options: list[SlideOption] | None = None
    items: list[LoadingItem] | None = None
    summaryTemplate: str | None = None
    dynamicFields: list[str] | None = None
    bullets: list[str] | None = None
    offerText: str | None = None
    ctaText: str | None = None
    ctaUrl: str | None = None
    guaranteeText: str | None = None

    class Config:
        extra = "allow"


class ShowIf(BaseModel):
    """Show the slide only if this option was picked on that slide."""

    slideId: str = Field(..., min_length=1)
    optionId: str = Field(..., min_length=1)


class ConditionalLogic(BaseModel):
    showIf: ShowIf | None = None


class Slide(BaseModel):
    """A single quiz slide."""

    id: str = Field(..., min_length=1)
    type: SlideType
    content: SlideContent = Field(default_factory=SlideContent)
    conditionalLogic: ConditionalLogic | None = None

    @model_validator(mode="after")
    def _check_options(self) -> "Slide":
        options = self.content.options or []
        minimum = MIN_OPTIONS.get(self.type)
        if minimum is not None and len(options) < minimum:
            raise ValueError(
                f"Slide {self.id} ({self.type.value}) needs at least {minimum} option(s)"
            )
        option_ids = [option.id for option in options]
        if len(option_ids) != len(set(option_ids)):
            raise ValueError(f"Slide {self.id} has duplicate option ids")
        return self

    def option_ids(self) -> list[str]:
        return [option.id for option in self.content.options or []]


class QuizSettings(BaseModel):
    """Display and navigation flags of a quiz."""

    primaryColor: str = "#0F4C81"
    backgroundColor: str = "#ffffff"
    showProgressBar: bool = True
    allowBack: bool = False


class QuizDefinition(BaseModel):
    """Quiz with its ordered slides, as served to the player."""

    id: str | None = None
    slug: str = Field(..., min_length=1, max_length=200)
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    status: QuizStatus = QuizStatus.DRAFT
    settings: QuizSettings = Field(default_factory=QuizSettings)
    slides: list[Slide] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_slide_ids(self) -> "QuizDefinition":
        slide_ids = [slide.id for slide in self.slides]
        if len(slide_ids) != len(set(slide_ids)):
            raise ValueError("Slide ids must be unique within a quiz")
        return self

    def slide_index(self, slide_id: str) -> int | None:
        for index, slide in enumerate(self.slides):
            if slide.id == slide_id:
                return index
        return None


class QuizSummary(BaseModel):
    """Quiz row for admin listings."""

    id: str
    slug: str
    name: str
    description: str | None = None
    status: str
    settings: dict[str, object]
    slideCount: int
    responseCount: int
