"""Guide assistant endpoint."""

from fastapi import APIRouter

from tracker.api.deps import Guides
from tracker.schemas.guide import GuideAnswer, GuideQuestion

router = APIRouter()


@router.post(
    "/ask",
    response_model=GuideAnswer,
    summary="Ask the guide assistant",
    description="Answers questions about the F1 settings menu, optionally scoped to a class and tab.",
)
async def ask_guide(
    data: GuideQuestion,
    guides: Guides,
) -> GuideAnswer:
    """Answer a guide question."""
    answer = await guides.ask(data.question, class_name=data.class_name, tab_name=data.tab_name)
    return GuideAnswer(answer=answer)
