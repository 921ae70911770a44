from fastapi import FastAPI, HTTPException, Depends

from .dependencies import get_authoring_service
from ..domain.models import Outcome
from ..domain.validation import validate
from ..editing.editor import FlowEditor
from ..execution.engine import TraversalEngine
from ..execution.schemas.state_machine import AtNode, AtTerminal, TraversalState
from ..schemas.wire import FlowDecodeError, decode, encode
from ..services.authoring import AuthoringService
from ..services.exceptions import ArticleNotFoundError, FlowValidationError
from .schemas import (
    FlowRequest,
    PositionRead,
    PreviewRequest,
    PreviewResponse,
    SaveFlowResponse,
    ValidateResponse,
    ViolationRead,
)

app = FastAPI(title="Troubleshooting Flow Authoring")


def _decode_or_422(flow: dict):
    try:
        return decode(flow)
    except FlowDecodeError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "kind": e.kind.value,
                "detail": e.detail,
                "node_id": e.node_id,
                "option_index": e.option_index,
            },
        )


def _violation_dto(violation) -> ViolationRead:
    return ViolationRead(
        kind=violation.kind.value,
        node_id=violation.node_id,
        option_index=violation.option_index,
        message=violation.message,
    )


def _position_dto(state: TraversalState) -> PositionRead:
    if isinstance(state, AtTerminal):
        return PositionRead(outcome=state.outcome.value)
    return PositionRead(node_id=state.node_id)


# --- Endpoints ---

@app.post("/flows/validate", response_model=ValidateResponse)
def validate_flow(
    request: FlowRequest,
    service: AuthoringService = Depends(get_authoring_service),
):
    """Checks a wire flow. Structural problems are reported, not raised."""
    graph = _decode_or_422(request.flow)
    strict = service.strict if request.strict is None else request.strict

    violation = validate(graph, strict=strict)
    if violation is None:
        return ValidateResponse(valid=True)
    return ValidateResponse(valid=False, violation=_violation_dto(violation))


@app.post("/flows/preview", response_model=PreviewResponse)
def preview_flow(
    request: PreviewRequest,
    service: AuthoringService = Depends(get_authoring_service),
):
    """
    One preview step. The client keeps the position between calls; without a
    position the run starts at the start node.
    """
    graph = _decode_or_422(request.flow)
    strict = service.strict if request.strict is None else request.strict
    engine = TraversalEngine(graph, strict=strict)

    position = request.position
    if position and position.outcome:
        try:
            engine.state = AtTerminal(Outcome(position.outcome))
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unknown outcome '{position.outcome}'")
    elif position and position.node_id:
        engine.state = AtNode(position.node_id)

    if request.choice is not None:
        engine.step(request.choice)

    node = engine.current_node
    return PreviewResponse(
        position=_position_dto(engine.state),
        finished=engine.is_finished,
        transition=engine.last_transition.name if engine.last_transition else None,
        title=node.title if node else None,
        body=node.body if node else None,
        choices=engine.available_choices(),
    )


@app.get("/articles/{article_id}/flow")
async def get_article_flow(
    article_id: str,
    service: AuthoringService = Depends(get_authoring_service),
):
    """Returns the article's flow, normalized through the editor."""
    try:
        editor = await service.open_editor(article_id)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    except FlowDecodeError as e:
        raise HTTPException(status_code=500, detail=f"Stored flow is unreadable: {e}")

    violation = editor.validate()
    return {
        "article_id": article_id,
        "flow": encode(editor.graph),
        "valid": violation is None,
    }


@app.put("/articles/{article_id}/flow", response_model=SaveFlowResponse)
async def save_article_flow(
    article_id: str,
    request: FlowRequest,
    service: AuthoringService = Depends(get_authoring_service),
):
    graph = _decode_or_422(request.flow)
    strict = service.strict if request.strict is None else request.strict
    editor = FlowEditor(graph, strict=strict)

    try:
        saved = await service.save_flow(article_id, editor)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    except FlowValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=_violation_dto(e.violation).model_dump(),
        )

    return SaveFlowResponse(article_id=saved.id or article_id, node_count=len(graph.nodes))
