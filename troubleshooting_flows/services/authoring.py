"""
Authoring Service - Flow Editing Orchestration

Entry point for operator-side flow work: opening an article's flow in an
editor, saving it back into the article, and starting preview runs. Saving is
the only action a structural problem blocks; editing always continues.
"""

import logging
from typing import Optional, Union

from ..config import settings
from ..domain.models import FlowGraph
from ..editing.editor import FlowEditor
from ..execution.engine import TraversalEngine
from ..repositories.article import ArticleRepository
from ..schemas.articles import Article

logger = logging.getLogger(__name__)


class AuthoringService:
    def __init__(
        self,
        article_repository: ArticleRepository,
        strict: bool = settings.STRICT_FLOWS,
    ):
        self.article_repo = article_repository
        self.strict = strict

    async def open_editor(self, article_id: str) -> FlowEditor:
        """
        Loads the article's flow into an editor. Articles without a flow get
        a fresh single-node editor.

        Raises:
            ArticleNotFoundError: Unknown article.
            FlowDecodeError: The stored flow is not valid wire JSON.
        """
        article = await self.article_repo.get_article(article_id)
        if not article.decision_tree:
            logger.info(f"Article {article_id} has no flow yet; starting a new one")
            return FlowEditor.new(strict=self.strict)
        return FlowEditor.from_wire(article.decision_tree, strict=self.strict)

    async def save_flow(self, article_id: str, editor: FlowEditor) -> Article:
        """
        Validates, encodes and stores the flow in the article's
        `decision_tree` field.

        Raises:
            FlowValidationError / FlowDecodeError: The flow cannot be saved.
            ArticleNotFoundError: Unknown article.
        """
        payload = editor.commit()
        article = await self.article_repo.get_article(article_id)
        article.decision_tree = payload
        saved = await self.article_repo.save_article(article)
        logger.info(f"Saved flow for article {saved.id} ({len(payload['nodes'])} nodes)")
        return saved

    async def create_article(
        self, article: Article, editor: Optional[FlowEditor] = None
    ) -> Article:
        """Stores a new article, embedding the editor's flow when given."""
        draft = article.model_copy(deep=True)
        if editor is not None:
            draft.decision_tree = editor.commit()
        saved = await self.article_repo.save_article(draft)
        logger.info(f"Created article {saved.id}")
        return saved

    def preview(self, flow: Union[FlowEditor, FlowGraph]) -> TraversalEngine:
        """A local run of the flow, starting at its start node."""
        graph = flow.current_graph() if isinstance(flow, FlowEditor) else flow
        return TraversalEngine(graph, strict=self.strict)
