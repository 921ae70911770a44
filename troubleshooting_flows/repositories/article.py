import uuid
from abc import ABC, abstractmethod
from typing import Dict

from ..schemas.articles import Article
from ..infrastructure.http.client import SupportApiClient, SupportApiError
from ..services.exceptions import ArticleNotFoundError


# The Interface
class ArticleRepository(ABC):
    """
    Defines how the application accesses content articles.
    This allows us change where articles live (Memory -> HTTP API) later
    without changing the authoring code.
    """

    @abstractmethod
    async def get_article(self, article_id: str) -> Article:
        """
        Retrieves an article by ID.
        Raises ArticleNotFoundError if not found.
        """
        pass

    @abstractmethod
    async def save_article(self, article: Article) -> Article:
        """Creates or updates an article. Returns it with its ID set."""
        pass


class InMemoryArticleRepository(ArticleRepository):
    """
    Uses an in-memory dictionary for article storage for testing/dev purposes.
    """

    def __init__(self):
        self._store: Dict[str, Article] = {}

    async def get_article(self, article_id: str) -> Article:
        if article_id not in self._store:
            raise ArticleNotFoundError(f"Article '{article_id}' not found.")
        return self._store[article_id].model_copy(deep=True)

    async def save_article(self, article: Article) -> Article:
        saved = article.model_copy(deep=True)
        if not saved.id:
            saved.id = str(uuid.uuid4())
        self._store[saved.id] = saved
        return saved.model_copy(deep=True)


class HttpArticleRepository(ArticleRepository):
    """
    Reads and writes articles through the remote support API.
    """

    def __init__(self, client: SupportApiClient):
        self.client = client

    async def get_article(self, article_id: str) -> Article:
        try:
            data = await self.client.get_article(article_id)
        except SupportApiError as e:
            if e.status_code == 404:
                raise ArticleNotFoundError(f"Article '{article_id}' not found.") from e
            raise
        return Article.model_validate(data)

    async def save_article(self, article: Article) -> Article:
        payload = article.model_dump(mode="json", exclude_none=True)
        data = await self.client.upsert_article(payload)

        saved = article.model_copy(deep=True)
        saved.id = str(data.get("id") or article.id or "") or None
        return saved
