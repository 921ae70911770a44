"""
Dependency Injection Wiring (Composition Root).

This module acts as the central "container" for the application's services.
It is responsible for:
1. Instantiating the core Singleton services (API client, Repositories).
2. Wiring them together (e.g., injecting the Article Repository into the
   Authoring Service).
3. Managing the lifecycle of these objects using @lru_cache to ensure
   they are created only once per application process.

Tests swap implementations through FastAPI's dependency_overrides.
"""


from functools import lru_cache
from fastapi import Depends

from ..infrastructure.http.client import SupportApiClient
from ..repositories.article import ArticleRepository, HttpArticleRepository
from ..services.authoring import AuthoringService

# Support backend client (Singleton)
@lru_cache()
def get_support_client() -> SupportApiClient:
    return SupportApiClient()

# Article Repository (Singleton)
@lru_cache()
def get_article_repository() -> ArticleRepository:
    return HttpArticleRepository(get_support_client())

# The Authoring Service
def get_authoring_service(
    repo: ArticleRepository = Depends(get_article_repository),
) -> AuthoringService:
    """
    Injects the article repository into the AuthoringService.
    """
    return AuthoringService(article_repository=repo)
