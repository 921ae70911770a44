"""
Article Seeder.

Run this script to publish the sample flows defined in data/sample_flows.py
as knowledge articles on the support backend.

Usage:
    python -m troubleshooting_flows.scripts.seed_sample_flows

Every flow is validated (strict variant) before upload; an invalid flow
aborts the run without publishing anything.
"""

import asyncio

from troubleshooting_flows.config import settings
from troubleshooting_flows.data.sample_flows import SAMPLE_FLOWS
from troubleshooting_flows.editing.editor import FlowEditor
from troubleshooting_flows.infrastructure.http.client import SupportApiClient
from troubleshooting_flows.repositories.article import ArticleRepository, HttpArticleRepository
from troubleshooting_flows.schemas.articles import Article
from troubleshooting_flows.services.authoring import AuthoringService


async def seed_flows(repository: ArticleRepository, strict: bool = True) -> list[Article]:
    service = AuthoringService(repository, strict=strict)

    # Validate everything first so a bad flow publishes nothing.
    editors = {title: FlowEditor(graph, strict=strict) for title, graph in SAMPLE_FLOWS.items()}
    for editor in editors.values():
        editor.commit()

    print(f"Found {len(editors)} flows to seed.")
    saved = []
    for title, editor in editors.items():
        print(f"Processing flow: {title}")
        article = Article(title=title, category="Water/Leaks")
        saved.append(await service.create_article(article, editor))
        print(f"--> Created article {saved[-1].id}.")

    print("Flow seeding complete.")
    return saved


async def main():
    async with SupportApiClient() as client:
        await seed_flows(HttpArticleRepository(client), strict=settings.STRICT_FLOWS)


if __name__ == "__main__":
    asyncio.run(main())
