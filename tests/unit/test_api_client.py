"""Unit tests for the support backend client and HTTP repositories."""

import json

import httpx
import pytest

from troubleshooting_flows.infrastructure.http.client import SupportApiClient, SupportApiError
from troubleshooting_flows.repositories.article import HttpArticleRepository
from troubleshooting_flows.repositories.session import HttpSessionRepository
from troubleshooting_flows.schemas.articles import Article
from troubleshooting_flows.services.exceptions import ArticleNotFoundError


class RecordingBackend:
    """Answers requests from a route table and records what was sent."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, text="not found")
        status, body = self.routes[key]
        return httpx.Response(status, json=body)


def make_client(backend, admin_key="secret", user_id=None) -> SupportApiClient:
    return SupportApiClient(
        base_url="http://support.test/",
        admin_key=admin_key,
        user_id=user_id,
        transport=httpx.MockTransport(backend),
    )


class TestSupportApiClient:
    """Tests for SupportApiClient."""

    @pytest.mark.asyncio
    async def test_admin_headers(self):
        """Test admin calls carry the admin key and user id."""
        backend = RecordingBackend({("GET", "/admin/ai-history/u1"): (200, {"messages": []})})

        async with make_client(backend, admin_key=" secret ", user_id="op-1") as client:
            await client.get_ai_history("u1")

        sent = backend.requests[0]
        assert sent.headers["X-Admin-Key"] == "secret"
        assert sent.headers["X-User-Id"] == "op-1"

    @pytest.mark.asyncio
    async def test_customer_call_has_no_admin_key(self):
        """Test the customer chat endpoint is called without the admin key."""
        backend = RecordingBackend({("GET", "/v1/livechat/history/s1"): (200, {"messages": []})})

        async with make_client(backend) as client:
            await client.get_livechat_history("s1")

        assert "X-Admin-Key" not in backend.requests[0].headers

    @pytest.mark.asyncio
    async def test_upsert_article(self):
        """Test article upserts post the payload to the store."""
        backend = RecordingBackend({("POST", "/v1/admin/kb/upsert"): (200, {"ok": True, "id": "a9"})})

        async with make_client(backend) as client:
            result = await client.upsert_article({"title": "No hot water"})

        assert result["id"] == "a9"
        assert json.loads(backend.requests[0].content) == {"title": "No hot water"}

    @pytest.mark.asyncio
    async def test_error_response(self):
        """Test non-2xx responses raise with status and body."""
        backend = RecordingBackend({("GET", "/admin/ai-history/u1"): (401, {"detail": "bad key"})})

        async with make_client(backend) as client:
            with pytest.raises(SupportApiError) as exc_info:
                await client.get_ai_history("u1")

        assert exc_info.value.status_code == 401
        assert "bad key" in exc_info.value.body


class TestHttpArticleRepository:
    """Tests for HttpArticleRepository."""

    @pytest.mark.asyncio
    async def test_get_article(self, scenario_wire):
        """Test stored articles are parsed with their flow."""
        backend = RecordingBackend(
            {("GET", "/v1/admin/kb/7"): (200, {"id": 7, "title": "Noisy heater", "decision_tree": scenario_wire, "owner": "ops"})}
        )

        async with make_client(backend) as client:
            article = await HttpArticleRepository(client).get_article("7")

        assert article.id == "7"
        assert article.decision_tree["start"] == "s1"

    @pytest.mark.asyncio
    async def test_missing_article(self):
        """Test a 404 maps to ArticleNotFoundError."""
        async with make_client(RecordingBackend({})) as client:
            with pytest.raises(ArticleNotFoundError):
                await HttpArticleRepository(client).get_article("missing")

    @pytest.mark.asyncio
    async def test_save_article_takes_assigned_id(self):
        """Test the id assigned by the store is returned."""
        backend = RecordingBackend({("POST", "/v1/admin/kb/upsert"): (200, {"id": "a1"})})

        async with make_client(backend) as client:
            saved = await HttpArticleRepository(client).save_article(Article(title="Leak under sink"))

        assert saved.id == "a1"
        assert "id" not in json.loads(backend.requests[0].content)


class TestHttpSessionRepository:
    """Tests for HttpSessionRepository."""

    @pytest.mark.asyncio
    async def test_ai_history(self):
        """Test the pinned position is read from the history payload."""
        backend = RecordingBackend(
            {
                ("GET", "/admin/ai-history/u1"): (
                    200,
                    {
                        "messages": [{"role": "user", "text": "help", "created_at": "2026-01-01T00:00:01Z"}],
                        "active_article_id": "a1",
                        "active_node_id": "s2",
                        "active_node_text": "Flush the tank, then continue.",
                        "active_tree_present": True,
                    },
                )
            }
        )

        async with make_client(backend) as client:
            history = await HttpSessionRepository(client).get_ai_history("u1")

        assert history.messages[0].role == "user"
        assert history.messages[0].text == "help"
        assert history.pinned.is_pinned
        assert history.pinned.active_node_id == "s2"

    @pytest.mark.asyncio
    async def test_admin_and_customer_chat_endpoints(self):
        """Test the operator and customer variants hit their own paths."""
        backend = RecordingBackend(
            {
                ("GET", "/v1/admin/livechat/history/c1"): (200, {"conversation_id": "c1", "messages": [{"id": 1, "body": "hi"}]}),
                ("GET", "/v1/livechat/history/s1"): (200, {"conversation_id": "c1", "messages": []}),
            }
        )

        async with make_client(backend) as client:
            admin_view = await HttpSessionRepository(client).get_conversation_history("c1")
            customer_view = await HttpSessionRepository(client, admin=False).get_conversation_history("s1")

        assert [m.body for m in admin_view.messages] == ["hi"]
        assert customer_view.conversation_id == "c1"
        assert customer_view.messages == []
