from collections.abc import AsyncIterator, Awaitable, Callable

from aiohttp import ClientSession, web
from aiohttp.test_utils import TestServer
import pytest
from testfixtures import LogCapture
from yarl import URL

from trapdoor.host.element import HostElement, HostMode
from trapdoor.host.registry import HostRegistry
from trapdoor.http.routing import RequestRoutingHook
from tests import CONFIGURED_HOST, HOST

REQUEST_URL = f"https://{CONFIGURED_HOST}/v1/items?page=2#top"


@pytest.fixture
async def hook(registry: HostRegistry) -> AsyncIterator[RequestRoutingHook]:
    async with RequestRoutingHook(ClientSession(), registry) as routing_hook:
        yield routing_hook


class TestRoute:
    async def test_no_selection_passes_through(self, hook: RequestRoutingHook) -> None:
        assert hook.route(REQUEST_URL) == URL(REQUEST_URL)

    async def test_dns_mode_passes_through(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.select("pinned")
        assert hook.route(REQUEST_URL) == URL(REQUEST_URL)

    async def test_unconfigured_host_passes_through(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.select("staging")
        url = "https://other.example.invalid/v1/items"
        assert hook.route(url) == URL(url)

    async def test_unknown_selection_passes_through(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.select("unknown")
        assert hook.route(REQUEST_URL) == URL(REQUEST_URL)

    async def test_url_mode_rewrites_configured_host(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.select("staging")
        assert hook.route(REQUEST_URL) == URL("https://staging.example.invalid/v1/items?page=2#top")

    async def test_rewrites_scheme_and_port(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.add_override(HostElement("Local", "local", "127.0.0.1:8080/ignored", "http", HostMode.URL))
        registry.select("local")
        routed = hook.route(URL(REQUEST_URL))
        assert routed == URL("http://127.0.0.1:8080/v1/items?page=2#top")
        assert routed.port == 8080

    async def test_keeps_user_info(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.select("staging")
        routed = hook.route(f"https://user:secret@{CONFIGURED_HOST}/login")
        assert routed.user == "user"
        assert routed.password == "secret"
        assert routed.host == "staging.example.invalid"

    async def test_selected_host_itself(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.select("prod")
        assert hook.route(REQUEST_URL) == URL(REQUEST_URL)

    async def test_ipv6_authority(self, hook: RequestRoutingHook, registry: HostRegistry) -> None:
        registry.add_override(HostElement("V6", "v6", "[::1]:8080", "http"))
        registry.select("v6")
        routed = hook.route(REQUEST_URL)
        assert routed == URL("http://[::1]:8080/v1/items?page=2#top")
        assert routed.host == "::1"
        assert routed.port == 8080

    @pytest.mark.parametrize("host", ["local:99999", "[::1", ":8080", "/path-only"])
    async def test_unusable_selected_host_passes_through(
        self,
        host: str,
        hook: RequestRoutingHook,
        registry: HostRegistry,
    ) -> None:
        registry.add_override(HostElement("Broken", "broken", host, "http"))
        registry.select("broken")
        with LogCapture("trapdoor.http.routing") as log:
            assert hook.route(REQUEST_URL) == URL(REQUEST_URL)
        assert any(record.levelname == "WARNING" for record in log.records)


async def test_session_is_delegated(registry: HostRegistry) -> None:
    session = ClientSession()
    hook = RequestRoutingHook(session, registry)
    assert hook.session is session
    assert hook.closed is False
    await hook.close()
    assert session.closed is True
    assert hook.closed is True


async def test_requests_follow_selection(
    aiohttp_server: Callable[[web.Application], Awaitable[TestServer]],
    registry: HostRegistry,
) -> None:
    async def handler(request: web.Request) -> web.Response:
        return web.json_response({"method": request.method, "path": request.path, "query": dict(request.query)})

    app = web.Application()
    app.router.add_route("*", "/v1/{name}", handler)
    server = await aiohttp_server(app)

    registry.add_override(HostElement("Local", "local", f"{HOST}:{server.port}", "http"))
    registry.select("local")

    async with RequestRoutingHook(ClientSession(), registry) as hook:
        async with hook.get(f"https://{CONFIGURED_HOST}/v1/items", params={"page": "2"}) as resp:
            assert resp.status == 200
            assert await resp.json() == {"method": "GET", "path": "/v1/items", "query": {"page": "2"}}

        for verb in ("post", "put", "patch", "delete", "options"):
            async with getattr(hook, verb)(f"https://{CONFIGURED_HOST}/v1/items") as resp:
                assert resp.status == 200
                assert (await resp.json())["method"] == verb.upper()

        async with hook.head(f"https://{CONFIGURED_HOST}/v1/items") as resp:
            assert resp.status == 200
