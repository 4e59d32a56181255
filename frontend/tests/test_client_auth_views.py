import asyncio
from fakes import FakeServer
from wellness_client.auth_context import AuthContext, FileTokenStore, MemoryTokenStore
from wellness_client.views import BrowseView, ManageView

def test_restore_keeps_valid_token():
    server = FakeServer()

    async def scenario():
        auth = AuthContext(server.api(), MemoryTokenStore("good-token"))
        assert auth.loading
        user = await auth.restore()
        assert user["id"] == 7
        assert auth.is_authenticated
        assert not auth.loading

    asyncio.run(scenario())

def test_restore_drops_rejected_token():
    server = FakeServer()
    store = MemoryTokenStore("stale")

    async def scenario():
        auth = AuthContext(server.api(), store)
        assert await auth.restore() is None
        assert auth.token is None
        assert not auth.is_authenticated

    asyncio.run(scenario())
    assert store.load() is None

def test_login_then_logout_even_when_server_fails(tmp_path):
    server = FakeServer()
    server.fail[("POST", "/api/auth/logout")] = (500, "Server Error")
    store = FileTokenStore(tmp_path / "auth" / "token.json")

    async def scenario():
        auth = AuthContext(server.api(), store)
        await auth.login("me@ex.com", "secret1")
        assert store.load() == "good-token"
        assert auth.is_authenticated
        await auth.logout()
        assert auth.user is None and auth.token is None

    asyncio.run(scenario())
    assert store.load() is None
    assert not (tmp_path / "auth" / "token.json").exists()

def test_token_is_sent_as_bearer_header():
    server = FakeServer()
    seen = []
    original = server.handle

    def spy(request):
        seen.append(request.headers.get("Authorization"))
        return original(request)
    server.handle = spy

    async def scenario():
        auth = AuthContext(server.api())
        await auth.register("me@ex.com", "secret1")
        await auth.api.me()

    asyncio.run(scenario())
    assert seen == [None, "Bearer good-token"]

async def _signed_in(server):
    auth = AuthContext(server.api(), MemoryTokenStore("good-token"))
    await auth.restore()
    return auth

def test_browse_tags_and_local_filter():
    server = FakeServer()
    server.add(status="published", title="Sunrise yoga", description="x", tags=["yoga", "morning"])
    server.add(status="published", title="Box breathing", description="calm down", tags=["breathing", "morning"])
    server.add(status="draft", title="hidden", description="x", tags=["secret"])

    async def scenario():
        view = BrowseView(await _signed_in(server))
        await view.refresh(page=1)
        assert view.all_tags == ["all", "yoga", "morning", "breathing"]
        assert view.pagination == {"total": 2}
        view.selected_tag = "breathing"
        assert [s["title"] for s in view.visible] == ["Box breathing"]
        view.selected_tag = "all"
        view.search_term = "CALM"
        assert [s["title"] for s in view.visible] == ["Box breathing"]

    asyncio.run(scenario())

def test_browse_like_confirms_with_server():
    server = FakeServer()
    s = server.add(status="published")

    async def scenario():
        view = BrowseView(await _signed_in(server))
        await view.refresh()
        assert await view.toggle_like(s["id"]) is True
        assert view.sessions[0]["likes"] == [7]
        assert await view.toggle_like(s["id"]) is True
        assert view.sessions[0]["likes"] == []
        assert view.like_pending == set()

    asyncio.run(scenario())

def test_browse_like_failure_reverts():
    server = FakeServer()
    s = server.add(status="published", likes=[3], like_count=1)
    server.fail[("PUT", f"/api/sessions/{s['id']}/like")] = (500, "Server Error")

    async def scenario():
        view = BrowseView(await _signed_in(server))
        await view.refresh()
        assert await view.toggle_like(s["id"]) is False
        assert view.sessions[0]["likes"] == [3]
        assert view.sessions[0]["like_count"] == 1

    asyncio.run(scenario())

def test_manage_counts_filter_publish_and_delete():
    server = FakeServer()
    a = server.add(status="draft")
    b = server.add(status="published")
    c = server.add(status="draft")

    async def scenario():
        view = ManageView(await _signed_in(server))
        await view.refresh()
        assert view.counts == {"all": 3, "draft": 2, "published": 1}
        view.filter = "draft"
        assert [s["id"] for s in view.visible] == [a["id"], c["id"]]

        assert await view.publish(a["id"]) is True
        assert view.counts == {"all": 3, "draft": 1, "published": 2}

        server.fail[("DELETE", f"/api/sessions/{b['id']}")] = (401, "Not authorized to delete this session")
        assert await view.delete(b["id"]) is False
        assert [s["id"] for s in view.sessions] == [a["id"], b["id"], c["id"]]

        assert await view.delete(c["id"]) is True
        assert [s["id"] for s in view.sessions] == [a["id"], b["id"]]

    asyncio.run(scenario())

def test_manage_rejects_unknown_filter():
    view = ManageView(AuthContext(FakeServer().api()))
    try:
        view.filter = "archived"
    except ValueError:
        pass
    else:
        raise AssertionError("expected ValueError")
