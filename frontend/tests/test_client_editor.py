import asyncio
import httpx
from fakes import FakeServer
from wellness_client.api import WellnessApi
from wellness_client.editor import AutoSaveStatus, SessionEditor

FILLED = dict(title="Evening calm", description="Slow breathing", tags="breathing, Calm", duration="15 min")

def make_editor(server, **kw):
    kw.setdefault("autosave_delay", 0.03)
    kw.setdefault("saved_reset", 0.05)
    return SessionEditor(server.api(), **kw)

def test_incomplete_form_never_autosaves():
    server = FakeServer()

    async def scenario():
        editor = make_editor(server)
        editor.edit(title="Only a title")
        await asyncio.sleep(0.08)
        await editor.settle()
        assert editor.status == AutoSaveStatus.idle

    asyncio.run(scenario())
    assert server.calls("POST") == []

def test_rapid_edits_coalesce_into_one_create_then_updates_same_draft():
    server = FakeServer()

    async def scenario():
        editor = make_editor(server)
        editor.edit(**FILLED)
        editor.edit(title="Evening calm 2")
        editor.edit(title="Evening calm 3")
        await editor.settle()
        assert editor.status == AutoSaveStatus.saved
        assert editor.last_saved is not None
        assert editor.session_id == 1

        editor.edit(description="Slower breathing")
        await editor.settle()
        editor.close()

    asyncio.run(scenario())
    posts = server.calls("POST")
    assert len(posts) == 1
    assert posts[0][2]["title"] == "Evening calm 3"
    puts = server.calls("PUT")
    assert [(p, b["description"]) for _, p, b in puts] == [("/api/sessions/1", "Slower breathing")]
    assert len(server.sessions) == 1

def test_saved_status_returns_to_idle():
    server = FakeServer()

    async def scenario():
        editor = make_editor(server, saved_reset=0.02)
        editor.edit(**FILLED)
        await editor.settle()
        assert editor.status == AutoSaveStatus.saved
        await asyncio.sleep(0.08)
        assert editor.status == AutoSaveStatus.idle

    asyncio.run(scenario())

def test_autosave_failure_sets_error_status():
    server = FakeServer()
    server.fail[("POST", "/api/sessions")] = (500, "Server Error")

    async def scenario():
        editor = make_editor(server)
        editor.edit(**FILLED)
        await editor.settle()
        assert editor.status == AutoSaveStatus.error
        assert editor.session_id is None

    asyncio.run(scenario())

def test_close_cancels_pending_autosave():
    server = FakeServer()

    async def scenario():
        editor = make_editor(server, autosave_delay=0.05)
        editor.edit(**FILLED)
        editor.close()
        await asyncio.sleep(0.1)
        editor.edit(title="after close")
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert server.requests == []

def test_unknown_field_rejected():
    server = FakeServer()
    editor = make_editor(server)
    try:
        editor.edit(colour="blue")
    except ValueError as e:
        assert "colour" in str(e)
    else:
        raise AssertionError("expected ValueError")

def test_save_draft_validates_first():
    server = FakeServer()
    routes = []

    async def scenario():
        editor = make_editor(server, navigate=routes.append)
        editor.edit(title="No description")
        assert await editor.save_draft() is False
        assert set(editor.errors) == {"description", "tags"}
        editor.edit(description="now there is one")
        assert "description" not in editor.errors

    asyncio.run(scenario())
    assert server.requests == []
    assert routes == []

def test_publish_new_session_creates_publishes_and_navigates():
    server = FakeServer()
    routes = []

    async def scenario():
        editor = make_editor(server, autosave_delay=10, navigate=routes.append)
        editor.edit(**FILLED)
        assert await editor.publish() is True
        editor.close()

    asyncio.run(scenario())
    assert [(m, p) for m, p, _ in server.requests] == [
        ("POST", "/api/sessions"),
        ("PUT", "/api/sessions/1/publish"),
    ]
    assert server.sessions[1]["status"] == "published"
    assert routes == ["/my-sessions"]

def test_editing_existing_session_loads_and_updates():
    server = FakeServer()
    existing = server.add(title="Old", description="Old desc", tags=["a", "b"], json_file_url=None)
    routes = []

    async def scenario():
        editor = make_editor(server, session_id=existing["id"], navigate=routes.append)
        await editor.load()
        assert editor.form.tags == "a, b"
        assert editor.form.json_file_url == ""
        editor.edit(title="New")
        assert await editor.save_draft() is True
        editor.close()

    asyncio.run(scenario())
    assert server.calls("POST") == []
    assert server.sessions[existing["id"]]["title"] == "New"
    assert routes == ["/my-sessions"]

def test_failed_publish_keeps_editor_open_with_form_error():
    server = FakeServer()
    server.fail[("PUT", "/api/sessions/1/publish")] = (401, "Not authorized to publish this session")
    routes = []

    async def scenario():
        editor = make_editor(server, autosave_delay=10, navigate=routes.append)
        editor.edit(**FILLED)
        assert await editor.publish() is False
        assert editor.errors["form"] == "Not authorized to publish this session"
        assert editor.saving is False
        editor.close()

    asyncio.run(scenario())
    assert routes == []

def slow_create_api(server, delay=0.1):
    async def handler(request):
        if request.method == "POST":
            await asyncio.sleep(delay)
        return server.handle(request)
    return WellnessApi("http://fake/api", transport=httpx.MockTransport(handler))

def test_edit_during_slow_first_create_updates_that_draft():
    server = FakeServer()

    async def scenario():
        editor = SessionEditor(slow_create_api(server), autosave_delay=0.02, saved_reset=1)
        editor.edit(**FILLED)
        await asyncio.sleep(0.04)          # first create is in flight
        editor.edit(title="Evening calm, revised")
        await asyncio.sleep(0.04)          # second auto-save fires while the create is still running
        await editor.settle()
        editor.close()

    asyncio.run(scenario())
    assert len(server.sessions) == 1
    assert len(server.calls("POST")) == 1
    assert [(p, b["title"]) for _, p, b in server.calls("PUT")] == [("/api/sessions/1", "Evening calm, revised")]

def test_publish_waits_for_running_autosave_create():
    server = FakeServer()
    routes = []

    async def scenario():
        editor = SessionEditor(slow_create_api(server), autosave_delay=0.02, saved_reset=1,
                               navigate=routes.append)
        editor.edit(**FILLED)
        await asyncio.sleep(0.04)
        assert await editor.publish() is True
        editor.close()

    asyncio.run(scenario())
    assert len(server.sessions) == 1
    assert [(m, p) for m, p, _ in server.requests] == [
        ("POST", "/api/sessions"),
        ("PUT", "/api/sessions/1"),
        ("PUT", "/api/sessions/1/publish"),
    ]
    assert routes == ["/my-sessions"]
