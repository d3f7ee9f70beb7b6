import json

import httpx
import pytest

from jobboard.client.context import CONSENT_VERSION, AppContext
from jobboard.main import app


@pytest.fixture
def consent_file(tmp_path):
    return tmp_path / "consent.json"


@pytest.mark.asyncio
async def test_anonymous_init_and_login_flow(consent_file):
    ctx = AppContext.start("http://testserver", consent_file, transport=httpx.ASGITransport(app=app))
    assert AppContext.current() is ctx
    assert await ctx.init() is None
    assert ctx.loading is False and not ctx.is_authenticated

    await ctx.register("ctx@example.com", "secret123", "Ctx", "recruiter")
    assert ctx.role == "recruiter"
    await ctx.logout()
    assert ctx.user is None
    assert await ctx.refresh_user() is None

    await ctx.login("ctx@example.com", "secret123")
    assert (await ctx.refresh_user())["email"] == "ctx@example.com"
    await ctx.close()
    with pytest.raises(RuntimeError):
        AppContext.current()


def test_banner_shown_without_current_consent(consent_file):
    ctx = AppContext.start(consent_path=consent_file)
    assert ctx.banner_visible and ctx.consent is None

    consent_file.write_text(json.dumps({"version": "0.9", "analytics": True}))
    assert ctx.load_consent() is None
    assert ctx.banner_visible

    consent_file.write_text("{not json")
    assert ctx.load_consent() is None


@pytest.mark.asyncio
async def test_set_consent_persists_and_logs(consent_file):
    ctx = AppContext.start("http://testserver", consent_file, transport=httpx.ASGITransport(app=app))
    consent = await ctx.set_consent(analytics=True)
    assert consent["necessary"] is True
    assert ctx.banner_visible is False
    assert ctx.has_consented("analytics") and not ctx.has_consented("marketing")

    saved = json.loads(consent_file.read_text())
    assert saved["version"] == CONSENT_VERSION
    reloaded = AppContext(ctx.api, consent_file)
    assert reloaded.load_consent()["analytics"] is True
    await ctx.close()


@pytest.mark.asyncio
async def test_consent_log_failure_does_not_block(consent_file):
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"detail": "down"}))
    ctx = AppContext.start("http://test", consent_file, transport=transport)
    assert ctx.has_consented("necessary")
    await ctx.reject_all()
    assert consent_file.exists()
    assert not ctx.has_consented("functional")
    await ctx.accept_all()
    assert ctx.has_consented("marketing")
    await ctx.close()


@pytest.mark.asyncio
async def test_init_while_offline_is_anonymous(consent_file):
    def offline(request):
        raise httpx.ConnectError("offline", request=request)

    ctx = AppContext.start("http://test", consent_file, transport=httpx.MockTransport(offline))
    assert await ctx.init() is None
    assert ctx.loading is False
    await ctx.close()
