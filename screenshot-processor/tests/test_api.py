import io
import json
import zipfile

import pytest
from httpx import AsyncClient, ASGITransport

import main
from main import app
from copywriter import RuleBasedCopyGenerator
from showcase.pipeline import ShowcaseGenerator
from showcase.renderer import ScreenshotRenderer
from showcase.storyboard import StoryboardAssembler

from conftest import make_png

BULLETS = ["Track habits", "Set reminders", "See your progress"]


@pytest.fixture(autouse=True)
def offline_services(monkeypatch):
    # No network copy, fast PNG encoding
    monkeypatch.setattr(main, "assembler", StoryboardAssembler(RuleBasedCopyGenerator()))
    monkeypatch.setattr(main, "showcase_generator", ShowcaseGenerator(renderer=ScreenshotRenderer(compress_level=1)))


def screenshot_files(count):
    return [("screenshots", (f"shot-{i}.png", make_png(), "image/png")) for i in range(1, count + 1)]


async def generate(client, count=5, **data):
    form = {"app_name": "MyApp", "value_bullets": BULLETS}
    form.update(data)
    return await client.post("/storyboard/generate", data=form, files=screenshot_files(count))


@pytest.mark.asyncio
async def test_health():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["copy_generator"]["name"] == "rule-based"


@pytest.mark.asyncio
async def test_options():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/options")

    assert response.status_code == 200
    data = response.json()
    assert [d["id"] for d in data["devices"]] == ["iphone-6.7", "ipad-12.9"]
    assert len(data["templates"]) == 4
    assert data["limits"]["value_bullets"] == {"min": 3, "max": 6}


@pytest.mark.asyncio
async def test_config_hides_secrets():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/config")

    assert response.status_code == 200
    assert "openai_api_key" not in response.json()


@pytest.mark.asyncio
async def test_generate_storyboard():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await generate(client)

    assert response.status_code == 200
    data = response.json()
    storyboard = data["storyboard"]
    assert data["warnings"] == []
    assert storyboard["appName"] == "MyApp"
    assert [s["templateId"] for s in storyboard["slides"]] == ["hero", "stack", "split", "stack", "closing"]
    assert [s["screenshot"]["screenshotId"] for s in storyboard["slides"]] == [f"shot-{i}" for i in range(1, 6)]


@pytest.mark.asyncio
async def test_generate_with_four_screenshots_warns():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await generate(client, count=4)

    assert response.status_code == 200
    data = response.json()
    assert data["warnings"] == ["Slide 5: Using screenshot #1 (not enough screenshots provided)"]
    assert data["storyboard"]["slides"][4]["screenshot"]["screenshotId"] == "shot-1"


@pytest.mark.asyncio
async def test_generate_accepts_newline_separated_bullets():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await generate(client, value_bullets="\n".join(BULLETS))

    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("override", [
    {"value_bullets": ["Only", "Two"]},
    {"brand_color": "#GGGGGG"},
    {"locale": "de-DE"},
])
async def test_generate_rejects_bad_input(override):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await generate(client, **override)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_generate_rejects_non_images():
    files = [("screenshots", ("notes.txt", b"hello", "text/plain"))]
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/storyboard/generate", data={"app_name": "MyApp", "value_bullets": BULLETS}, files=files
        )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_text_and_screenshot():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        storyboard = (await generate(client)).json()["storyboard"]

        text = await client.post("/storyboard/update-text", json={
            "storyboard": storyboard, "slide_id": 2, "headline": "Build streaks",
        })
        shot = await client.post("/storyboard/update-screenshot", json={
            "storyboard": text.json(), "slide_id": 2, "screenshot_id": "shot-5", "filename": "shot-5.png",
        })

    assert text.status_code == 200
    assert text.json()["slides"][1]["text"]["headline"] == "Build streaks"
    assert shot.status_code == 200
    assert shot.json()["slides"][1]["screenshot"]["screenshotId"] == "shot-5"
    assert shot.json()["slides"][1]["text"]["headline"] == "Build streaks"


@pytest.mark.asyncio
async def test_update_rejects_bad_slide_id_and_long_text():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        storyboard = (await generate(client)).json()["storyboard"]
        bad_id = await client.post("/storyboard/update-text", json={
            "storyboard": storyboard, "slide_id": 6, "headline": "x",
        })
        too_long = await client.post("/storyboard/update-text", json={
            "storyboard": storyboard, "slide_id": 1, "headline": "x" * 33,
        })

    assert bad_id.status_code == 400
    assert too_long.status_code == 400


@pytest.mark.asyncio
async def test_preview():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        storyboard = (await generate(client)).json()["storyboard"]
        ok = await client.post("/storyboard/preview", json={
            "storyboard": storyboard, "slide_id": 1, "target_id": "ipad-12.9",
        })
        missing = await client.post("/storyboard/preview", json={
            "storyboard": storyboard, "slide_id": 1, "target_id": "galaxy-s24",
        })
        bad_slide = await client.post("/storyboard/preview", json={"storyboard": storyboard, "slide_id": 0})

    assert ok.status_code == 200
    assert bad_slide.status_code == 400
    assert ok.json()["svg"].startswith("<svg")
    assert (ok.json()["width"], ok.json()["height"]) == (2064, 2752)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_export_zip():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        storyboard = (await generate(client)).json()["storyboard"]
        response = await client.post(
            "/export",
            data={"storyboard": json.dumps(storyboard), "targets": "iphone-6.7", "brand_color": "#123456"},
            files=screenshot_files(5),
        )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == 'attachment; filename="myapp_screenshots.zip"'
    assert response.headers["x-export-file-count"] == "6"

    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert sorted(archive.namelist()) == sorted([f"iphone_0{i}.png" for i in range(1, 6)] + ["manifest.json"])


@pytest.mark.asyncio
async def test_export_rejects_invalid_storyboard():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/export", data={"storyboard": "{not json"}, files=screenshot_files(1))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_export_rejects_corrupt_screenshot():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        storyboard = (await generate(client)).json()["storyboard"]
        response = await client.post(
            "/export",
            data={"storyboard": json.dumps(storyboard), "targets": "iphone-6.7"},
            files=[("screenshots", ("shot-1.png", b"garbage", "image/png"))],
        )

    assert response.status_code == 400
