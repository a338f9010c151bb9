from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import ConfigDict, ValidationError
from pydantic_settings import BaseSettings
from pathlib import PurePath
from typing import Optional, List
import logging
import re
import traceback

from copywriter import create_copy_generator
from providers import parse_api_keys
from showcase import (
    DEVICE_TARGETS, ScreenshotRenderer, ShowcaseGenerator, ScreenshotUpload,
    get_device_options, get_device_target, get_template_options,
    render_slide_svg, validate_template_configuration,
)
from showcase.constants import (
    APP_NAME_MAX_LENGTH, DEFAULT_LOCALE, HEADLINE_MAX_LENGTH, SCREENSHOTS_MAX, SCREENSHOTS_MIN,
    SLIDES_PER_STORYBOARD, SUBHEADLINE_MAX_LENGTH, SUPPORTED_LOCALES, VALUE_BULLETS_MAX, VALUE_BULLETS_MIN,
)
from showcase.errors import (
    CatalogLookupError, ConfigurationError, CopyGenerationError, ScreenshotDecodeError,
    ShowcaseError, StoryboardValidationError,
)
from showcase.models import Storyboard, StoryboardInput, UploadedScreenshot
from showcase.storyboard import StoryboardAssembler, update_screenshot_assignment, update_slide_text
from showcase.theme import is_valid_hex_color
from models import (
    StoryboardResponse, UpdateTextRequest, UpdateScreenshotRequest,
    PreviewRequest, PreviewResponse, OptionsResponse,
)


class Settings(BaseSettings):
    log_level: str = "INFO"
    copy_generator: str = "auto"  # auto | rule_based | llm
    llm_fallback_to_rules: bool = True
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    gemini_api_keys: Optional[str] = None  # Comma-separated API keys
    gemini_model: str = "gemini-2.5-flash"
    fonts_dir: Optional[str] = None  # Directory with Inter-*.ttf
    png_compress_level: int = 9
    max_upload_bytes: int = 10 * 1024 * 1024

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()

# Logging setup
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Broken template catalog must stop the service from starting
    validate_template_configuration()
    yield


app = FastAPI(title="Screenshot Processor", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Export-File-Count"],
)

# Initialize services
assembler = StoryboardAssembler(
    create_copy_generator(
        mode=settings.copy_generator,
        openai_api_key=settings.openai_api_key,
        openai_base_url=settings.openai_base_url,
        openai_model=settings.openai_model,
        gemini_api_keys=parse_api_keys(settings.gemini_api_keys),
        gemini_model=settings.gemini_model,
        fallback_to_rules=settings.llm_fallback_to_rules,
    )
)
showcase_generator = ShowcaseGenerator(
    renderer=ScreenshotRenderer(fonts_dir=settings.fonts_dir, compress_level=settings.png_compress_level)
)


# ============== Helpers ==============

def to_http_exception(e: ShowcaseError, action: str) -> HTTPException:
    """Map studio errors to HTTP status codes."""
    if isinstance(e, (StoryboardValidationError, ScreenshotDecodeError)):
        status_code = 400
    elif isinstance(e, CatalogLookupError):
        status_code = 404
    elif isinstance(e, CopyGenerationError):
        status_code = 502
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=f"{action} failed: {e.message}")


def screenshot_ids(filenames: List[str]) -> List[str]:
    """Stable ids from upload filenames: stem, with -2, -3... for repeats."""
    ids = []
    seen = {}
    for index, filename in enumerate(filenames):
        stem = PurePath(filename).stem if filename else f"screenshot-{index + 1}"
        count = seen.get(stem, 0) + 1
        seen[stem] = count
        ids.append(stem if count == 1 else f"{stem}-{count}")
    return ids


async def read_uploads(files: List[UploadFile]) -> List[ScreenshotUpload]:
    """Read uploaded screenshots, enforcing count, type and size limits."""
    if len(files) < SCREENSHOTS_MIN:
        raise HTTPException(status_code=400, detail="No screenshots uploaded")
    if len(files) > SCREENSHOTS_MAX:
        raise HTTPException(status_code=400, detail=f"Too many screenshots uploaded (max {SCREENSHOTS_MAX})")

    filenames = [f.filename or "" for f in files]
    uploads = []
    for upload_id, file in zip(screenshot_ids(filenames), files):
        if file.content_type and not file.content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail=f"Invalid file type: {file.filename}. Must be an image.")
        data = await file.read()
        if len(data) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"Screenshot {file.filename} exceeds {settings.max_upload_bytes} bytes",
            )
        uploads.append(ScreenshotUpload(id=upload_id, filename=file.filename or f"{upload_id}.png", data=data))
    return uploads


def parse_bullets(values: List[str]) -> List[str]:
    """Accept repeated form fields or one newline-separated field."""
    bullets = []
    for value in values:
        bullets.extend(line.strip() for line in value.splitlines() if line.strip())
    return bullets


def check_brand_color(brand_color: Optional[str]) -> Optional[str]:
    if not brand_color:
        return None
    if not is_valid_hex_color(brand_color):
        raise HTTPException(status_code=400, detail=f"Invalid brand color: {brand_color}. Use #RRGGBB")
    return brand_color


def zip_filename(app_name: str) -> str:
    safe_name = re.sub(r"[^a-z0-9]", "_", app_name, flags=re.IGNORECASE).lower() or "app"
    return f"{safe_name}_screenshots.zip"


# ============== Service ==============

@app.get("/health")
async def health_check():
    try:
        validate_template_configuration()
        templates_ok = True
    except ConfigurationError as e:
        logger.error(f"Template configuration invalid: {e}")
        templates_ok = False

    copy_generator = assembler.copy_generator
    return {
        "status": "healthy" if templates_ok else "degraded",
        "service": "screenshot-processor",
        "templates": "ok" if templates_ok else "invalid",
        "renderer": "pillow",
        "copy_generator": {"name": copy_generator.name, "available": copy_generator.is_available()},
    }


@app.get("/")
async def root():
    return {
        "service": "Screenshot Processor",
        "version": app.version,
        "description": "App Store screenshot storyboards, rendering and ZIP export",
        "endpoints": [
            "/options", "/storyboard/generate", "/storyboard/update-text",
            "/storyboard/update-screenshot", "/storyboard/preview", "/export", "/config", "/health",
        ],
    }


@app.get("/config")
async def get_config():
    """Get current configuration (no secrets)."""
    return {
        "copy_generator": settings.copy_generator,
        "copy_generator_active": assembler.copy_generator.name,
        "llm_fallback_to_rules": settings.llm_fallback_to_rules,
        "openai_model": settings.openai_model,
        "openai_configured": bool(settings.openai_api_key),
        "gemini_model": settings.gemini_model,
        "gemini_api_keys_count": len(parse_api_keys(settings.gemini_api_keys)),
        "png_compress_level": showcase_generator.renderer.compress_level,
        "max_upload_bytes": settings.max_upload_bytes,
    }


@app.get("/options", response_model=OptionsResponse)
async def get_options():
    """
    Get available options for storyboard generation.

    Returns device targets, templates and input limits.
    """
    return OptionsResponse(
        devices=get_device_options(),
        templates=get_template_options(),
        locales=list(SUPPORTED_LOCALES),
        limits={
            "app_name_max_length": APP_NAME_MAX_LENGTH,
            "value_bullets": {"min": VALUE_BULLETS_MIN, "max": VALUE_BULLETS_MAX},
            "screenshots": {"min": SCREENSHOTS_MIN, "max": SCREENSHOTS_MAX},
            "headline_max_length": HEADLINE_MAX_LENGTH,
            "subheadline_max_length": SUBHEADLINE_MAX_LENGTH,
            "slides": SLIDES_PER_STORYBOARD,
        },
    )


# ============== Storyboard ==============

@app.post("/storyboard/generate", response_model=StoryboardResponse)
async def generate_storyboard(
    app_name: str = Form(...),
    value_bullets: List[str] = Form(...),
    locale: str = Form(DEFAULT_LOCALE),
    brand_color: Optional[str] = Form(None),
    screenshots: List[UploadFile] = File(...),
):
    """
    Assemble a five-slide storyboard.

    Args:
        app_name: App name (1-50 chars)
        value_bullets: 3-6 value bullets, repeated or newline-separated
        locale: Copy locale (en-US)
        brand_color: Optional "#RRGGBB", validated only
        screenshots: 1-10 screenshots; ids are the filename stems

    Returns:
        Storyboard with warnings for slides that reuse screenshot #1
    """
    try:
        uploads = await read_uploads(screenshots)
        data = StoryboardInput(
            app_name=app_name.strip(),
            value_bullets=tuple(parse_bullets(value_bullets)),
            screenshots=tuple(
                UploadedScreenshot(id=u.id, filename=u.filename, size=len(u.data)) for u in uploads
            ),
            locale=locale,
            brand_color=check_brand_color(brand_color),
        )

        logger.info(f"Generating storyboard for '{data.app_name}' with {len(uploads)} screenshots")
        result = await assembler.assemble(data)

        return StoryboardResponse(
            storyboard=result.storyboard,
            warnings=result.warnings,
            copy_generator=assembler.copy_generator.name,
        )

    except HTTPException:
        raise
    except ShowcaseError as e:
        logger.error(f"Storyboard generation error: {e}")
        raise to_http_exception(e, "Storyboard generation")
    except Exception as e:
        tb = traceback.format_exc()
        logger.error(f"Storyboard generation error: {e}")
        logger.error(f"Traceback:\n{tb}")
        raise HTTPException(status_code=500, detail=f"Storyboard generation failed: {e}")


@app.post("/storyboard/update-text", response_model=Storyboard)
async def update_text(request: UpdateTextRequest):
    """Edit headline/subheadline of one slide; returns the new storyboard."""
    try:
        return update_slide_text(request.storyboard, request.slide_id, request.headline, request.subheadline)
    except ShowcaseError as e:
        logger.warning(f"Text update rejected: {e}")
        raise to_http_exception(e, "Text update")


@app.post("/storyboard/update-screenshot", response_model=Storyboard)
async def update_screenshot(request: UpdateScreenshotRequest):
    """Reassign one slide's screenshot; returns the new storyboard."""
    try:
        return update_screenshot_assignment(
            request.storyboard, request.slide_id, request.screenshot_id, request.filename
        )
    except ShowcaseError as e:
        logger.warning(f"Screenshot update rejected: {e}")
        raise to_http_exception(e, "Screenshot update")


@app.post("/storyboard/preview", response_model=PreviewResponse)
async def preview_slide(request: PreviewRequest):
    """SVG wireframe of one slide for one device target."""
    try:
        target = get_device_target(request.target_id)
        slide = request.storyboard.get_slide(request.slide_id)
        svg = render_slide_svg(target, slide, check_brand_color(request.brand_color))

        return PreviewResponse(
            slide_id=slide.id,
            target_id=target.id,
            width=target.width,
            height=target.height,
            svg=svg,
        )
    except HTTPException:
        raise
    except ShowcaseError as e:
        logger.warning(f"Preview rejected: {e}")
        raise to_http_exception(e, "Preview")


# ============== Export ==============

@app.post("/export")
async def export_storyboard(
    storyboard: str = Form(...),
    screenshots: List[UploadFile] = File(...),
    brand_color: Optional[str] = Form(None),
    targets: Optional[List[str]] = Form(None),
):
    """
    Render a storyboard for every device target and return a ZIP.

    Args:
        storyboard: Storyboard JSON (as returned by /storyboard/generate)
        screenshots: Screenshot files matched to slides by filename stem
        brand_color: Optional "#RRGGBB" background override
        targets: Optional device target ids (default: all)

    Returns:
        application/zip with PNGs and manifest.json
    """
    try:
        try:
            parsed = Storyboard.model_validate_json(storyboard)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Invalid storyboard JSON: {e.error_count()} errors")

        color = check_brand_color(brand_color)
        uploads = await read_uploads(screenshots)
        selected = [get_device_target(t) for t in targets] if targets else list(DEVICE_TARGETS)

        result = showcase_generator.export(parsed, uploads, brand_color=color, targets=selected)

        return Response(
            content=result.zip_buffer,
            media_type="application/zip",
            headers={
                "Content-Disposition": f'attachment; filename="{zip_filename(parsed.app_name)}"',
                "X-Export-File-Count": str(result.file_count),
            },
        )

    except HTTPException:
        raise
    except ShowcaseError as e:
        logger.error(f"Export error: {e}")
        raise to_http_exception(e, "Export")
    except Exception as e:
        tb = traceback.format_exc()
        logger.error(f"Export error: {e}")
        logger.error(f"Traceback:\n{tb}")
        raise HTTPException(status_code=500, detail=f"Export failed: {e}")
