"""Host-side activity management: quick list, full editor and schedules."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from ...db.repositories import ActivityRepository, ScheduleRepository
from ...errors import FamilyHubError
from ...logging_config import get_logger
from ...notifications import Notifier
from ...services import ActivitySchedules, ExperienceEditor, HostExperiences
from ...services.experience_form import CATEGORIES
from ...session import SessionProvider
from ..deps import (
    get_session_provider,
    get_storage,
    get_store,
    redirect,
    redirect_with_toast,
    render,
    require_user,
)

logger = get_logger(__name__)

router = APIRouter(tags=["activities"])


def _experiences(request: Request, provider: SessionProvider, notifier: Notifier) -> HostExperiences:
    return HostExperiences(
        provider.user.id,
        ActivityRepository(get_store(request)),
        notifier,
        creator_name=provider.profile.display_name if provider.profile else None,
    )


def _editor(
    request: Request,
    provider: SessionProvider,
    notifier: Notifier,
    activity_id: str | None = None,
) -> ExperienceEditor:
    return ExperienceEditor(
        provider.user.id,
        activity_id,
        ActivityRepository(get_store(request)),
        get_storage(request),
        notifier,
        creator_name=provider.profile.display_name if provider.profile else None,
    )


async def _read_image(image: UploadFile | None) -> tuple[str, bytes] | None:
    if image is None or not image.filename:
        return None
    data = await image.read()
    if not data:
        return None
    return image.filename, data


@router.get("/settings/experiences", response_class=HTMLResponse)
async def experiences_page(
    request: Request,
    page: int = 1,
    provider: SessionProvider = Depends(get_session_provider),
):
    """The host's own experiences with a quick-create form."""
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    experiences = _experiences(request, provider, notifier)
    await experiences.load_through(max(page, 1))

    return render(
        request,
        "experiences/list.html",
        {"experiences": experiences, "form": {}},
        provider=provider,
        notifier=notifier,
    )


@router.post("/settings/experiences")
async def quick_create(
    request: Request,
    title: str = Form(""),
    price: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    experiences = _experiences(request, provider, notifier)
    fields = {"title": title, "price": price, "description": description, "location": location}
    try:
        await experiences.create(fields)
    except FamilyHubError:
        await experiences.load(1)
        return render(
            request,
            "experiences/list.html",
            {"experiences": experiences, "form": fields},
            provider=provider,
            notifier=notifier,
            status_code=400,
        )
    return redirect_with_toast("/settings/experiences", notifier)


@router.get("/activities/new", response_class=HTMLResponse)
async def new_activity_form(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    editor = _editor(request, provider, notifier)
    await editor.load()
    return render(
        request,
        "experiences/form.html",
        {"editor": editor, "form": editor.form, "categories": CATEGORIES},
        provider=provider,
        notifier=notifier,
    )


async def _save(
    request: Request,
    provider: SessionProvider,
    activity_id: str | None,
    form: dict,
    image: UploadFile | None,
):
    notifier = Notifier()
    editor = _editor(request, provider, notifier, activity_id)
    try:
        saved = await editor.save(form, await _read_image(image))
    except FamilyHubError:
        return render(
            request,
            "experiences/form.html",
            {"editor": editor, "form": form, "categories": CATEGORIES},
            provider=provider,
            notifier=notifier,
            status_code=400,
        )
    return redirect_with_toast(f"/activities/{saved.id}/edit", notifier)


@router.post("/activities/new")
async def create_activity(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    category: str = Form(""),
    price: str = Form("0"),
    age_range: str = Form(""),
    is_premium: bool = Form(False),
    image: UploadFile | None = File(None),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    form = {
        "title": title,
        "description": description,
        "location": location,
        "category": category,
        "price": price,
        "age_range": age_range,
        "is_premium": is_premium,
    }
    return await _save(request, provider, None, form, image)


@router.get("/activities/{activity_id}/edit", response_class=HTMLResponse)
async def edit_activity_form(
    request: Request,
    activity_id: str,
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    editor = _editor(request, provider, notifier, activity_id)
    await editor.load()
    if editor.error:
        return render(
            request,
            "error.html",
            {"message": editor.error, "retry_url": request.url.path},
            provider=provider,
            notifier=notifier,
            status_code=404 if editor.not_found else 500,
        )

    schedules = ActivitySchedules(activity_id, ScheduleRepository(get_store(request)), notifier)
    await schedules.load()

    return render(
        request,
        "experiences/form.html",
        {
            "editor": editor,
            "form": editor.form,
            "categories": CATEGORIES,
            "schedules": schedules,
        },
        provider=provider,
        notifier=notifier,
    )


@router.post("/activities/{activity_id}/edit")
async def update_activity(
    request: Request,
    activity_id: str,
    title: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    category: str = Form(""),
    price: str = Form("0"),
    age_range: str = Form(""),
    image_url: str = Form(""),
    is_premium: bool = Form(False),
    image: UploadFile | None = File(None),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    form = {
        "title": title,
        "description": description,
        "location": location,
        "category": category,
        "price": price,
        "age_range": age_range,
        "image_url": image_url,
        "is_premium": is_premium,
    }
    return await _save(request, provider, activity_id, form, image)


@router.post("/activities/{activity_id}/schedules")
async def add_schedule(
    request: Request,
    activity_id: str,
    date: str = Form(""),
    start_time: str = Form(""),
    end_time: str = Form(""),
    available_spots: str = Form(""),
    price_override: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    """Add a schedule to an activity the caller owns."""
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    store = get_store(request)
    edit_url = f"/activities/{activity_id}/edit"
    try:
        owned = await ActivityRepository(store).get_owned(activity_id, provider.user.id)
    except FamilyHubError as e:
        logger.error(f"Ownership lookup for {activity_id} failed: {e}")
        return redirect(edit_url, "Could not add schedule")
    if owned is None:
        return redirect("/settings/experiences", "Experience not found")

    notifier = Notifier()
    schedules = ActivitySchedules(activity_id, ScheduleRepository(store), notifier)
    fields = {
        "date": date,
        "start_time": start_time,
        "end_time": end_time,
        "available_spots": available_spots,
        "price_override": price_override,
    }
    try:
        await schedules.add_schedule(fields)
    except FamilyHubError:
        # Already reported as an error toast, which travels with the redirect
        pass
    return redirect_with_toast(edit_url, notifier)
