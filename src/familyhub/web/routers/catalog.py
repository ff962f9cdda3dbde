"""Public activity browsing."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ...db.repositories import ActivityRepository, ScheduleRepository
from ...errors import FamilyHubError
from ...models.activity import ActivityStatus
from ...notifications import Notifier
from ...services import ActivitySchedules, PublishedCatalog
from ...session import SessionProvider
from ..deps import get_session_provider, get_store, render

router = APIRouter(tags=["catalog"])


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    page: int = 1,
    provider: SessionProvider = Depends(get_session_provider),
):
    """Published activities, newest first."""
    notifier = Notifier()
    catalog = PublishedCatalog(ActivityRepository(get_store(request)), notifier)
    await catalog.load_through(max(page, 1))

    return render(
        request,
        "catalog/index.html",
        {"catalog": catalog},
        provider=provider,
        notifier=notifier,
    )


@router.get("/activities/{activity_id}", response_class=HTMLResponse)
async def activity_detail(
    request: Request,
    activity_id: str,
    provider: SessionProvider = Depends(get_session_provider),
):
    """One activity with its schedules.

    Unpublished activities are only visible to their creator.
    """
    store = get_store(request)
    notifier = Notifier()
    try:
        activity = await ActivityRepository(store).get(activity_id)
    except FamilyHubError:
        return render(
            request,
            "error.html",
            {"message": "Could not load this activity", "retry_url": request.url.path},
            provider=provider,
            status_code=500,
        )

    owner = provider.user is not None and activity is not None and activity.creator_id == provider.user.id
    if activity is None or (activity.status != ActivityStatus.PUBLISHED and not owner):
        return render(
            request,
            "error.html",
            {"message": "Activity not found", "retry_url": request.url.path},
            provider=provider,
            status_code=404,
        )

    schedules = ActivitySchedules(activity.id, ScheduleRepository(store), notifier)
    await schedules.load()

    return render(
        request,
        "catalog/detail.html",
        {"activity": activity, "schedules": schedules, "is_owner": owner},
        provider=provider,
        notifier=notifier,
    )
