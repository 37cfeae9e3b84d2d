from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_current_admin_user, get_store
from app.models.user import User
from app.schemas.show import AdminShow, ShowCreate, Show as ShowSchema
from app.services.store import ShowStore

router = APIRouter(prefix="/admin/shows", tags=["Admin - Shows"])


@router.post("/", response_model=ShowSchema, status_code=status.HTTP_201_CREATED)
def create_show(
    data: ShowCreate,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_admin_user),
):
    return store.create_show(**data.model_dump())


@router.get("/", response_model=List[AdminShow])
def list_shows(
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_admin_user),
):
    """All shows, past and upcoming, soonest first, with their booked seat counts."""
    items = []
    for show, booked_count in store.list_shows_with_booked_counts():
        item = AdminShow.model_validate(show)
        item.booked_count = booked_count
        items.append(item)
    return items


@router.delete("/{show_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_show(
    show_id: UUID,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_admin_user),
):
    """Delete a show. Its bookings are deleted with it."""
    store.delete_show(show_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
