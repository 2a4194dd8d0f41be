from fastapi import APIRouter, Depends

from app.interfaces.api.container import NotificationContainer
from app.interfaces.api.dependencies import get_container
from app.interfaces.api.schemas import HealthRead

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
async def health(container: NotificationContainer = Depends(get_container)) -> HealthRead:
    registry = container.gateway.registry
    return HealthRead(
        status="ok",
        connected_users=registry.count_connected_users(),
        connections=registry.count_connections(),
    )
