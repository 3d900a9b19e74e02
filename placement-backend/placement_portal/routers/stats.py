from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from placement_portal.models.user import User
from placement_portal.routers.dependencies import get_storage, require
from placement_portal.schemas.stats import StatsResponse
from placement_portal.services import application_workflow
from placement_portal.services.access_control import Operation
from placement_portal.services.storage import Storage


router = APIRouter(prefix="/stats", tags=["stats"])

logger = logging.getLogger(__name__)


@router.get("", response_model=StatsResponse)
def get_stats(
    storage: Storage = Depends(get_storage),
    viewer: User = Depends(require(Operation.VIEW_STATS)),
) -> StatsResponse:
    logger.info("stats.view user_id=%s role=%s", viewer.id, viewer.role.value)
    return StatsResponse(**application_workflow.compute_stats(storage))
