from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from opsboard.api.dependencies import AdminUserDep

router = APIRouter()


@router.get("/metrics")
def metrics_endpoint(_admin: AdminUserDep) -> Response:
    # Native counters are incremented at event points; just expose registry.
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
