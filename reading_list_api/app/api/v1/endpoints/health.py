"""Liveness endpoint for container and load balancer health checks."""

from fastapi import APIRouter, Response, status

router = APIRouter()


@router.get("/healthz", status_code=status.HTTP_200_OK)
async def healthz() -> Response:
    return Response(status_code=status.HTTP_200_OK)
