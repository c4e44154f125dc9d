"""Health check route."""

from fastapi import APIRouter, Response, status

router = APIRouter()


@router.get("/healthcheck", status_code=status.HTTP_200_OK, response_class=Response)
async def healthcheck() -> Response:
    """Report that the process is serving requests. Does not touch the database."""
    return Response(status_code=status.HTTP_200_OK)
