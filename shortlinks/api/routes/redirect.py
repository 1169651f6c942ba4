"""Short code redirection endpoint with visit recording."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.api.dependencies import get_redirect_resolver
from shortlinks.core.url_logger import log_visit
from shortlinks.db.session import get_db
from shortlinks.middleware.logging import client_ip
from shortlinks.services.resolver import RedirectResolver
from shortlinks.services.exceptions import LinkNotFoundError, StoreError

router = APIRouter(tags=["redirect"])


@router.get(
    "/{code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={404: {"description": "Link not found"}}
)
async def redirect_to_target(
    request: Request,
    code: str,
    db: AsyncSession = Depends(get_db),
    resolver: RedirectResolver = Depends(get_redirect_resolver)
):
    """Redirect to the target URL; the visit is committed before responding."""
    try:
        target_url = await resolver.resolve(db, code)
    except LinkNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    log_visit(
        code=code,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent", "")
    )

    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
