"""Endpoints for managing short links."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.api import schemas
from shortlinks.api.dependencies import get_link_registry, get_base_url
from shortlinks.api.params import LimitParam, SkipParam
from shortlinks.db.session import get_db
from shortlinks.models.link import Link
from shortlinks.services.registry import LinkRegistry
from shortlinks.services.exceptions import (
    InvalidUrlError,
    InvalidCodeError,
    CodeConflictError,
    CodeGenerationExhaustedError,
    LinkNotFoundError,
    StoreError,
)

router = APIRouter(prefix="/links", tags=["links"])


def to_response(link: Link, base_url: str) -> schemas.LinkResponse:
    return schemas.LinkResponse(
        id=link.id,
        code=link.code,
        target_url=link.target_url,
        clicks=link.clicks,
        last_clicked=link.last_clicked,
        created_at=link.created_at,
        short_url=f"{base_url}/{link.code}",
    )


@router.post(
    "",
    response_model=schemas.LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid URL or code"},
        409: {"model": schemas.ErrorResponse, "description": "Code already exists"},
        500: {"model": schemas.ErrorResponse, "description": "Code generation exhausted or store error"},
    }
)
async def create_link(
    link_data: schemas.LinkCreateRequest,
    db: AsyncSession = Depends(get_db),
    registry: LinkRegistry = Depends(get_link_registry),
    base_url: str = Depends(get_base_url)
):
    """Create a link under a custom or generated code."""
    try:
        link = await registry.create_link(
            db=db,
            target_url=link_data.target_url,
            code=link_data.code
        )
        return to_response(link, base_url)
    except (InvalidUrlError, InvalidCodeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CodeConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (CodeGenerationExhaustedError, StoreError) as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "",
    response_model=List[schemas.LinkResponse],
    responses={
        500: {"model": schemas.ErrorResponse, "description": "Store error"},
    }
)
async def list_links(
    skip: int = SkipParam(),
    limit: Optional[int] = LimitParam(),
    db: AsyncSession = Depends(get_db),
    registry: LinkRegistry = Depends(get_link_registry),
    base_url: str = Depends(get_base_url)
):
    """List links, newest first."""
    try:
        links = await registry.list_links(db=db, skip=skip, limit=limit)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return [to_response(link, base_url) for link in links]


@router.get(
    "/{code}",
    response_model=schemas.LinkResponse,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Link not found"},
    }
)
async def get_link(
    code: str = Path(..., description="The short code of the link"),
    db: AsyncSession = Depends(get_db),
    registry: LinkRegistry = Depends(get_link_registry),
    base_url: str = Depends(get_base_url)
):
    """Get a single link with its click statistics."""
    try:
        link = await registry.get_link(db, code)
    except LinkNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return to_response(link, base_url)


@router.delete(
    "/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Link not found"},
        500: {"model": schemas.ErrorResponse, "description": "Store error"},
    }
)
async def delete_link(
    code: str = Path(..., description="The short code of the link"),
    db: AsyncSession = Depends(get_db),
    registry: LinkRegistry = Depends(get_link_registry)
):
    """Delete a link; its code is free to be reused afterwards."""
    try:
        await registry.delete_link(db=db, code=code)
    except LinkNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
