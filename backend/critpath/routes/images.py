"""
Image lookup routes for the Critpath API.
"""

from fastapi import APIRouter, Depends, Query

from critpath.schemas import ImageSearchRead
from critpath.services.images import PexelsClient, get_image_client

router = APIRouter()


@router.get("/search", response_model=ImageSearchRead)
async def search_image(
    query: str = Query(..., min_length=1),
    client: PexelsClient = Depends(get_image_client),
) -> ImageSearchRead:
    """Find an illustrative image for a task title."""
    image_url = await client.search_first_image(query)
    return ImageSearchRead(query=query, image_url=image_url)
