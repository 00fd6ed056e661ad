from pydantic import BaseModel


class ImageSearchRead(BaseModel):
    """First image found for a search query, if any."""
    query: str
    image_url: str | None
