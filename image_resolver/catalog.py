from datetime import datetime, timezone
from typing import Any, Protocol

from image_resolver.models import CatalogImage, ImageQuery


class ImageCatalog(Protocol):
    def find_images(self, query: ImageQuery) -> list[CatalogImage]:
        """Return every image matching ``query``, in catalog order."""
        ...


def parse_creation_date(value: str) -> datetime:
    # EC2 reports CreationDate as e.g. 2024-02-01T10:00:00.000Z
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_catalog_image(image: dict[str, Any]) -> CatalogImage:
    return CatalogImage(
        image_id=image["ImageId"],
        created_at=parse_creation_date(image["CreationDate"]),
        name=image.get("Name"),
    )


class Ec2ImageCatalog:
    """Image catalog backed by the EC2 DescribeImages API.

    With ``most_recent_only`` set on the query, this adapter is the side that
    decides recency: it orders by CreationDate and returns a single image.
    Transport errors from botocore are not caught here.
    """

    def __init__(self, ec2_client: Any) -> None:
        self.ec2_client = ec2_client

    def find_images(self, query: ImageQuery) -> list[CatalogImage]:
        paginator = self.ec2_client.get_paginator("describe_images")
        images = [
            _to_catalog_image(image)
            for page in paginator.paginate(**query.describe_images_request())
            for image in page.get("Images", [])
        ]
        if query.most_recent_only and images:
            # sorted() is stable, so equal timestamps keep catalog order
            latest = sorted(images, key=lambda image: image.created_at, reverse=True)
            return latest[:1]
        return images
