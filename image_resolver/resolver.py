"""Deterministic selection of one machine image from a symbolic preset name.

Resolution is a single catalog request per call:

1. Look up the preset. Unknown names are replaced by the catalog's default
   preset and logged as a warning; this is the only recovery path.
2. Build the constraint set: preset owners AND name glob AND the three
   attribute filters.
3. Query the image catalog once.
4. Pick the most recent image, ties going to catalog order. A catalog that
   honored the most-recent-only request returns one image, taken as-is.
5. Raise ``NoMatchingImage`` on an empty answer. A recognized preset that
   matches nothing never falls back to the default.

Catalog transport errors are propagated unchanged.
"""
import os

from aws_lambda_powertools.logging.logger import Logger

from image_resolver.catalog import ImageCatalog
from image_resolver.errors import NoMatchingImage
from image_resolver.models import (
    CatalogImage,
    ImagePreset,
    ImageQuery,
    ResolutionFilters,
    ResolvedImage,
)
from image_resolver.presets import PresetCatalog

logger: Logger = Logger(
    service="image-resolver", level=os.getenv("LOG_LEVEL", "INFO").upper()
)


def select_most_recent(images: list[CatalogImage]) -> CatalogImage:
    # max() keeps the first of equal keys, so ties go to catalog order
    return max(images, key=lambda image: image.created_at)


class ImageResolver:
    """Resolve preset names against an injected preset catalog and image catalog.

    Example:
        resolver = ImageResolver(DEFAULT_PRESETS, Ec2ImageCatalog(ec2_client))
        image = resolver.resolve("al2023", ResolutionFilters(architecture="arm64"))
    """

    def __init__(
        self,
        presets: PresetCatalog,
        image_catalog: ImageCatalog,
        most_recent_only: bool = True,
    ) -> None:
        self.presets = presets
        self.image_catalog = image_catalog
        self.most_recent_only = most_recent_only

    def select_preset(self, preset_name: str) -> tuple[str, ImagePreset]:
        """Return the (name, preset) pair to use for ``preset_name``."""
        preset = self.presets.lookup(preset_name)
        if preset is not None:
            return preset_name, preset

        logger.warning(
            "Unrecognized image preset, using the default preset instead",
            requested_preset=preset_name,
            default_preset=self.presets.default_name,
            known_presets=self.presets.names(),
        )
        return self.presets.default_name, self.presets.default

    def build_query(self, preset: ImagePreset, filters: ResolutionFilters) -> ImageQuery:
        return ImageQuery.for_preset(
            preset, filters, most_recent_only=self.most_recent_only
        )

    def resolve(self, preset_name: str, filters: ResolutionFilters) -> ResolvedImage:
        selected_name, preset = self.select_preset(preset_name)
        query = self.build_query(preset, filters)

        logger.info(
            "Querying image catalog",
            preset=selected_name,
            constraints=query.as_constraints(),
        )
        images = self.image_catalog.find_images(query)
        if not images:
            logger.error(
                "No image matches the preset constraints",
                preset=selected_name,
                constraints=query.as_constraints(),
            )
            raise NoMatchingImage(selected_name, query.as_constraints())

        # A catalog honoring most_recent_only answers with one image, which
        # max() returns unchanged
        image = select_most_recent(images)

        logger.info(
            "Resolved image",
            preset=selected_name,
            image_id=image.image_id,
            created_at=image.created_at.isoformat(),
            candidates=len(images),
        )
        return ResolvedImage.from_catalog_image(image, selected_name, query)


def resolve(
    preset_name: str,
    catalog: PresetCatalog,
    filters: ResolutionFilters,
    image_catalog: ImageCatalog,
    most_recent_only: bool = True,
) -> ResolvedImage:
    return ImageResolver(catalog, image_catalog, most_recent_only).resolve(
        preset_name, filters
    )
