from datetime import datetime
from typing import Any, Optional

from attrs import define, field
from attrs.validators import deep_iterable, in_, instance_of, min_len

import common.constants as constants


def _owner_set(owners: Any) -> frozenset:
    # frozenset("amazon") would silently split the id into characters
    if isinstance(owners, str):
        raise TypeError(f"owners must be a collection of ids, not the string {owners!r}")
    return frozenset(owners)


@define(slots=True, frozen=True)
class ImagePreset:
    owners: frozenset[str] = field(
        converter=_owner_set,
        validator=[
            deep_iterable(member_validator=instance_of(str)),
            min_len(1),
        ],
        metadata={"description": "Account ids or aliases allowed to own the image"},
    )
    name_pattern: str = field(
        validator=[instance_of(str), min_len(1)],
        metadata={"description": "Image name glob, '*' matches any run of characters"},
    )


@define(slots=True, frozen=True, kw_only=True)
class ResolutionFilters:
    architecture: str = field(
        default=constants.DEFAULT_ARCHITECTURE, validator=in_(constants.ARCHITECTURES)
    )
    virtualization_type: str = field(
        default=constants.DEFAULT_VIRTUALIZATION_TYPE,
        validator=in_(constants.VIRTUALIZATION_TYPES),
    )
    root_device_type: str = field(
        default=constants.DEFAULT_ROOT_DEVICE_TYPE,
        validator=in_(constants.ROOT_DEVICE_TYPES),
    )


@define(slots=True, frozen=True, kw_only=True)
class ImageQuery:
    """The conjunction of constraints sent to the image catalog."""

    owners: frozenset[str] = field(converter=frozenset)
    name_pattern: str
    filters: ResolutionFilters
    most_recent_only: bool = False

    @classmethod
    def for_preset(
        cls,
        preset: ImagePreset,
        filters: ResolutionFilters,
        most_recent_only: bool = False,
    ) -> "ImageQuery":
        return cls(
            owners=preset.owners,
            name_pattern=preset.name_pattern,
            filters=filters,
            most_recent_only=most_recent_only,
        )

    def describe_images_request(self) -> dict[str, Any]:
        """Render the query as DescribeImages keyword arguments."""
        return {
            "Owners": sorted(self.owners),
            "Filters": [
                {"Name": "name", "Values": [self.name_pattern]},
                {"Name": "architecture", "Values": [self.filters.architecture]},
                {
                    "Name": "virtualization-type",
                    "Values": [self.filters.virtualization_type],
                },
                {
                    "Name": "root-device-type",
                    "Values": [self.filters.root_device_type],
                },
            ],
        }

    def as_constraints(self) -> dict[str, Any]:
        return {
            "owners": sorted(self.owners),
            "name": self.name_pattern,
            "architecture": self.filters.architecture,
            "virtualization_type": self.filters.virtualization_type,
            "root_device_type": self.filters.root_device_type,
            "most_recent_only": self.most_recent_only,
        }


@define(slots=True, frozen=True, kw_only=True)
class CatalogImage:
    image_id: str = field(validator=instance_of(str))
    created_at: datetime = field(validator=instance_of(datetime))
    name: Optional[str] = None


@define(slots=True, frozen=True, kw_only=True)
class ResolvedImage:
    image_id: str
    created_at: datetime
    name: Optional[str]
    preset_name: str = field(
        metadata={"description": "Preset actually used, after any default substitution"}
    )
    query: ImageQuery

    @classmethod
    def from_catalog_image(
        cls, image: CatalogImage, preset_name: str, query: ImageQuery
    ) -> "ResolvedImage":
        return cls(
            image_id=image.image_id,
            created_at=image.created_at,
            name=image.name,
            preset_name=preset_name,
            query=query,
        )
