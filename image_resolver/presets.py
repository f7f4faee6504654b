from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from attrs import define, field
from attrs.validators import instance_of

import common.constants as constants
from image_resolver.models import ImagePreset


def _freeze(presets: Mapping[str, ImagePreset]) -> Mapping[str, ImagePreset]:
    return MappingProxyType(dict(presets))


@define(slots=True, frozen=True)
class PresetCatalog:
    """Ordered, read-only mapping of preset names to image presets.

    The catalog always contains its default preset; that is the one used
    when a requested name is not recognized.
    """

    presets: Mapping[str, ImagePreset] = field(converter=_freeze)
    default_name: str = field(default=constants.DEFAULT_PRESET_NAME, validator=instance_of(str))

    @presets.validator
    def _check_presets(self, attribute, value: Mapping[str, ImagePreset]) -> None:
        for name, preset in value.items():
            if not isinstance(preset, ImagePreset):
                raise TypeError(f"Preset '{name}' must be an ImagePreset, got {type(preset).__name__}")

    @default_name.validator
    def _check_default_name(self, attribute, value: str) -> None:
        if value not in self.presets:
            raise ValueError(f"Default preset '{value}' is not in the catalog")

    def lookup(self, name: str) -> Optional[ImagePreset]:
        """Return the preset registered under ``name``, or None. Never falls back."""
        return self.presets.get(name)

    @property
    def default(self) -> ImagePreset:
        return self.presets[self.default_name]

    def names(self) -> list[str]:
        return list(self.presets)

    def __contains__(self, name: object) -> bool:
        return name in self.presets

    def __iter__(self) -> Iterator[str]:
        return iter(self.presets)

    def __len__(self) -> int:
        return len(self.presets)


DEFAULT_PRESETS = PresetCatalog(
    presets={
        "al2023": ImagePreset(
            owners={constants.AMAZON_OWNER},
            name_pattern="al2023-ami-*-kernel-6.1-*",
        ),
        "al2": ImagePreset(
            owners={constants.AMAZON_OWNER},
            name_pattern="amzn2-ami-hvm-*-gp2",
        ),
        "ubuntu2204": ImagePreset(
            owners={constants.CANONICAL_OWNER},
            name_pattern="ubuntu/images/hvm-ssd/ubuntu-jammy-22.04-*-server-*",
        ),
        "ubuntu2404": ImagePreset(
            owners={constants.CANONICAL_OWNER},
            name_pattern="ubuntu/images/hvm-ssd-gp3/ubuntu-noble-24.04-*-server-*",
        ),
        "debian12": ImagePreset(
            owners={constants.DEBIAN_OWNER},
            name_pattern="debian-12-*",
        ),
        "rhel9": ImagePreset(
            owners={constants.REDHAT_OWNER},
            name_pattern="RHEL-9.*",
        ),
    },
    default_name=constants.DEFAULT_PRESET_NAME,
)
