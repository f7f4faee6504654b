from typing import Any, Mapping, Optional


class ProvisioningError(Exception):
    """Base class for errors that abort a provisioning run."""


class InvalidConfiguration(ProvisioningError):
    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid value {value!r} for context key '{key}': {reason}")


class NoMatchingImage(ProvisioningError):
    """No catalog image satisfies the constraint set of a recognized preset."""

    def __init__(self, preset_name: str, constraints: Mapping[str, Any]) -> None:
        self.preset_name = preset_name
        self.constraints = dict(constraints)
        super().__init__(
            f"No image matches preset '{preset_name}' with constraints {self.constraints}"
        )


class SubnetListEmpty(ProvisioningError):
    def __init__(self, vpc_id: str, filters: Mapping[str, Any]) -> None:
        self.vpc_id = vpc_id
        self.filters = dict(filters)
        super().__init__(
            f"No subnet in network {vpc_id} matches filters {self.filters}"
        )


class NetworkNotFound(ProvisioningError):
    def __init__(self, region: Optional[str] = None) -> None:
        self.region = region
        super().__init__(f"No default network exists in region {region or 'unknown'}")
