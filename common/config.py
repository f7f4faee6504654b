import os
from typing import Any, Optional

import attrs
from attrs import define, field
from attrs.validators import in_, instance_of, min_len, optional
from constructs import Node

import common.constants as constants
from image_resolver.errors import InvalidConfiguration
from image_resolver.models import ResolutionFilters


def _context_key(name: str) -> dict[str, Any]:
    return {"context_key": name}


@define(slots=True, frozen=True, kw_only=True)
class ProvisioningConfig:
    """Provisioning options read from the CDK context.

    Each field maps to one context key (``cdk synth -c basePresetName=al2``).
    """

    region: str = field(
        default=constants.DEFAULT_REGION,
        validator=[instance_of(str), min_len(1)],
        metadata=_context_key("region"),
    )
    base_preset_name: str = field(
        default=constants.DEFAULT_PRESET_NAME,
        validator=instance_of(str),
        metadata=_context_key("basePresetName"),
    )
    architecture: str = field(
        default=constants.DEFAULT_ARCHITECTURE,
        validator=in_(constants.ARCHITECTURES),
        metadata=_context_key("architecture"),
    )
    virtualization_type: str = field(
        default=constants.DEFAULT_VIRTUALIZATION_TYPE,
        validator=in_(constants.VIRTUALIZATION_TYPES),
        metadata=_context_key("virtualizationType"),
    )
    root_device_type: str = field(
        default=constants.DEFAULT_ROOT_DEVICE_TYPE,
        validator=in_(constants.ROOT_DEVICE_TYPES),
        metadata=_context_key("rootDeviceType"),
    )
    owner_tag: str = field(
        default=constants.DEFAULT_OWNER_TAG,
        validator=instance_of(str),
        metadata=_context_key("ownerTag"),
    )
    instance_class: str = field(
        default=constants.DEFAULT_INSTANCE_CLASS,
        validator=[instance_of(str), min_len(1)],
        metadata=_context_key("instanceClass"),
    )
    dev_image_override: Optional[str] = field(
        default=None,
        validator=optional(instance_of(str)),
        metadata=_context_key("devImageOverride"),
    )
    prod_image_override: Optional[str] = field(
        default=None,
        validator=optional(instance_of(str)),
        metadata=_context_key("prodImageOverride"),
    )
    dev_group_name: str = field(
        default=constants.DEFAULT_DEV_GROUP_NAME,
        validator=[instance_of(str), min_len(1)],
        metadata=_context_key("devGroupName"),
    )
    intern_username: str = field(
        default=constants.DEFAULT_INTERN_USERNAME,
        validator=[instance_of(str), min_len(1)],
        metadata=_context_key("internUsername"),
    )
    account_alias: str = field(
        default=constants.DEFAULT_ACCOUNT_ALIAS,
        validator=[instance_of(str), min_len(1)],
        metadata=_context_key("accountAlias"),
    )
    vpc_id: Optional[str] = field(
        default=None,
        validator=optional(instance_of(str)),
        metadata=_context_key("vpcId"),
    )
    policy_document_path: str = field(
        default=constants.DEFAULT_POLICY_DOCUMENT_PATH,
        validator=[instance_of(str), min_len(1)],
        metadata=_context_key("policyDocumentPath"),
    )

    @classmethod
    def from_context(cls, node: Node) -> "ProvisioningConfig":
        values: dict[str, Any] = {}
        for attribute in attrs.fields(cls):
            key = attribute.metadata["context_key"]
            value = node.try_get_context(key)
            # Empty strings mean "not set" for optional overrides
            if value is None or value == "":
                continue
            values[attribute.name] = value

        values.setdefault("region", os.getenv("CDK_DEFAULT_REGION") or constants.DEFAULT_REGION)

        try:
            return cls(**values)
        except (TypeError, ValueError) as e:
            key, value = _offending_value(values, e)
            raise InvalidConfiguration(key, value, str(e)) from e

    @property
    def filters(self) -> ResolutionFilters:
        return ResolutionFilters(
            architecture=self.architecture,
            virtualization_type=self.virtualization_type,
            root_device_type=self.root_device_type,
        )

    @property
    def needs_image_resolution(self) -> bool:
        return not (self.dev_image_override and self.prod_image_override)

    @property
    def intern_login_url(self) -> str:
        return constants.CONSOLE_LOGIN_URL.format(
            account_alias=self.account_alias,
            provider_domain=constants.PROVIDER_DOMAIN,
        )


def _offending_value(values: dict[str, Any], error: Exception) -> tuple[str, Any]:
    # attrs validators pass the failing Attribute as the second exception arg
    if len(error.args) > 1 and isinstance(error.args[1], attrs.Attribute):
        attribute = error.args[1]
        return attribute.metadata["context_key"], values.get(attribute.name)
    # min_len and friends only name the attribute in the message
    message = str(error.args[0]) if error.args else ""
    for attribute in attrs.fields(ProvisioningConfig):
        if f"'{attribute.name}'" in message:
            return attribute.metadata["context_key"], values.get(attribute.name)
    return "<unknown>", None
