import os
from typing import Any, Optional

from attrs import define
from aws_lambda_powertools.logging.logger import Logger

from common.config import ProvisioningConfig
from image_resolver.catalog import Ec2ImageCatalog, ImageCatalog
from image_resolver.models import ResolvedImage
from image_resolver.presets import DEFAULT_PRESETS, PresetCatalog
from image_resolver.resolver import ImageResolver
from networking.subnet_selector import SubnetSelector
from sandbox.policy_source import (
    FilePolicyDocumentSource,
    PolicyDocument,
    PolicyDocumentSource,
)

logger: Logger = Logger(
    service="launch-inputs", level=os.getenv("LOG_LEVEL", "INFO").upper()
)


@define(slots=True, frozen=True, kw_only=True)
class LaunchInputs:
    """Everything the sandbox stack needs, resolved before synthesis."""

    dev_image_id: str
    prod_image_id: str
    subnet_id: str
    policy_document: PolicyDocument
    resolved_image: Optional[ResolvedImage] = None


def gather_launch_inputs(
    config: ProvisioningConfig,
    ec2_client: Any,
    presets: PresetCatalog = DEFAULT_PRESETS,
    image_catalog: Optional[ImageCatalog] = None,
    policy_source: Optional[PolicyDocumentSource] = None,
) -> LaunchInputs:
    resolved_image = None
    if config.needs_image_resolution:
        resolver = ImageResolver(presets, image_catalog or Ec2ImageCatalog(ec2_client))
        resolved_image = resolver.resolve(config.base_preset_name, config.filters)
    else:
        logger.info("Both image overrides set, skipping image resolution")

    dev_image_id = config.dev_image_override or resolved_image.image_id
    prod_image_id = config.prod_image_override or resolved_image.image_id

    subnet_id = SubnetSelector(ec2_client).select_subnet(config.vpc_id)

    policy_source = policy_source or FilePolicyDocumentSource(config.policy_document_path)
    policy_document = policy_source.load()
    logger.info(
        "Loaded access policy document",
        source=policy_document.source,
        sha256=policy_document.sha256,
    )

    return LaunchInputs(
        dev_image_id=dev_image_id,
        prod_image_id=prod_image_id,
        subnet_id=subnet_id,
        policy_document=policy_document,
        resolved_image=resolved_image,
    )
