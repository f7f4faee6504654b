import os
from typing import Any, Optional

from aws_lambda_powertools.logging.logger import Logger

from image_resolver.errors import NetworkNotFound, SubnetListEmpty

logger: Logger = Logger(
    service="subnet-selector", level=os.getenv("LOG_LEVEL", "INFO").upper()
)


class SubnetSelector:
    """Pick the launch subnet: first public-addressing subnet of a network."""

    def __init__(self, ec2_client: Any) -> None:
        self.ec2_client = ec2_client

    @property
    def region(self) -> Optional[str]:
        return self.ec2_client.meta.region_name

    def default_vpc_id(self) -> str:
        response = self.ec2_client.describe_vpcs(
            Filters=[{"Name": "isDefault", "Values": ["true"]}]
        )
        vpcs = response.get("Vpcs", [])
        if not vpcs:
            raise NetworkNotFound(self.region)
        return vpcs[0]["VpcId"]

    @staticmethod
    def subnet_filters(vpc_id: str) -> list[dict[str, Any]]:
        return [
            {"Name": "vpc-id", "Values": [vpc_id]},
            {"Name": "map-public-ip-on-launch", "Values": ["true"]},
        ]

    def list_subnets(self, vpc_id: str) -> list[str]:
        paginator = self.ec2_client.get_paginator("describe_subnets")
        return [
            subnet["SubnetId"]
            for page in paginator.paginate(Filters=self.subnet_filters(vpc_id))
            for subnet in page.get("Subnets", [])
        ]

    def select_subnet(self, vpc_id: Optional[str] = None) -> str:
        vpc_id = vpc_id or self.default_vpc_id()
        subnet_ids = self.list_subnets(vpc_id)
        if not subnet_ids:
            filters = {f["Name"]: f["Values"] for f in self.subnet_filters(vpc_id)}
            logger.error("No public subnet available", vpc_id=vpc_id, filters=filters)
            raise SubnetListEmpty(vpc_id, filters)

        logger.info(
            "Selected subnet",
            vpc_id=vpc_id,
            subnet_id=subnet_ids[0],
            candidates=len(subnet_ids),
        )
        return subnet_ids[0]
