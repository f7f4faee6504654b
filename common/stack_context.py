from attrs import define, field
from aws_cdk import CfnTag, Stack
from typing import Optional

import common.constants as constants


@define(slots=True, frozen=True)
class StackContext:
    scope: Stack
    service: str = field(default=constants.SERVICE_NAME, init=False)
    component: str = field(default=constants.COMPONENT)

    # ---------- naming ----------
    def build_resource_name(self, resource_type: str, env: Optional[str] = None) -> str:
        """Build resource name with optional environment.

        Examples:
            - Without env: sandbox-compute-policy
            - With env: sandbox-compute-instance-development
        """
        if env:
            return f"{self.service}-{self.component}-{resource_type}-{env}".lower()
        return f"{self.service}-{self.component}-{resource_type}".lower()

    def build_resource_id(self, resource_type: str, env: Optional[str] = None) -> str:
        """Build resource ID with optional environment.

        Examples:
            - Without env: SandboxComputePolicy
            - With env: SandboxComputeInstanceDevelopment
        """
        if env:
            return (
                f"{self.service.capitalize()}"
                f"{self.component.capitalize()}"
                f"{resource_type.capitalize()}"
                f"{env.capitalize()}"
            )
        return (
            f"{self.service.capitalize()}"
            f"{self.component.capitalize()}"
            f"{resource_type.capitalize()}"
        )

    # ---------- tags ----------
    def build_instance_tags(self, env: str) -> list[CfnTag]:
        """The fixed {Name, Env} tag set of a compute instance."""
        return [
            CfnTag(key="Name", value=self.build_resource_name("instance", env=env)),
            CfnTag(key="Env", value=env),
        ]
