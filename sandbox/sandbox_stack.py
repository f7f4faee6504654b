from aws_cdk import (
    CfnOutput,
    Stack,
    Tags,
    aws_ec2 as ec2,
    aws_iam as iam,
    custom_resources as cr,
)
from constructs import Construct

import common.constants as constants
from common.config import ProvisioningConfig
from common.stack_context import StackContext
from sandbox.launch_inputs import LaunchInputs
from sandbox.policy_source import PolicyDocument


class SandboxStack(Stack):

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: ProvisioningConfig,
        inputs: LaunchInputs,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.context = StackContext(scope=self)
        self.config = config

        # Compute instances, both launched from already-resolved images
        self.dev_instance = self._build_instance(
            constants.ENV_DEVELOPMENT, inputs.dev_image_id, inputs.subnet_id
        )
        self.prod_instance = self._build_instance(
            constants.ENV_PRODUCTION, inputs.prod_image_id, inputs.subnet_id
        )

        # Identity: group with the access policy, intern user, membership
        self.dev_group = self._build_dev_group()
        self.access_policy = self._build_access_policy(
            inputs.policy_document, self.dev_group
        )
        self.intern_user = self._build_intern_user()
        self.membership = self._build_membership(self.dev_group, self.intern_user)

        self.account_alias = self._build_account_alias()

        CfnOutput(
            self,
            "DevInstancePublicAddress",
            value=self.dev_instance.attr_public_ip,
            description="Public IP of the development instance, empty until it is running",
        )
        CfnOutput(
            self,
            "InternLoginUrl",
            value=config.intern_login_url,
            description="Console sign-in URL for the intern user",
        )

    # Resource creation

    def _build_instance(self, env: str, image_id: str, subnet_id: str) -> ec2.CfnInstance:
        return ec2.CfnInstance(
            self,
            self.context.build_resource_id("Instance", env=env),
            image_id=image_id,
            instance_type=self.config.instance_class,
            subnet_id=subnet_id,
            tags=self.context.build_instance_tags(env),
        )

    def _build_dev_group(self) -> iam.Group:
        return iam.Group(
            self,
            self.context.build_resource_id("Group"),
            group_name=self.config.dev_group_name,
        )

    def _build_access_policy(
        self, policy_document: PolicyDocument, group: iam.IGroup
    ) -> iam.ManagedPolicy:
        """Attach the externally supplied policy document to the group as-is."""
        return iam.ManagedPolicy(
            self,
            self.context.build_resource_id("Policy"),
            managed_policy_name=self.context.build_resource_name("policy"),
            description=f"Development-only access, document sha256:{policy_document.short_hash}",
            document=iam.PolicyDocument.from_json(policy_document.as_json()),
            groups=[group],
        )

    def _build_intern_user(self) -> iam.User:
        user = iam.User(
            self,
            self.context.build_resource_id("User"),
            user_name=self.config.intern_username,
        )
        Tags.of(user).add("Owner", self.config.owner_tag)
        return user

    def _build_membership(
        self, group: iam.IGroup, user: iam.IUser
    ) -> iam.CfnUserToGroupAddition:
        return iam.CfnUserToGroupAddition(
            self,
            self.context.build_resource_id("Membership"),
            group_name=group.group_name,
            users=[user.user_name],
        )

    def _build_account_alias(self) -> cr.AwsCustomResource:
        """CloudFormation has no account alias resource, so call IAM directly."""
        alias = self.config.account_alias
        return cr.AwsCustomResource(
            self,
            self.context.build_resource_id("AccountAlias"),
            on_create=cr.AwsSdkCall(
                service="IAM",
                action="createAccountAlias",
                parameters={"AccountAlias": alias},
                physical_resource_id=cr.PhysicalResourceId.of(alias),
            ),
            on_delete=cr.AwsSdkCall(
                service="IAM",
                action="deleteAccountAlias",
                parameters={"AccountAlias": alias},
            ),
            policy=cr.AwsCustomResourcePolicy.from_sdk_calls(
                resources=cr.AwsCustomResourcePolicy.ANY_RESOURCE
            ),
            install_latest_aws_sdk=False,
        )
