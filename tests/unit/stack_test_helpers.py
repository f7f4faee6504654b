from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional
from aws_cdk.assertions import Template
from aws_cdk import App
import pytest

from common.config import ProvisioningConfig
from sandbox.launch_inputs import LaunchInputs
from sandbox.policy_source import FilePolicyDocumentSource
from sandbox.sandbox_stack import SandboxStack

POLICY_PATH = Path(__file__).resolve().parents[2] / "policies" / "dev_only_access.json"

DEV_IMAGE_ID = "ami-0dev1234567890abc"
PROD_IMAGE_ID = "ami-0prod234567890abc"
SUBNET_ID = "subnet-0public1234567"


# ------------------- Test Case Data Classes -------------------
@dataclass(frozen=True)
class InstanceTestCase:
    id: str
    env: str
    image_id: str
    name: str


@dataclass(frozen=True)
class OutputTestCase:
    id: str
    description: str


# ------------------- Helper Functions -------------------


def find_resources_by_type(
    template: Template, resource_type: str, props: Optional[dict] = None
) -> Mapping[str, Any]:

    return template.find_resources(resource_type, props=props)


def get_single_resource_id(
    resources: Mapping[str, Any], resource_type: str = "resource"
) -> str:
    assert len(resources) == 1, f"expected exactly one {resource_type}"
    return next(iter(resources))


def build_config(**overrides) -> ProvisioningConfig:
    values = {"region": "us-east-1", "account_alias": "acme-sandbox", **overrides}
    return ProvisioningConfig(**values)


def build_inputs() -> LaunchInputs:
    return LaunchInputs(
        dev_image_id=DEV_IMAGE_ID,
        prod_image_id=PROD_IMAGE_ID,
        subnet_id=SUBNET_ID,
        policy_document=FilePolicyDocumentSource(POLICY_PATH).load(),
    )


def build_template(stack_id: str = "TestSandboxStack", **overrides) -> Template:
    app = App()
    stack = SandboxStack(
        app, stack_id, config=build_config(**overrides), inputs=build_inputs()
    )
    return Template.from_stack(stack)


# ------------------- Pytest Fixtures -------------------


@pytest.fixture
def template() -> Template:
    return build_template()


@pytest.fixture
def json_template(template: Template) -> Mapping[str, Any]:
    return template.to_json()
