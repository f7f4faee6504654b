from typing import Any, Mapping
import pytest
from aws_cdk.assertions import Template, Match
from stack_test_helpers import (
    DEV_IMAGE_ID,
    PROD_IMAGE_ID,
    SUBNET_ID,
    InstanceTestCase,
    OutputTestCase,
    build_inputs,
    build_template,
    find_resources_by_type,
    get_single_resource_id,
    template,
    json_template,
)
from governance_checks import (
    assert_instance_tag_compliance,
    assert_policy_attached_to_group_only,
)

# ----------------------------- Resource count smoke test ------------------------

RESOURCES = [
    ("AWS::EC2::Instance", 2),
    ("AWS::IAM::Group", 1),
    ("AWS::IAM::ManagedPolicy", 1),
    ("AWS::IAM::User", 1),
    ("AWS::IAM::UserToGroupAddition", 1),
    ("Custom::AWS", 1),
]


@pytest.mark.parametrize("resource_type,expected", RESOURCES)
def test_resource_count(template: Template, resource_type: str, expected: int):
    template.resource_count_is(resource_type, expected)


# -------------------------- Compute instance tests ------------------------

INSTANCE_TEST_CASES = (
    InstanceTestCase(
        id="dev_instance",
        env="development",
        image_id=DEV_IMAGE_ID,
        name="sandbox-compute-instance-development",
    ),
    InstanceTestCase(
        id="prod_instance",
        env="production",
        image_id=PROD_IMAGE_ID,
        name="sandbox-compute-instance-production",
    ),
)


@pytest.mark.parametrize("case", INSTANCE_TEST_CASES, ids=lambda test: test.id)
def test_instance_configuration(template: Template, case: InstanceTestCase):
    instances = find_resources_by_type(
        template,
        "AWS::EC2::Instance",
        {"Properties": {"ImageId": case.image_id}},
    )
    logical_id = get_single_resource_id(instances, case.id)
    props = instances[logical_id]["Properties"]

    assert props["InstanceType"] == "t3.micro"
    assert props["SubnetId"] == SUBNET_ID
    assert {tag["Key"]: tag["Value"] for tag in props["Tags"]} == {
        "Name": case.name,
        "Env": case.env,
    }


def test_instances_have_fixed_tag_set(template: Template):
    assert_instance_tag_compliance(template)


def test_instance_class_is_configurable():
    template = build_template(instance_class="t3.small")

    template.all_resources_properties(
        "AWS::EC2::Instance", Match.object_like({"InstanceType": "t3.small"})
    )


def test_both_instances_share_one_subnet(template: Template):
    instances = find_resources_by_type(template, "AWS::EC2::Instance")

    assert {i["Properties"]["SubnetId"] for i in instances.values()} == {SUBNET_ID}


# ------------------- Access policy binder tests -------------------


def test_group_properties(template: Template):
    template.has_resource_properties("AWS::IAM::Group", {"GroupName": "dev-only"})


def test_policy_is_attached_to_group(template: Template):
    groups = find_resources_by_type(template, "AWS::IAM::Group")
    group_id = get_single_resource_id(groups, "AWS::IAM::Group")

    template.has_resource_properties(
        "AWS::IAM::ManagedPolicy",
        {
            "ManagedPolicyName": "sandbox-compute-policy",
            "Groups": [{"Ref": group_id}],
        },
    )
    assert_policy_attached_to_group_only(template)


def test_policy_document_is_passed_through(template: Template):
    template.has_resource_properties(
        "AWS::IAM::ManagedPolicy",
        {
            "PolicyDocument": Match.object_like(
                {
                    "Statement": Match.array_with(
                        [
                            Match.object_like(
                                {
                                    "Sid": "ManageDevelopmentInstances",
                                    "Effect": "Allow",
                                    "Condition": {
                                        "StringEquals": {
                                            "aws:ResourceTag/Env": "development"
                                        }
                                    },
                                }
                            )
                        ]
                    )
                }
            )
        },
    )


def test_policy_description_carries_document_hash(template: Template):
    short_hash = build_inputs().policy_document.short_hash

    template.has_resource_properties(
        "AWS::IAM::ManagedPolicy",
        {"Description": Match.string_like_regexp(f".*sha256:{short_hash}$")},
    )


def test_intern_user_properties(template: Template):
    template.has_resource_properties(
        "AWS::IAM::User",
        {
            "UserName": "intern",
            "Tags": [{"Key": "Owner", "Value": "platform-team"}],
        },
    )


def test_membership_binds_user_to_group(template: Template):
    groups = find_resources_by_type(template, "AWS::IAM::Group")
    users = find_resources_by_type(template, "AWS::IAM::User")

    template.has_resource_properties(
        "AWS::IAM::UserToGroupAddition",
        {
            "GroupName": {"Ref": get_single_resource_id(groups)},
            "Users": [{"Ref": get_single_resource_id(users)}],
        },
    )


def test_identity_names_are_configurable():
    template = build_template(dev_group_name="interns", intern_username="jdoe")

    template.has_resource_properties("AWS::IAM::Group", {"GroupName": "interns"})
    template.has_resource_properties("AWS::IAM::User", {"UserName": "jdoe"})


# ------------------- Account alias tests -------------------


def test_account_alias_custom_resource(template: Template):
    template.has_resource_properties(
        "Custom::AWS",
        {
            "Create": Match.serialized_json(
                Match.object_like({"parameters": {"AccountAlias": "acme-sandbox"}})
            ),
            "Delete": Match.serialized_json(
                Match.object_like({"parameters": {"AccountAlias": "acme-sandbox"}})
            ),
        },
    )


# ------------------- Output tests -------------------

OUTPUT_TEST_CASES = (
    OutputTestCase(
        id="DevInstancePublicAddress",
        description="Public IP of the development instance, empty until it is running",
    ),
    OutputTestCase(
        id="InternLoginUrl",
        description="Console sign-in URL for the intern user",
    ),
)


@pytest.mark.parametrize("case", OUTPUT_TEST_CASES, ids=lambda test: test.id)
def test_output_exists(template: Template, case: OutputTestCase):
    template.has_output(case.id, {"Description": case.description})


def test_intern_login_url_output(template: Template):
    template.has_output(
        "InternLoginUrl",
        {"Value": "https://acme-sandbox.signin.aws.amazon.com/console/"},
    )


def test_dev_public_address_output(
    template: Template, json_template: Mapping[str, Any]
):
    instances = find_resources_by_type(
        template, "AWS::EC2::Instance", {"Properties": {"ImageId": DEV_IMAGE_ID}}
    )
    dev_id = get_single_resource_id(instances, "development instance")

    assert json_template["Outputs"]["DevInstancePublicAddress"]["Value"] == {
        "Fn::GetAtt": [dev_id, "PublicIp"]
    }
