from enum import Enum


def resource_governance_doc_url(resource: str) -> str:
    governance_doc_url = f"https://sandbox-internal-docs/{resource}-governance"
    return governance_doc_url


class AWSService(str, Enum):
    EC2_Instance = "ec2-instance"
    IAM_Policy = "iam-policy"


INSTANCE_TAG_KEYS = {"Name", "Env"}
INSTANCE_ENVS = {"development", "production"}
