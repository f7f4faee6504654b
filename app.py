#!/usr/bin/env python3
"""AWS CDK entrypoint for provisioning the development/production sandbox.

Configuration comes from the CDK context (``cdk synth -c basePresetName=al2``).
The machine image and launch subnet are resolved once against the live EC2
API before the stack is built, so a run that cannot resolve them aborts
before anything is synthesized.
"""
import os

import aws_cdk as cdk
import boto3
from aws_cdk import Environment

from common.config import ProvisioningConfig
from sandbox.launch_inputs import gather_launch_inputs
from sandbox.sandbox_stack import SandboxStack

app = cdk.App()

config = ProvisioningConfig.from_context(app.node)

env = Environment(
    account=os.getenv("CDK_DEFAULT_ACCOUNT"),
    region=config.region,
)

ec2_client = boto3.client("ec2", region_name=config.region)
inputs = gather_launch_inputs(config, ec2_client)

SandboxStack(
    app,
    "SandboxStack",
    config=config,
    inputs=inputs,
    env=env,
)

app.synth()
