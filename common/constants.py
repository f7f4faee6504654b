# Naming convention components
SERVICE_NAME = "sandbox"  # The application name
COMPONENT = "compute"  # The functional component/subsystem

# Environments (used as the Env tag value and in naming)
ENV_DEVELOPMENT = "development"
ENV_PRODUCTION = "production"

DEFAULT_REGION = "us-east-1"
PROVIDER_DOMAIN = "aws.amazon.com"
CONSOLE_LOGIN_URL = "https://{account_alias}.signin.{provider_domain}/console/"

# Image presets
DEFAULT_PRESET_NAME = "al2023"
AMAZON_OWNER = "amazon"
CANONICAL_OWNER = "099720109477"
DEBIAN_OWNER = "136693071363"
REDHAT_OWNER = "309956199498"

# Image attribute filters
DEFAULT_ARCHITECTURE = "x86_64"
DEFAULT_VIRTUALIZATION_TYPE = "hvm"
DEFAULT_ROOT_DEVICE_TYPE = "ebs"
ARCHITECTURES = ("x86_64", "arm64", "i386", "x86_64_mac", "arm64_mac")
VIRTUALIZATION_TYPES = ("hvm", "paravirtual")
ROOT_DEVICE_TYPES = ("ebs", "instance-store")

# Compute
DEFAULT_INSTANCE_CLASS = "t3.micro"

# Identity
DEFAULT_DEV_GROUP_NAME = "dev-only"
DEFAULT_INTERN_USERNAME = "intern"
DEFAULT_ACCOUNT_ALIAS = "sandbox-dev-prod"
DEFAULT_OWNER_TAG = "platform-team"
DEFAULT_POLICY_DOCUMENT_PATH = "policies/dev_only_access.json"
