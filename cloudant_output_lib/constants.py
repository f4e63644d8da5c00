"""
Constants and environment‑driven defaults for the Cloudant output plugin.

Values that operators may want to tune without touching the pipeline
configuration are read from environment variables prefixed with
``CLOUDANT_OUTPUT_``.  Option names mirror the keys used in the host
pipeline configuration section of the plugin.
"""

import os


class _DontChangeMe:
    MAIN_ENV_PREFIX = "CLOUDANT_OUTPUT_"


# Plugin identity announced to the host pipeline
PLUGIN_NAME = "cloudant_output"
PLUGIN_DESCRIPTION = (
    "Custom HTTP Output Plugin which writes logs to IBM Cloudant."
)

# Default logging level
LOG_LEVEL = os.environ.get(
    f"{_DontChangeMe.MAIN_ENV_PREFIX}LOG_LEVEL", "INFO"
).strip()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Per-request timeout (seconds) towards Cloudant and IAM
DEFAULT_TIMEOUT = int(
    os.environ.get(f"{_DontChangeMe.MAIN_ENV_PREFIX}TIMEOUT", "10").strip()
)

# Transport retries for transient HTTP statuses
DEFAULT_RETRIES = int(
    os.environ.get(f"{_DontChangeMe.MAIN_ENV_PREFIX}RETRIES", "2").strip()
)

# IBM Cloud IAM token endpoint
IAM_TOKEN_URL = os.environ.get(
    f"{_DontChangeMe.MAIN_ENV_PREFIX}IAM_URL",
    "https://iam.cloud.ibm.com/identity/token",
).strip()

# Environment variable holding the API key in ``ENV`` mode
API_KEY_ENV_VAR = "API_KEY"

DEFAULT_URL_SCHEME = "https://"


class ConfigKeys:
    ENDPOINT = "Endpoint"
    AUTHENTICATION_MODE = "Authentication_Mode"
    TOKEN_MOUNT_PATH = "CR_Token_Mount_Path"
    DATABASE = "Database"
    TIMEOUT = "Timeout"
    RETRIES = "Retries"
    VERIFY_WRITES = "Verify_Writes"


class AuthModes:
    IAMAPIKEY = "IAMAPIKEY"
    ENV = "ENV"


POSSIBLE_AUTH_MODES = [AuthModes.IAMAPIKEY, AuthModes.ENV]

TRUE_VALUES = ["1", "true", "yes", "on"]
