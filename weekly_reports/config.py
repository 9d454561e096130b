import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from weekly_reports.errors import ConfigurationInvalid

logger = logging.getLogger(__name__)

CONFIG_FILE = "aws-config.properties"
SAMPLE_CONFIG_FILE = "aws-config-sample.properties"

DEFAULT_REGION = "us-east-2"
DEFAULT_BUCKET = "ip-report-prod"
DEFAULT_REPORT_PREFIX = "adv-report/commission/weekly/"

SAMPLE_CONFIG = """\
# AWS Configuration
# Copy this file to aws-config.properties and update with your credentials

# AWS Credentials
aws.accessKeyId=YOUR_ACCESS_KEY_ID
aws.secretAccessKey=YOUR_SECRET_ACCESS_KEY

# AWS Region
aws.region=us-east-2

# S3 Bucket Configuration
aws.bucketName=ip-report-prod
aws.reportPrefix=adv-report/commission/weekly/
"""


@dataclass(frozen=True)
class AWSConfig:
    access_key: str
    secret_key: str
    region: str = DEFAULT_REGION
    bucket: str = DEFAULT_BUCKET
    report_prefix: str = DEFAULT_REPORT_PREFIX

    def validate(self) -> None:
        """Fail fast when credentials are absent, before any store call is made."""
        if not (self.access_key or "").strip():
            raise ConfigurationInvalid("AWS Access Key ID is required but not configured")
        if not (self.secret_key or "").strip():
            raise ConfigurationInvalid("AWS Secret Access Key is required but not configured")
        logger.info("AWS configuration validation passed")


def _read_properties(path: str) -> dict[str, str]:
    """Parse a Java-style properties file into a dict.

    Read as ISO-8859-1 like java.util.Properties, so any byte sequence decodes.
    Supports ``key=value`` and ``key: value`` lines; ``#`` and ``!`` start comments.
    """
    props: dict[str, str] = {}
    with open(path, "r", encoding="latin-1") as f:
        for raw in f:
            line = raw.strip()
            if not line or line[0] in "#!":
                continue
            sep = min((i for i in (line.find("="), line.find(":")) if i >= 0), default=-1)
            if sep < 0:
                props[line] = ""
                continue
            props[line[:sep].strip()] = line[sep + 1:].strip()
    return props


def config_from_credentials(access_key: str, secret_key: str) -> AWSConfig:
    """Build a config from explicit credentials and the default bucket layout."""
    return AWSConfig(access_key=access_key, secret_key=secret_key)


def load_config(path: str = CONFIG_FILE, environ: Optional[Mapping[str, str]] = None) -> AWSConfig:
    """Load AWS settings from the properties file, falling back to environment variables.

    Region, bucket and prefix fall back to the documented defaults when neither
    source supplies them. Credentials are not validated here; call
    ``AWSConfig.validate()`` before touching the store.
    """
    env = os.environ if environ is None else environ

    def _pick(value: Optional[str], default: str = "") -> str:
        value = (value or "").strip()
        return value or default

    try:
        props = _read_properties(path)
    except OSError as e:
        logger.warning("Could not load AWS configuration file %s: %s. Using environment variables.", path, e)
        config = AWSConfig(
            access_key=_pick(env.get("AWS_ACCESS_KEY_ID")),
            secret_key=_pick(env.get("AWS_SECRET_ACCESS_KEY")),
            region=_pick(env.get("AWS_REGION"), DEFAULT_REGION),
            bucket=_pick(env.get("AWS_BUCKET_NAME"), DEFAULT_BUCKET),
            report_prefix=_pick(env.get("AWS_REPORT_PREFIX"), DEFAULT_REPORT_PREFIX),
        )
        logger.info("AWS configuration loaded from environment variables")
        return config

    config = AWSConfig(
        access_key=_pick(props.get("aws.accessKeyId")),
        secret_key=_pick(props.get("aws.secretAccessKey")),
        region=_pick(props.get("aws.region"), DEFAULT_REGION),
        bucket=_pick(props.get("aws.bucketName"), DEFAULT_BUCKET),
        report_prefix=_pick(props.get("aws.reportPrefix"), DEFAULT_REPORT_PREFIX),
    )
    logger.info("AWS configuration loaded from %s", path)
    return config


def write_sample_config(path: str = SAMPLE_CONFIG_FILE) -> str:
    """Write a template properties file for users to fill in."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(SAMPLE_CONFIG)
    logger.info("Sample configuration file created: %s", path)
    return path
