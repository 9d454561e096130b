import pytest

from weekly_reports.config import (
    AWSConfig,
    SAMPLE_CONFIG,
    config_from_credentials,
    load_config,
    write_sample_config,
)
from weekly_reports.errors import ConfigurationInvalid


def test_load_from_properties_file(tmp_path):
    props = tmp_path / "aws-config.properties"
    props.write_text(
        "# credentials\n"
        "aws.accessKeyId=AKIAFILE\n"
        "aws.secretAccessKey = file-secret\n"
        "! another comment\n"
        "aws.region: eu-west-1\n"
        "aws.bucketName=reports-bucket\n"
    )

    config = load_config(str(props), environ={"AWS_ACCESS_KEY_ID": "ignored"})

    assert config == AWSConfig(
        access_key="AKIAFILE",
        secret_key="file-secret",
        region="eu-west-1",
        bucket="reports-bucket",
        report_prefix="adv-report/commission/weekly/",
    )


def test_falls_back_to_environment(tmp_path):
    env = {
        "AWS_ACCESS_KEY_ID": "AKIAENV",
        "AWS_SECRET_ACCESS_KEY": "env-secret",
        "AWS_REPORT_PREFIX": "custom/prefix/",
    }

    config = load_config(str(tmp_path / "missing.properties"), environ=env)

    assert config.access_key == "AKIAENV"
    assert config.secret_key == "env-secret"
    assert config.region == "us-east-2"
    assert config.bucket == "ip-report-prod"
    assert config.report_prefix == "custom/prefix/"


def test_defaults_when_nothing_configured(tmp_path):
    config = load_config(str(tmp_path / "missing.properties"), environ={})

    assert config.access_key == ""
    assert config.region == "us-east-2"
    with pytest.raises(ConfigurationInvalid):
        config.validate()


@pytest.mark.parametrize("access_key,secret_key", [
    ("", "secret"),
    ("   ", "secret"),
    ("AKIA", ""),
    ("AKIA", "\t"),
])
def test_validate_rejects_blank_credentials(access_key, secret_key):
    with pytest.raises(ConfigurationInvalid):
        AWSConfig(access_key=access_key, secret_key=secret_key).validate()


def test_configuration_invalid_is_value_error():
    with pytest.raises(ValueError):
        AWSConfig(access_key="", secret_key="").validate()


def test_config_from_credentials_uses_defaults():
    config = config_from_credentials("AKIA", "secret")
    config.validate()
    assert config.bucket == "ip-report-prod"
    assert config.report_prefix == "adv-report/commission/weekly/"


def test_write_sample_config(tmp_path):
    path = write_sample_config(str(tmp_path / "sample.properties"))

    assert (tmp_path / "sample.properties").read_text() == SAMPLE_CONFIG
    sample = load_config(path, environ={})
    assert sample.access_key == "YOUR_ACCESS_KEY_ID"
    assert sample.bucket == "ip-report-prod"


def test_properties_file_with_latin1_bytes(tmp_path):
    props = tmp_path / "aws-config.properties"
    props.write_bytes(
        b"# r\xe9gion par d\xe9faut\n"
        b"aws.accessKeyId=AKIAFILE\n"
        b"aws.secretAccessKey=s\xe9cret\n"
    )

    config = load_config(str(props), environ={})

    assert config.access_key == "AKIAFILE"
    assert config.secret_key == "sécret"
    assert config.region == "us-east-2"
