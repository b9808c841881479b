"""Tests for s3acl configuration loading."""

import tempfile
from pathlib import Path

import yaml

from s3acl.config import S3ACLConfig, load_config


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_example_config(self):
        """Loading the example config file populates all fields."""
        config = load_config(Path(__file__).resolve().parent.parent / "s3acl.example.yaml")
        assert config.client.endpoint == "http://localhost:9000"
        assert config.client.region == "us-east-1"
        assert config.client.access_key == "minioadmin"
        assert config.client.secret_key == "minioadmin"
        assert config.client.timeout == 30
        assert config.client.verify_tls is True
        assert config.logging.level == "INFO"
        assert config.logging.format == "text"
        assert config.observability.metrics is False

    def test_load_minimal_config(self):
        """Loading a minimal YAML uses defaults for all fields."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump({}, f)
            f.flush()
            config = load_config(Path(f.name))
        assert config.client.endpoint == "http://localhost:9000"
        assert config.client.access_key == ""
        assert config.logging.level == "INFO"

    def test_nested_credentials(self):
        """client.credentials.* is flattened into the client section."""
        data = {"client": {"credentials": {"access_key": "ak", "secret_key": "sk"}}}
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(data, f)
            f.flush()
            config = load_config(Path(f.name))
        assert config.client.access_key == "ak"
        assert config.client.secret_key == "sk"

    def test_flat_credentials_win(self):
        """A flat client.access_key overrides the nested credentials value."""
        data = {
            "client": {
                "access_key": "flat",
                "credentials": {"access_key": "nested", "secret_key": "sk"},
            }
        }
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(data, f)
            f.flush()
            config = load_config(Path(f.name))
        assert config.client.access_key == "flat"
        assert config.client.secret_key == "sk"

    def test_logging_and_metrics(self):
        """logging and observability sections are read."""
        data = {
            "logging": {"level": "DEBUG", "format": "json"},
            "observability": {"metrics": True},
        }
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(data, f)
            f.flush()
            config = load_config(Path(f.name))
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert config.observability.metrics is True

    def test_defaults_instance(self):
        """S3ACLConfig() with no arguments uses sane defaults."""
        config = S3ACLConfig()
        assert config.client.region == "us-east-1"
        assert config.client.timeout == 30.0
        assert config.logging.format == "text"
        assert config.observability.metrics is False
