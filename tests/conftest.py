"""Shared fixtures for the tg-config test suite."""

import pytest
from unittest.mock import patch


@pytest.fixture
def flow_data():
    """Dialog flow document as served by the configuration service."""
    return {
        "flow": {"title": "TrustGraph Configuration", "start": "platform"},
        "steps": {
            "platform": {
                "title": "Deployment platform?",
                "input": {
                    "type": "select",
                    "options": [
                        {"value": "docker", "label": "Docker Compose", "recommended": True},
                        {"value": "k8s", "label": "Kubernetes", "description": "Needs a cluster"},
                    ],
                },
                "state_key": "platform",
                "transitions": [
                    {"when": 'platform = "k8s"', "next": "cluster"},
                    {"next": "gpu"},
                ],
            },
            "cluster": {
                "title": "Cluster name?",
                "input": {"type": "text", "default": "tg-cluster", "placeholder": "my-cluster"},
                "state_key": "k8s.cluster",
                "transitions": [{"next": "gpu"}],
            },
            "gpu": {
                "title": "Use GPU acceleration?",
                "input": {"type": "toggle", "default": False},
                "state_key": "resources.gpu",
                "transitions": [{"next": "workers"}],
            },
            "workers": {
                "title": "Number of workers?",
                "input": {"type": "number", "default": 2, "min": 1, "max": 10},
                "state_key": "resources.workers",
                "transitions": [{"next": "review"}],
            },
            "review": {"type": "review", "title": "Review"},
        },
    }


@pytest.fixture
def docs_manifest():
    """Docs manifest with two categories and a mix of conditional fragments."""
    return {
        "documentation": {
            "title": "Installation Guide",
            "categories": [
                {"id": "deploy", "title": "Deploying", "priority": 2},
                {"id": "prereq", "title": "Prerequisites", "priority": 1},
            ],
            "instructions": [
                {"id": "start-compose", "category": "deploy", "priority": 5,
                 "when": 'platform = "docker"', "goal": "Start the stack",
                 "file": "docker/start.md"},
                {"id": "install-docker", "category": "prereq", "priority": 1,
                 "when": 'platform = "docker"', "goal": "Install Docker",
                 "file": "docker/install.md"},
                {"id": "unpack", "category": "deploy", "priority": 1, "always": True,
                 "goal": "Unpack the package", "file": "common/unpack.md"},
                {"id": "gpu-drivers", "category": "prereq", "priority": 2,
                 "when": "resources.gpu", "goal": "Install GPU drivers"},
            ],
        }
    }


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "api_base": "https://config.example.com/api",
        "endpoints": {
            "dialog_flow": "/dialog-flow",
            "config_prepare": "/config-prepare",
            "docs_manifest": "/docs-manifest",
        },
        "docs_path": "/docs",
        "request_timeout": 5,
        "fetch_max_retries": 1,
        "fetch_backoff": 0,
        "package_filename": "deploy.zip",
        "guide_filename": "INSTALLATION.md",
    }
    with patch("tgconfig.config._config", test_config):
        yield test_config
