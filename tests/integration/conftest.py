import pytest

def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires hardware)"
    )
    config.addinivalue_line(
        "markers", "hardware: marks tests that require a reachable ZyXEL IES"
    )
    config.addinivalue_line(
        "markers", "write: marks tests that change the configuration of the IES"
    )
