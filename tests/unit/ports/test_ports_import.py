import importlib

import pytest

PORT_MODULES = [
    "subregistry.ports.subscriber",
    "subregistry.ports.telemetry",
]


@pytest.mark.parametrize("module_name", PORT_MODULES)
def test_all_ports_import(module_name):
    assert importlib.import_module(module_name)


def test_package_exports():
    import subregistry

    for name in subregistry.__all__:
        assert hasattr(subregistry, name), name
