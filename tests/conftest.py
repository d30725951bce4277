import sys
import types

import pytest


@pytest.fixture
def engine_module(monkeypatch):
    """Register classes/functions as an importable module for the resolver."""

    def _make(name, *objects):
        module = types.ModuleType(name)
        for obj in objects:
            if isinstance(obj, type):
                monkeypatch.setattr(obj, "__module__", name)
            setattr(module, obj.__name__, obj)
        monkeypatch.setitem(sys.modules, name, module)
        return name

    return _make
