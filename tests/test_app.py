"""Tests for the generate/export handlers of the NiceGUI front end, run without a browser."""

import asyncio

import pytest
from PIL import Image

import app.app as app_module
from lithophane import FlatParams, HeightMap, build_flat


class FakeControls:
    def __init__(self):
        self.busy = False
        self.export_enabled = False
        self.busy_calls = []

    def get_settings(self):
        return dict(adjustment_mode='fit', resolution=1.0, binary=True)

    def set_busy(self, busy):
        self.busy = busy
        self.busy_calls.append(busy)

    def enable_export(self, enabled):
        self.export_enabled = enabled


class FakeShapePanel:
    def __init__(self, error=None):
        self.error = error

    def get_params(self):
        if self.error:
            raise self.error
        return FlatParams(10, 10, 0.8, 3.0)


class FakeImages:
    def get_images(self):
        return [Image.new('RGBA', (4, 4), (0, 0, 0, 255))]


@pytest.fixture
def notifications(monkeypatch):
    seen = []
    monkeypatch.setattr(app_module.ui, 'notify', lambda message, **kwargs: seen.append((message, kwargs)))
    return seen


@pytest.fixture
def lithophane_app():
    """LithophaneApp with its widgets replaced by plain recorders."""
    instance = app_module.LithophaneApp.__new__(app_module.LithophaneApp)
    instance.mesh = None
    instance.mesh_kind = None
    instance.controls = FakeControls()
    instance.shape_panel = FakeShapePanel()
    instance.images = FakeImages()
    return instance


class TestGenerateHandler:
    def test_cleared_field_reported_not_raised(self, lithophane_app, notifications):
        lithophane_app.shape_panel = FakeShapePanel(TypeError("int() argument must be a number, not 'NoneType'"))
        asyncio.run(lithophane_app._on_generate())
        assert len(notifications) == 1
        assert notifications[0][1]['color'] == 'red'
        assert lithophane_app.controls.busy_calls == []
        assert lithophane_app.mesh is None


class TestExportHandler:
    def test_failed_export_releases_controls(self, lithophane_app, monkeypatch):
        lithophane_app.mesh = build_flat(HeightMap.from_array([[0, 255], [255, 0]]), 10, 10, 0.8, 3.0)
        lithophane_app.mesh_kind = 'flat'

        def broken(*args, **kwargs):
            raise RuntimeError("disk full")
        monkeypatch.setattr(app_module, 'export_stl', broken)

        with pytest.raises(RuntimeError):
            asyncio.run(lithophane_app._on_export())
        assert lithophane_app.controls.busy_calls == [True, False]
        assert lithophane_app.controls.export_enabled
