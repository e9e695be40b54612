from typing import Callable
from nicegui import ui

from lithophane import AdjustmentMode
from lithophane.utils import DEFAULT_ADJUSTMENT_MODE, DEFAULT_RESOLUTION


class ControlsPanel:
    """Owns image adjustment, raster resolution and export format, plus buttons & progress bar."""
    def __init__(self, *, on_generate: Callable[[], None], on_export: Callable[[], None]):
        self.on_generate = on_generate
        self.on_export = on_export

        # state owned here
        self.adjustment_mode = None
        self.resolution_input = None
        self.format_toggle = None
        self.progress_bar = None
        self.generate_button = None
        self.export_button = None

        self._build()

    def get_settings(self):
        return dict(
            adjustment_mode=AdjustmentMode(self.adjustment_mode.value),
            resolution=float(self.resolution_input.value),
            binary=self.format_toggle.value == 'binary',
        )

    def set_busy(self, busy: bool):
        if busy:
            self.progress_bar.value = 0
            self.progress_bar.visible = True
            self.generate_button.disable()
            self.export_button.disable()
        else:
            self.progress_bar.visible = False
            self.generate_button.enable()

    def enable_export(self, enabled: bool):
        (self.export_button.enable if enabled else self.export_button.disable)()

    def _build(self):
        with ui.column().classes('bg-gray-700 border-t border-gray-900 w-64 flex-none'):
            with ui.column().classes('pt-1 pb-0 p-4 gap-0 w-full'):
                ui.markdown('**Image fit**').classes('mt-3 ml-1 text-gray-400')
                self.adjustment_mode = ui.toggle({m.value: m.value.capitalize() for m in AdjustmentMode},
                                                 value=DEFAULT_ADJUSTMENT_MODE).props("size=sm padding='0px 6px'")
                ui.markdown('**Resolution (px/mm)**').classes('mt-2 ml-1 text-gray-400')
                self.resolution_input = ui.slider(min=0.5, max=10, step=0.5, value=DEFAULT_RESOLUTION).props('label-always')

                with ui.row().classes('items-center mt-2 justify-center'):
                    self.generate_button = ui.button('Generate', icon='view_in_ar', on_click=self.on_generate).props('color=primary size=sm')
                    self.export_button = ui.button('Export', icon='download', on_click=self.on_export).props('color=secondary size=sm')
                    self.export_button.disable()
                self.progress_bar = ui.linear_progress(value=0).style('width:100%').classes('mt-2')
                self.progress_bar.visible = False

            with ui.expansion('Export settings', icon='settings').classes('bg-gray-700 border-t border-gray-900 w-64 p-0'):
                self.format_toggle = ui.toggle({'binary': 'Binary STL', 'ascii': 'ASCII STL'}, value='binary').props('size=sm')
