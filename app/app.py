import asyncio
import logging

from nicegui import ui, app

from lithophane import LithophaneError, export_filename, export_stl, generate

from app.components import ShapePanel, ControlsPanel, StatusBanner, ImageList

logger = logging.getLogger(__name__)


class LithophaneApp:
    def __init__(self):
        # Core state shared across components
        self.mesh = None
        self.mesh_kind = None

        # Components -------------------------------------------------------
        self.banner = StatusBanner()
        with ui.row().classes('w-full h-screen flex-nowrap gap-0'):
            # Sidebar
            with ui.column().classes('flex-none w-64 gap-4 overflow-y-auto h-full bg-neutral-800 text-white overflow-x-hidden'):
                with ui.row().classes('pt-5 p-4 w-64 bg-neutral-900 items-center gap-2'):
                    ui.label('Lithophane').classes('text-lg font-semibold')
                    ui.button(icon='note_add', on_click=self.new_project).props('color=warning size=sm padding="7px 7px"').tooltip('New Project')

                self.shape_panel = ShapePanel(on_change=self._on_settings_changed)
                self.controls = ControlsPanel(
                    on_generate=lambda: asyncio.create_task(self._on_generate()),
                    on_export=lambda: asyncio.create_task(self._on_export()),
                )

            # Main area
            with ui.column().classes('flex-auto items-center justify-center overflow-y-auto h-full'):
                self.images = ImageList(on_change=lambda _: self._on_settings_changed())

        ui.dark_mode().enable(); ui.query('.nicegui-content').classes('p-0')
        self.images.set_required(self.shape_panel.image_count())

    # ---------------------- Settings --------------------------------------
    def _on_settings_changed(self):
        self.images.set_required(self.shape_panel.image_count())
        if self.mesh is not None:
            self.mesh = None
            self.controls.enable_export(False)
            self.banner.show_stale()

    # ---------------------- Heavy generate/export -------------------------
    async def _on_generate(self):
        images = self.images.get_images()
        if not images:
            ui.notify('Load at least one image', color='red'); return
        try:
            shape = self.shape_panel.get_params()
            shape.validate()
        except (LithophaneError, ValueError, TypeError) as e:
            ui.notify(str(e), color='red'); return

        settings = self.controls.get_settings()
        self.controls.set_busy(True)

        def compute():
            return generate(
                shape, images,
                adjustment_mode=settings['adjustment_mode'],
                resolution=settings['resolution'],
                progress_cb=lambda v: setattr(self.controls.progress_bar, 'value', v),
            )

        loop = asyncio.get_running_loop()
        try:
            self.mesh = await loop.run_in_executor(None, compute)
        except LithophaneError as e:
            ui.notify(str(e), color='red')
            return
        except Exception as e:
            logger.exception("Lithophane generation failed")
            ui.notify(f'Error generating lithophane: {str(e)}', color='red')
            return
        finally:
            self.controls.set_busy(False)

        self.mesh_kind = shape.kind.value
        lo, hi = self.mesh.bounds
        self.controls.enable_export(True)
        self.banner.show_mesh(self.mesh_kind, self.mesh.vertex_count, self.mesh.triangle_count, hi - lo)

    async def _on_export(self):
        if self.mesh is None:
            ui.notify('Nothing to export', color='red'); return
        self.controls.set_busy(True)

        binary = self.controls.get_settings()['binary']
        filename = export_filename(self.mesh_kind)
        mesh, name = self.mesh, filename.rsplit('.', 1)[0]

        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, lambda: export_stl(mesh, name, binary=binary))
        finally:
            self.controls.set_busy(False)
            self.controls.enable_export(True)
        if app.native.main_window:
            import webview
            result = await app.native.main_window.create_file_dialog(webview.SAVE_DIALOG, save_filename=filename)
            if not result:
                return
            file = result[0] if isinstance(result, (list, tuple)) else result
            try:
                with open(file, 'wb') as f:
                    f.write(data)
                ui.notify(f'Lithophane exported to {file}', color='green')
            except OSError as e:
                logger.error("Export to %s failed: %s", file, e)
                ui.notify(f'Error exporting lithophane: {str(e)}', color='red')
        else:
            ui.download.content(data, filename)

    # ---------------------- Utilities ------------------------------------
    def new_project(self):
        self.mesh = None
        self.mesh_kind = None
        self.controls.enable_export(False)
        self.banner.hide()
        self.images.clear()
