from nicegui import ui

OK_STYLE = 'background-color: rgba(0,204,0,0.75); color:black;'
STALE_STYLE = 'background-color: rgba(204, 102, 0,0.75); color:white;'


class StatusBanner:
    """Floating label reporting the state of the last generated mesh."""
    def __init__(self):
        with ui.row().classes('fixed top-2'):
            with ui.row().classes('flex-grow justify-center p-2'):
                self.label = ui.label().classes('z-50 text-sm rounded p-2')
                self.label.set_visibility(False)

    def show_mesh(self, kind: str, vertex_count: int, triangle_count: int, size_mm):
        w, h, d = size_mm
        self._show(f'{kind.capitalize()} lithophane: {triangle_count:,} triangles',
                   OK_STYLE, f'{vertex_count:,} vertices, {w:.1f} x {h:.1f} x {d:.1f} mm')

    def show_stale(self):
        self._show('Settings changed', STALE_STYLE, "Press 'Generate' to rebuild the mesh before exporting.")

    def _show(self, text: str, style: str, tooltip: str = ''):
        self.label.set_text(text)
        self.label.clear()
        if tooltip:
            with self.label:
                ui.tooltip(tooltip)
        self.label.style(style)
        self.label.set_visibility(True)

    def hide(self):
        self.label.set_visibility(False)
