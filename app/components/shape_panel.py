from typing import Callable, Optional
from nicegui import ui

from lithophane import CylinderParams, FlatParams, PrismParams, ShapeKind
from lithophane.utils import MAX_SIDES, MIN_SIDES

# Form defaults per shape: (label, key, value, min, max, step)
THICKNESS_FIELDS = [
    ('Min thickness (mm)', 'min_thickness', 0.8, 0.4, 5, 0.1),
    ('Max thickness (mm)', 'max_thickness', 3.0, 1, 10, 0.1),
]
SHAPE_FIELDS = {
    ShapeKind.FLAT: [
        ('Width (mm)', 'width', 100, 10, 300, 1),
        ('Height (mm)', 'height', 100, 10, 300, 1),
    ],
    ShapeKind.CYLINDER: [
        ('Diameter (mm)', 'diameter', 80, 20, 200, 1),
        ('Height (mm)', 'height', 100, 10, 300, 1),
    ],
    ShapeKind.PRISM: [
        ('Sides', 'sides', 4, MIN_SIDES, MAX_SIDES, 1),
        ('Radius (mm)', 'radius', 40, 10, 100, 1),
        ('Height (mm)', 'height', 100, 10, 300, 1),
    ],
}


class ShapePanel:
    """Owns the carrier shape selection and its dimension inputs."""
    def __init__(self, *, on_change: Optional[Callable[[], None]] = None):
        self.on_change = on_change or (lambda: None)

        self.kind_toggle = None
        self.fields_container = None
        self.inputs = {}
        self.top_checkbox = None
        self.bottom_checkbox = None
        self.closure_row = None

        self._build()

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind(self.kind_toggle.value)

    def image_count(self) -> int:
        if self.kind is ShapeKind.PRISM:
            return int(self.inputs['sides'].value or MIN_SIDES)
        return 1

    def get_params(self):
        """Builds the shape record from the form; the core validates it."""
        v = {key: float(field.value or 0) for key, field in self.inputs.items()}
        closure = dict(include_top=bool(self.top_checkbox.value), include_bottom=bool(self.bottom_checkbox.value))
        if self.kind is ShapeKind.FLAT:
            return FlatParams(v['width'], v['height'], v['min_thickness'], v['max_thickness'])
        if self.kind is ShapeKind.CYLINDER:
            return CylinderParams(v['diameter'], v['height'], v['min_thickness'], v['max_thickness'], **closure)
        return PrismParams(int(v['sides']), v['radius'], v['height'], v['min_thickness'], v['max_thickness'], **closure)

    def _build(self):
        with ui.column().classes('pt-1 pb-0 p-4 gap-0 w-64'):
            ui.markdown('**Shape**').classes('ml-1 text-gray-400')
            self.kind_toggle = ui.toggle({k.value: k.value.capitalize() for k in ShapeKind},
                                         value=ShapeKind.FLAT.value,
                                         on_change=lambda _: self._refresh()).props('size=sm')
            self.fields_container = ui.column().classes('w-full gap-0')
            with ui.row().classes('items-center') as self.closure_row:
                self.top_checkbox = ui.checkbox('Close top', on_change=lambda _: self.on_change())
                self.bottom_checkbox = ui.checkbox('Close bottom', on_change=lambda _: self.on_change())
        self._refresh(notify=False)

    def _refresh(self, notify=True):
        self.fields_container.clear()
        self.inputs = {}
        with self.fields_container:
            for label, key, value, lo, hi, step in SHAPE_FIELDS[self.kind] + THICKNESS_FIELDS:
                fmt = '%d' if key == 'sides' else '%.1f'
                self.inputs[key] = ui.number(label=label, value=value, min=lo, max=hi, step=step, format=fmt,
                                             on_change=lambda _: self.on_change()).classes('w-full')
        self.closure_row.visible = self.kind is not ShapeKind.FLAT
        if notify:
            self.on_change()
