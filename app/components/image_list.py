from typing import Callable, List
from nicegui import ui
import io, base64
from PIL import Image

THUMB_SIZE = (96, 96)


class ImageList:
    """Owns the upload widget and the ordered list of decoded source images (one per prism face)."""
    def __init__(self, *, on_change: Callable[[List[Image.Image]], None]):
        self.on_change = on_change
        self.images: List[Image.Image] = []

        self.upload = None
        self.container = None
        self.hint = None

        self._build()

    def get_images(self) -> List[Image.Image]:
        return list(self.images)

    def set_required(self, count: int):
        self.hint.set_text(f'{len(self.images)} of {count} image(s) loaded')
        self.hint.classes(replace='text-sm ' + ('text-green-500' if len(self.images) >= count else 'text-orange-400'))

    def clear(self):
        self.images = []
        self._refresh()
        self.on_change(self.get_images())

    def _build(self):
        with ui.column().classes('items-center gap-4 w-80'):
            self.upload = ui.upload(multiple=True, auto_upload=True, on_upload=self._handle_upload) \
                .props('label="Load Images" accept="image/*"').classes('w-full')
            with ui.row().classes('items-center justify-between w-full'):
                self.hint = ui.label().classes('text-sm text-gray-500')
                ui.button(icon='delete', on_click=self.clear).props('flat round size=sm color=red').tooltip('Remove all images')
            self.container = ui.row().classes('gap-2 w-full')

    def _refresh(self):
        self.container.clear()
        with self.container:
            for idx, img in enumerate(self.images):
                thumb = img.copy()
                thumb.thumbnail(THUMB_SIZE)
                buf = io.BytesIO()
                thumb.save(buf, format='PNG')
                data = base64.b64encode(buf.getvalue()).decode()
                ui.image(f'data:image/png;base64,{data}').classes('w-24 h-24').tooltip(f'Face {idx + 1}')

    def _handle_upload(self, files):
        # decoding happens here, before the core ever sees the image
        img = Image.open(files.content).convert('RGBA')
        self.images.append(img)
        self._refresh()
        self.on_change(self.get_images())
