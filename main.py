import sys
import logging

from nicegui import ui, app

from lithophane.utils import setup_logging
from app.app import LithophaneApp

setup_logging(logging.DEBUG if '--verbose' in sys.argv else logging.INFO)


@ui.page('/')
def main_page():
    LithophaneApp()


reload = True if '--reload' in sys.argv else False

# --browser
if '--browser' in sys.argv:
    ui.run(native=False, reload=reload, title="Lithophane")
else:
    app.native.window_args['confirm_close'] = True
    ui.run(native=True, title="Lithophane", window_size=(1280, 860), reload=reload)
