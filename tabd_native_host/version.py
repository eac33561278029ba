"""Tab'd Native Host Meta information.
   Tab'd Native Host keeps the latest clipboard capture of the browser
   extension in encrypted local storage.
"""
__title__ = 'tabd_native_host'
__description__ = (
   "Tab'd Native Host keeps the latest clipboard capture of the browser "
   'extension in encrypted local storage.'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2025 Tabd Contributors'
__author__ = 'Tabd Contributors'
__author_email__ = 'tabd@example.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/iann0036/tabd-extension'
