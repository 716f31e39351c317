"""
UI Layer - Rich console, error panels and catalog tables.
"""

from cineplux.ui.components import UIComponents, get_components
from cineplux.ui.console import Palette, get_console, get_palette, setup_console
from cineplux.ui.error_handler import ErrorHandler, display_info, display_warning, handle_error

__all__ = [
    # Core UI Components
    "UIComponents",
    "get_components",
    # Console Management
    "Palette",
    "get_console",
    "get_palette",
    "setup_console",
    # Error Handling
    "ErrorHandler",
    "handle_error",
    "display_warning",
    "display_info",
]
