"""
Error Handler - Error panels with context and suggestions.

This module provides consistent error display across the CLI with
actionable suggestions per error type.
"""

import traceback
from typing import List, Optional

from rich.panel import Panel

from cineplux.core.exceptions import (
    CinePluxError,
    ConfigurationError,
    ExtractionError,
    NetworkError,
    NothingLoadedError,
    ProviderError,
    SearchError,
)
from cineplux.ui.console import get_console, get_palette


class ErrorHandler:
    """Handles error display with consistent formatting and helpful context."""

    def __init__(self):
        self.palette = get_palette()

    @property
    def console(self):
        return get_console()

    def handle_error(
        self,
        error: Exception,
        context: Optional[str] = None,
        show_traceback: bool = False,
    ) -> None:
        """
        Handle and display an error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Additional context about where the error occurred
            show_traceback: Whether to show the full traceback
        """
        if isinstance(error, CinePluxError):
            title, lines, suggestions = self._describe(error)
            details = error.details
        else:
            title = "💥 Unexpected Error"
            lines = [f"[dim]Type:[/dim] {type(error).__name__}"]
            suggestions = ["Run again with [cyan]--debug[/cyan] for detailed logs"]
            details = traceback.format_exc() if show_traceback else None

        content_parts = [f"[{self.palette.error}]{error}[/{self.palette.error}]"]
        content_parts.extend(f"\n{line}" for line in lines)

        if context:
            content_parts.append(f"\n[dim]Context:[/dim] {context}")

        if suggestions:
            content_parts.append(f"\n\n[{self.palette.info}]💡 Suggestions:[/{self.palette.info}]")
            for suggestion in suggestions:
                content_parts.append(f"• {suggestion}")

        if show_traceback and details:
            content_parts.append(f"\n\n[dim]Details:[/dim]\n{details}")

        panel = Panel(
            "\n".join(content_parts),
            title=title,
            border_style=self.palette.error,
            padding=(1, 2),
        )
        self.console.print(panel)

    def _describe(self, error: CinePluxError):
        lines: List[str] = []
        suggestions: List[str] = []

        if isinstance(error, ConfigurationError):
            title = "⚙️  Configuration Error"
            if error.config_path:
                lines.append(f"[dim]Configuration file:[/dim] [cyan]{error.config_path}[/cyan]")
            suggestions = [
                "Check configuration file syntax and format",
                "Delete the file to regenerate defaults",
            ]
        elif isinstance(error, NothingLoadedError):
            title = "🧩 Nothing Loaded"
            lines.append(f"[dim]Provider:[/dim] [cyan]{error.provider_name}[/cyan]")
            suggestions = [
                "The site layout may have changed; update the provider selectors",
                "Try another provider",
            ]
        elif isinstance(error, ProviderError):
            title = "🔌 Provider Error"
            if error.provider_name:
                lines.append(f"[dim]Provider:[/dim] [cyan]{error.provider_name}[/cyan]")
            suggestions = ["List providers with [cyan]cineplux providers[/cyan]"]
        elif isinstance(error, NetworkError):
            title = "🌐 Network Error"
            if error.url:
                lines.append(f"[dim]URL:[/dim] [blue]{error.url}[/blue]")
            if error.status_code:
                lines.append(f"[dim]Status Code:[/dim] {error.status_code}")
            suggestions = ["Check your internet connection", "Verify the site is reachable"]
            if error.status_code == 403:
                suggestions.insert(0, "The site may be blocking requests; try a different user agent")
            elif error.status_code == 404:
                suggestions.insert(0, "The requested page may no longer exist")
            elif error.status_code and error.status_code >= 500:
                suggestions.insert(0, "The site server is experiencing issues")
        elif isinstance(error, SearchError):
            title = "🔍 Search Error"
            if error.query is not None:
                lines.append(f"[dim]Query:[/dim] '{error.query}'")
            suggestions = ["Use a longer or more specific query"]
        elif isinstance(error, ExtractionError):
            title = "🎞️  Extraction Error"
            if error.url:
                lines.append(f"[dim]URL:[/dim] [blue]{error.url}[/blue]")
        else:
            title = "❌ Error"

        return title, lines, suggestions

    def display_warning(self, message: str, title: str = "⚠️  Warning") -> None:
        panel = Panel(
            f"[{self.palette.warning}]{message}[/{self.palette.warning}]",
            title=f"[{self.palette.warning}]{title}[/{self.palette.warning}]",
            border_style=self.palette.warning,
            padding=(1, 2),
        )
        self.console.print(panel)

    def display_info(self, message: str, title: str = "ℹ️  Information") -> None:
        panel = Panel(
            f"[{self.palette.info}]{message}[/{self.palette.info}]",
            title=f"[{self.palette.info}]{title}[/{self.palette.info}]",
            border_style=self.palette.info,
            padding=(1, 2),
        )
        self.console.print(panel)


# Global error handler instance
_error_handler = ErrorHandler()


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return _error_handler


def handle_error(
    error: Exception,
    context: Optional[str] = None,
    show_traceback: bool = False,
) -> None:
    """Handle and display an error using the global error handler."""
    _error_handler.handle_error(error, context, show_traceback)


def display_warning(message: str, title: str = "⚠️  Warning") -> None:
    """Display a warning message using the global error handler."""
    _error_handler.display_warning(message, title)


def display_info(message: str, title: str = "ℹ️  Information") -> None:
    """Display an information message using the global error handler."""
    _error_handler.display_info(message, title)


# Export error handling functions
__all__ = [
    "ErrorHandler",
    "get_error_handler",
    "handle_error",
    "display_warning",
    "display_info",
]
