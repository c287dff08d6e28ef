"""Headless views driven by the connection state."""

from loadlink.views.base import View
from loadlink.views.configuration import ConfigurationView, ConfirmReboot
from loadlink.views.status import LoadCellStatusView, StatusPresentation

__all__ = [
    "ConfigurationView",
    "ConfirmReboot",
    "LoadCellStatusView",
    "StatusPresentation",
    "View",
]
