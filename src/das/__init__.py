"""DAS: Delta Green campaign state tracker."""

from .state.manager import CampaignManager

__version__ = "1.0.0"

__all__ = ["CampaignManager", "__version__"]
