"""
Generic site provider driven by provider configuration records.
"""

from .provider import SiteProvider, HOME_SECTION_NAME

__all__ = ["SiteProvider", "HOME_SECTION_NAME"]
