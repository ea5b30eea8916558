from syncbrain.providers.browser.playwright_provider import (
    PlaywrightBrowserProvider,
    PlaywrightBrowserSession,
)

__all__ = ["PlaywrightBrowserProvider", "PlaywrightBrowserSession"]
