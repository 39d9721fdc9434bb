from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict

class ViewportSize(BaseModel):
    width: int = 1280
    height: int = 720

class BrowserProfile(BaseModel):
    """
    Launch and context settings for the browser session.
    """
    model_config = ConfigDict(extra='ignore')

    headless: bool = False
    user_agent: Optional[str] = None
    viewport: ViewportSize = Field(default_factory=ViewportSize)

    # Network
    proxy: Optional[Dict[str, str]] = None

    # Downloads
    accept_downloads: bool = True

    # Chromium args
    extra_args: List[str] = Field(default_factory=list)

    def get_playwright_args(self, browser_type: str = "chromium") -> List[str]:
        if browser_type != "chromium":
            return list(self.extra_args)
        args = [
            '--disable-infobars',
            '--disable-background-timer-throttling',
            '--disable-popup-blocking',
            '--disable-renderer-backgrounding',
        ]
        args.extend(self.extra_args)
        return args

    def launch_kwargs(self, browser_type: str = "chromium") -> Dict[str, Any]:
        kwargs = {
            "headless": self.headless,
            "args": self.get_playwright_args(browser_type),
            "proxy": self.proxy,
        }
        return {k: v for k, v in kwargs.items() if v is not None}

    def context_kwargs(self) -> Dict[str, Any]:
        kwargs = {
            "viewport": self.viewport.model_dump(),
            "user_agent": self.user_agent,
            "accept_downloads": self.accept_downloads,
        }
        # Let Playwright defaults apply for anything left unset
        return {k: v for k, v in kwargs.items() if v is not None}
