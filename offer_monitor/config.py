import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
LOGS_DIR = BASE_DIR / "logs"

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'offer_monitor.db'}")

# Delay between consecutive page scrapes in a pass (in seconds)
MIN_PAGE_DELAY = float(os.getenv("MIN_PAGE_DELAY", 2))
MAX_PAGE_DELAY = float(os.getenv("MAX_PAGE_DELAY", 5))

# Scheduling
SCRAPE_CRON_MINUTE = int(os.getenv("SCRAPE_CRON_MINUTE", 0))
STARTUP_SCRAPE_DELAY = int(os.getenv("STARTUP_SCRAPE_DELAY", 60))

# Playwright
HEADLESS = os.getenv("HEADLESS", "true").lower() == "true"
NAVIGATION_TIMEOUT = int(os.getenv("NAVIGATION_TIMEOUT", 30000))
SETTLE_DELAY = float(os.getenv("SETTLE_DELAY", 3))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = Path(os.getenv("LOG_FILE", str(LOGS_DIR / "offer_monitor.log")))

# Facebook Ad Library URLs
AD_LIBRARY_BASE_URL = "https://www.facebook.com/ads/library/"
AD_LIBRARY_PAGE_URL = "https://www.facebook.com/ads/library/?active_status=active&ad_type=all&country=ALL&view_all_page_id={page_id}&search_type=page&media_type=all"
