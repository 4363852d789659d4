# pricewatch/config/settings.py

"""Central configuration for the pricewatch pipeline."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the pricewatch pipeline."""

    # --- Source ---
    SOURCE_URL: str = os.getenv(
        "PRICEWATCH_SOURCE_URL",
        "https://himalayareload.otoreport.com/harga.js.php",
    )

    # --- Fetching ---
    REQUEST_TIMEOUT: int = int(
        os.getenv("PRICEWATCH_REQUEST_TIMEOUT", "25")
    )                                   # Seconds before a fetch times out
    FETCH_INTERVAL: float = float(
        os.getenv("PRICEWATCH_FETCH_INTERVAL", "60")
    )                                   # Seconds between scheduled cycles

    # --- Parsing ---
    DEFAULT_CATEGORY: str = "OTHER"     # Bucket for unlabelled sections
    MAX_PLAUSIBLE_PRICE: int = 10_000_000  # Rp 10 juta ceiling per item
    COLUMN_LABELS: list[str] = [
        "kode",
        "code",
        "keterangan",
        "deskripsi",
        "produk",
        "nominal",
        "harga",
        "price",
        "status",
        "no",
    ]

    # --- Change tracking ---
    HISTORY_CAPACITY: int = 100         # Change logs kept in memory

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "id-ID,id;q=0.9,en-US;q=0.8,en;q=0.7",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "PRICEWATCH_CONSOLE_LOG_LEVEL", "WARNING"
    )                                   # The run log always gets DEBUG

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
