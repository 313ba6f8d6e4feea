from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
import json
import os

from linkscout.constants import BROWSER_USER_AGENT

load_dotenv()  # Loads variables from .env file


@dataclass
class Config:
    """Configuration for linkscout runs."""
    google_api_key: Optional[str] = None
    google_cse_id: Optional[str] = None
    user_agent: str = BROWSER_USER_AGENT
    timeout: float = 10.0  # Per-request page fetch timeout (seconds)
    concurrent_requests: int = 5  # Window size for batched page fetches
    search_delay: float = 1.0  # Pause after each search page in lenient mode
    rate_limit_delay: float = 5.0  # Pause after a rate-limited search call
    keyword_delay: float = 2.0  # Pause between keywords in multi-keyword search
    batch_pause: float = 3.0  # Pause between submission analysis windows
    output_dir: str = "output"
    log_level: str = "INFO"

    @property
    def json_dir(self) -> Path:
        return Path(self.output_dir) / "json"

    @property
    def csv_dir(self) -> Path:
        return Path(self.output_dir) / "csv"

    @property
    def excel_dir(self) -> Path:
        return Path(self.output_dir) / "excel"

    @property
    def has_search_credentials(self) -> bool:
        return bool(self.google_api_key and self.google_cse_id)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance with values from environment
        """
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY"),
            google_cse_id=os.getenv("GOOGLE_CSE_ID"),
            user_agent=os.getenv("USER_AGENT", BROWSER_USER_AGENT),
            timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
            concurrent_requests=int(os.getenv("CONCURRENT_REQUESTS", "5")),
            search_delay=float(os.getenv("SEARCH_DELAY", "1.0")),
            rate_limit_delay=float(os.getenv("RATE_LIMIT_DELAY", "5.0")),
            keyword_delay=float(os.getenv("KEYWORD_DELAY", "2.0")),
            batch_pause=float(os.getenv("BATCH_PAUSE", "3.0")),
            output_dir=os.getenv("LINKSCOUT_OUTPUT_DIR", "output"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @classmethod
    def from_file(cls, path: str) -> "Config":
        """Load configuration from a JSON file, falling back to the environment.

        Args:
            path: Path to JSON configuration file

        Returns:
            Config with values from file layered over environment values
        """
        config = cls.from_env()
        file_path = Path(path)

        if not file_path.exists():
            return config

        with open(file_path, 'r') as f:
            data = json.load(f)

        for field_name in config.__dataclass_fields__:
            if field_name in data:
                setattr(config, field_name, data[field_name])

        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary, without credentials."""
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
            if field_name not in ("google_api_key",)
        }
