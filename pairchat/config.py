from pathlib import Path
import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Priority: environment variables > .env file
        env_prefix="PAIRCHAT_",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # Largest accepted WebSocket text frame; larger frames are rejected before parsing.
    MAX_FRAME_BYTES: int = 65536
    MAX_NAME_LENGTH: int = 64
    MAX_AVATAR_LENGTH: int = 2048

# Load .env before creating the Settings instance so pydantic-settings sees it.
env_paths = [
    Path(__file__).resolve().parent.parent / ".env",  # Project root
    Path(os.getcwd()) / ".env",                       # Current working directory
]
for env_path in env_paths:
    if env_path.exists():
        load_dotenv(env_path, override=False)
        break

config = Settings()
