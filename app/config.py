"""Configuration settings for the AV navigator."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    app_name: str = "IIIF AV Navigator"
    debug: bool = False
    log_level: str = "INFO"

    # Manifest (local JSON file, never fetched over the network)
    manifest_path: str = "./manifest.json"
    base_url: str = ""  # Prefix for generated navigation links

    # Player
    default_quality: str = "Medium"
    player_element_id: str = "iiif-av-player"
    player_wrapper_id: str = "iiif-av-player-wrapper"

    class Config:
        env_file = ".env"


settings = Settings()
