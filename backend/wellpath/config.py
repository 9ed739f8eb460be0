from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    directions_url: str = "https://maps.googleapis.com/maps/api/directions/json"
    directions_api_key: str = ""
    places_url: str = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    places_api_key: str = ""
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    request_timeout: float = 15.0
    overpass_timeout: float = 60.0
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "WELLPATH_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
