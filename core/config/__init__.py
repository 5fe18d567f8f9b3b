from .loader import CookbookConfig, ConfigLoader, load_config

__all__ = ["CookbookConfig", "ConfigLoader", "load_config"]
