import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "conf" / "settings.ini"


@dataclass(frozen=True)
class CookbookConfig:
    recipes_path: Path
    ingredients_path: Path
    image_base_url: str = "https://sulfur.wiki.gg/images"
    known_urls_path: Optional[Path] = None
    page_size: int = 10
    popular_limit: int = 12
    unify_effect_filter: bool = False


class ConfigLoader:
    def __init__(self, config_path: Optional[Path] = None):
        self.project_root = PROJECT_ROOT
        self.config = configparser.ConfigParser()

        if config_path is not None:
            self.config_path = Path(config_path)
            if not self.config_path.exists():
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
        else:
            # default file is optional; built-in defaults apply without it
            self.config_path = DEFAULT_CONFIG_PATH

        self.config.read(self.config_path, encoding="utf-8")

    def get(self, section, key, fallback=None):
        """获取配置值并自动展开用户路径 (~)"""
        val = self.config.get(section, key, fallback=fallback)
        if val and "~" in val:
            return os.path.expanduser(val)
        return val

    def path(self, section, key, fallback=None) -> Optional[Path]:
        val = self.get(section, key, fallback=fallback)
        if not val:
            return None
        p = Path(val)
        return p if p.is_absolute() else (self.project_root / p)

    def build(self) -> CookbookConfig:
        data_dir = self.project_root / "data"
        recipes = os.environ.get("COOKBOOK_RECIPES") or None
        ingredients = os.environ.get("COOKBOOK_INGREDIENTS") or None
        return CookbookConfig(
            recipes_path=Path(recipes).expanduser() if recipes else (self.path("data", "recipes_path") or data_dir / "recipes.json"),
            ingredients_path=(
                Path(ingredients).expanduser() if ingredients else (self.path("data", "ingredients_path") or data_dir / "ingredients.json")
            ),
            image_base_url=self.get("images", "base_url", fallback="https://sulfur.wiki.gg/images"),
            known_urls_path=self.path("images", "known_urls_path"),
            page_size=self.config.getint("query", "page_size", fallback=10),
            popular_limit=self.config.getint("query", "popular_limit", fallback=12),
            unify_effect_filter=self.config.getboolean("query", "unify_effect_filter", fallback=False),
        )


def load_config(config_path: Optional[Path] = None) -> CookbookConfig:
    return ConfigLoader(config_path).build()


# === 测试代码 ===
if __name__ == "__main__":
    cfg = load_config()
    print(f"Project Root: {PROJECT_ROOT}")
    print(f"Recipes: {cfg.recipes_path}")
    print(f"Ingredients: {cfg.ingredients_path}")
