"""
Harvest configuration.

Supports two input formats:
1. Single JSON file (.json)
2. Gzipped JSON (.json.gz)

Keys may be given in camelCase (``delayMs``) or snake_case (``delay_ms``).
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import gzip
import json
import re

from .errors import ConfigError
from .tiles.coverage import GeoBounds


DEFAULT_TILE_HOSTS = ('a.tiles.mapbox.com', 'b.tiles.mapbox.com')
DEFAULT_TILE_PATH = '/v4/{tileset}/{z}/{x}/{y}.vector.pbf'
DEFAULT_GLYPHS_URL = 'https://api.mapbox.com/fonts/v1/{owner}/{fontstack}/{range}.pbf'


@dataclass
class BrowserOptions:
    """How the headless browser is launched and how long pages may take."""
    headless: bool = True
    executable_path: str | None = None
    timeout: float = 60.0  # seconds, navigation only
    wait_until: str = 'networkidle2'
    settle_delay: float = 0.0  # extra seconds after navigation
    zoom_steps: int = 0  # simulated wheel zooms after load
    viewport_width: int = 1280
    viewport_height: int = 800


@dataclass
class HarvestConfig:
    """Settings for one harvest run."""
    delay_ms: int = 50
    step_degrees: float = 1.0
    fetch_tiles: bool = True
    fetch_fonts: bool = True
    verbose: bool = False

    # Static tilesets, used in addition to captured metadata
    bounds: GeoBounds | None = None
    min_zoom: int | None = None
    max_zoom: int | None = None
    tilesets: tuple[str, ...] = ()
    tile_hosts: tuple[str, ...] = DEFAULT_TILE_HOSTS
    tile_path: str = DEFAULT_TILE_PATH

    # Static font stacks, used in addition to captured glyph requests
    font_stacks: tuple[str, ...] = ()
    font_owner: str = 'mapbox'
    glyphs_url: str = DEFAULT_GLYPHS_URL

    browser: BrowserOptions = field(default_factory=BrowserOptions)

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0

    @property
    def has_static_tilesets(self) -> bool:
        return bool(self.tilesets)

    def merged(self, **overrides) -> 'HarvestConfig':
        """Return a copy with every non-None override applied."""
        browser_names = {f.name for f in fields(BrowserOptions)}
        browser_overrides = {
            k: v for k, v in overrides.items()
            if k in browser_names and v is not None
        }
        top_overrides = {
            k: v for k, v in overrides.items()
            if k not in browser_names and v is not None
        }
        merged = replace(self, **top_overrides)
        if browser_overrides:
            merged = replace(merged, browser=replace(self.browser, **browser_overrides))
        return merged


def _snake_case(key: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', key).lower()


def parse_bounds(value) -> GeoBounds:
    """Parse ``W,S,E,N`` text, a 4-item list or a dict into GeoBounds."""
    if isinstance(value, dict):
        try:
            return GeoBounds(
                west=float(value['west']),
                south=float(value['south']),
                east=float(value['east']),
                north=float(value['north']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid bounds {value!r}: {e}") from e
    if isinstance(value, str):
        value = value.split(',')
    try:
        return GeoBounds.from_list(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid bounds {value!r}: expected west,south,east,north") from e


def config_from_dict(data: dict) -> HarvestConfig:
    """Build a HarvestConfig from a decoded JSON object."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    top_names = {f.name for f in fields(HarvestConfig)}
    browser_names = {f.name for f in fields(BrowserOptions)}

    values = {}
    browser_values = {}
    for raw_key, value in data.items():
        key = _snake_case(raw_key)
        if key == 'browser':
            if not isinstance(value, dict):
                raise ConfigError("'browser' must be an object")
            for raw_browser_key, browser_value in value.items():
                browser_key = _snake_case(raw_browser_key)
                if browser_key not in browser_names:
                    raise ConfigError(f"Unknown browser option: {raw_browser_key}")
                browser_values[browser_key] = browser_value
        elif key not in top_names:
            raise ConfigError(f"Unknown configuration key: {raw_key}")
        else:
            values[key] = value

    if 'bounds' in values and values['bounds'] is not None:
        values['bounds'] = parse_bounds(values['bounds'])
    for key in ('tilesets', 'tile_hosts', 'font_stacks'):
        if key in values:
            if isinstance(values[key], str):
                values[key] = (values[key],)
            values[key] = tuple(values[key])
    for key in ('delay_ms', 'min_zoom', 'max_zoom'):
        if values.get(key) is not None:
            try:
                values[key] = int(values[key])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"'{key}' must be an integer") from e
    if 'step_degrees' in values:
        try:
            values['step_degrees'] = float(values['step_degrees'])
        except (TypeError, ValueError) as e:
            raise ConfigError("'step_degrees' must be a number") from e
        if values['step_degrees'] <= 0:
            raise ConfigError("'step_degrees' must be positive")

    return HarvestConfig(browser=BrowserOptions(**browser_values), **values)


def load_config(path: Path) -> HarvestConfig:
    """Load configuration from a JSON or gzipped JSON file."""
    try:
        if path.suffix == '.gz':
            with gzip.open(path, 'rt', encoding='utf-8') as f:
                data = json.load(f)
        else:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    return config_from_dict(data)
