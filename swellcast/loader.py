"""
YAML data loader with schema validation.

Loads spots, scenarios and persisted simulation settings from YAML files.
Spots and scenarios are validated against JSON schemas; settings are
loaded leniently (invalid entries fall back to defaults).
"""

import yaml
import json
from pathlib import Path
from typing import Dict, List, Optional
import jsonschema

from .config import SimConfig
from .data_types import Scenario, Spot

DEFAULT_DATA_ROOT = Path(__file__).parent / "data"


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        raise DataLoadError(f"Schema not found: {schema_path}")

    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def _schema_dir(schema_dir: Optional[Path]) -> Path:
    return Path(schema_dir) if schema_dir else DEFAULT_DATA_ROOT / "schemas"


def load_spots(file_path: Path, schema_dir: Optional[Path] = None) -> List[Spot]:
    """Load observation spots from YAML"""
    data = load_yaml(file_path)
    validate_against_schema(data, _schema_dir(schema_dir) / "spots.schema.json", file_path)

    return [
        Spot(
            spot_id=s['id'],
            name=s['name'],
            position=[s['x'], s['y']],
            preferred_min=float(s['preferred_min']),
            preferred_max=float(s['preferred_max']),
        )
        for s in data['spots']
    ]


def load_scenarios(file_path: Path, schema_dir: Optional[Path] = None) -> Dict[str, Scenario]:
    """Load scenario presets from YAML, keyed by scenario id (file order kept)"""
    data = load_yaml(file_path)
    validate_against_schema(data, _schema_dir(schema_dir) / "scenarios.schema.json", file_path)

    scenarios = {}
    for s in data['scenarios']:
        storms = [dict(storm, type=storm.get('type', 'preset')) for storm in s['storms']]
        scenarios[s['id']] = Scenario(
            scenario_id=s['id'],
            name=s['name'],
            storms=storms,
            initial_time_hours=float(s.get('initial_time_hours', 0.0)),
            description=s.get('description'),
        )

    if not scenarios:
        raise DataLoadError(f"No scenarios found in {file_path}")

    return scenarios


def load_sim_config(file_path: Optional[Path]) -> SimConfig:
    """
    Load persisted settings.

    A missing or unreadable file yields defaults; invalid fields fall back
    to their defaults individually.
    """
    if file_path is None:
        return SimConfig()
    try:
        data = load_yaml(Path(file_path))
    except DataLoadError:
        return SimConfig()
    return SimConfig.from_dict(data)


def save_sim_config(config: SimConfig, file_path: Path):
    """Persist settings as YAML"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=True)


def load_all_data(data_root: Optional[Path] = None, schema_dir: Optional[Path] = None) -> dict:
    """Load all simulation data from data directory

    Returns dict with keys: spots, scenarios, config
    """
    data_root = Path(data_root) if data_root else DEFAULT_DATA_ROOT
    if schema_dir is None:
        schema_dir = data_root / "schemas"

    return {
        'spots': load_spots(data_root / "spots.yaml", schema_dir),
        'scenarios': load_scenarios(data_root / "scenarios.yaml", schema_dir),
        'config': load_sim_config(data_root / "sim_config.yaml"),
    }
