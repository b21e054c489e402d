#!/usr/bin/env python3
"""Validate fleet YAML files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from availability.loader import parse_date


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def _normalize_dates(records):
    """Quote YAML dates so unquoted and quoted dates validate alike."""
    for record in records or []:
        for key in ("startDate", "endDate"):
            if key in record and not isinstance(record[key], str):
                record[key] = str(record[key])


def check_date_ranges(data: dict) -> list[str]:
    """Report bookings and blocks whose end date precedes their start date."""
    errors = []
    for section in ("bookings", "maintenanceBlocks"):
        for record in data.get(section) or []:
            try:
                start = parse_date(record["startDate"])
                end = parse_date(record["endDate"])
            except (KeyError, ValueError) as e:
                errors.append(f"Date error in {section} '{record.get('id')}': {e}")
                continue
            if start > end:
                errors.append(
                    f"Date range error: {section} '{record.get('id')}' "
                    f"ends {end} before it starts {start}"
                )
    return errors


def validate_fleet_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single fleet YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            _normalize_dates(data.get("bookings"))
            _normalize_dates(data.get("maintenanceBlocks"))
        validate(instance=data, schema=schema)
        errors.extend(check_date_ranges(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the given fleet files, or every YAML file in data/."""
    schema = load_schema()
    args = sys.argv[1:] if argv is None else argv

    if args:
        yaml_files = [Path(a) for a in args]
    else:
        data_dir = Path(__file__).parent / "data"
        if not data_dir.exists():
            print(f"Error: data directory not found: {data_dir}")
            return 1
        yaml_files = list(data_dir.glob("*.yaml")) + list(data_dir.glob("*.yml"))

    if not yaml_files:
        print("Warning: No YAML files found")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_fleet_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
