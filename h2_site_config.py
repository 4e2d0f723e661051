#!/usr/bin/env python3
"""
Configuration for H2 Site Optimization Model
Grid search, scoring execution and output parameters for hydrogen site selection
"""

from typing import Dict, Any

def get_default_config() -> Dict[str, Any]:
    """
    Returns the default configuration for the H2 site optimization model.

    Grid bounds cover mainland India, matching the seeded reference data.
    Factor cutoffs and criteria weights are fixed in site_scoring and are
    intentionally not configurable here.
    """

    config = {
        # ==================== MODEL METADATA ====================
        'model_name': 'H2SiteOptimizationModel',
        'model_version': '1.0.0',
        'config_version': '1.0.0',
        'description': 'Multi-factor hydrogen infrastructure site scoring model',

        # ==================== COMPUTATIONAL PARAMETERS ====================
        'parallel_processing': False,
        'max_workers': 4,
        'scoring_batch_size': 5000,  # Lattice points per scoring chunk

        # ==================== VALIDATION AND DIAGNOSTICS ====================
        'verbose_logging': True,

        # ==================== GRID SEARCH PARAMETERS ====================
        'grid_bounds': {
            'min_lat': 8.0,
            'max_lat': 37.0,
            'min_lon': 68.0,
            'max_lon': 97.0,
        },
        'grid_step_degrees': 0.2,  # Lattice spacing in both axes
        'default_number_of_sites': 10,

        # ==================== RECOMMENDATION PARAMETERS ====================
        'recommendation_source': 'curated',  # curated or grid
        'recommendation_tag_threshold': 70.0,  # Factor score needed to earn a tag
        'default_investment_range': '₹100L+',

        # ==================== OUTPUT AND REPORTING ====================
        'export_csv': True,
        'export_geojson': True,
        'generate_visualizations': True,
        'map_dpi': 150,
        'figure_size': (12, 8),
        'color_palette': 'viridis',
        'max_exported_sites': 100,
    }

    return config

def validate_config(config: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate configuration parameters for consistency and feasibility.

    Returns:
        Dictionary of validation errors (empty if all valid)
    """
    errors = {}

    bounds = config.get('grid_bounds', {})
    missing = [k for k in ('min_lat', 'max_lat', 'min_lon', 'max_lon') if k not in bounds]
    if missing:
        errors['grid_bounds'] = f"Missing keys: {', '.join(missing)}"
    else:
        if not (-90 <= bounds['min_lat'] <= bounds['max_lat'] <= 90):
            errors['grid_bounds_lat'] = "Latitude bounds must satisfy -90 <= min_lat <= max_lat <= 90"
        if not (-180 <= bounds['min_lon'] <= bounds['max_lon'] <= 180):
            errors['grid_bounds_lon'] = "Longitude bounds must satisfy -180 <= min_lon <= max_lon <= 180"

    if config.get('grid_step_degrees', 0) <= 0:
        errors['grid_step_degrees'] = "Must be positive"

    if config.get('default_number_of_sites', 0) < 0:
        errors['default_number_of_sites'] = "Must not be negative"

    if config.get('max_workers', 1) < 1:
        errors['max_workers'] = "Must be at least 1"

    if config.get('scoring_batch_size', 1) < 1:
        errors['scoring_batch_size'] = "Must be at least 1"

    if not (0 <= config.get('recommendation_tag_threshold', 0) <= 100):
        errors['recommendation_tag_threshold'] = "Must be between 0 and 100"

    if config.get('recommendation_source', 'curated') not in ('curated', 'grid'):
        errors['recommendation_source'] = "Must be 'curated' or 'grid'"

    return errors

def get_scenario_configs() -> Dict[str, Dict[str, Any]]:
    """
    Return predefined scenario configurations for different analysis contexts.
    """
    base_config = get_default_config()

    scenarios = {
        'fine_grid': {
            **base_config,
            'grid_step_degrees': 0.1,  # Four times the lattice points
            'parallel_processing': True,
        },

        'coarse_grid': {
            **base_config,
            'grid_step_degrees': 0.5,  # Quick screening run
        },

        'western_corridor': {
            **base_config,
            'grid_bounds': {'min_lat': 20.0, 'max_lat': 30.0, 'min_lon': 68.0, 'max_lon': 76.0},
            'grid_step_degrees': 0.1,
        },

        'eastern_corridor': {
            **base_config,
            'grid_bounds': {'min_lat': 15.0, 'max_lat': 23.0, 'min_lon': 80.0, 'max_lon': 88.0},
            'grid_step_degrees': 0.1,
        }
    }

    return scenarios

def print_config_summary(config: Dict[str, Any]) -> None:
    """Print a summary of key configuration parameters."""
    bounds = config['grid_bounds']
    print("Configuration Summary")
    print("=" * 50)
    print(f"Model: {config['model_name']} v{config['model_version']}")
    print(f"Grid Bounds: lat {bounds['min_lat']}-{bounds['max_lat']}, lon {bounds['min_lon']}-{bounds['max_lon']}")
    print(f"Grid Step: {config['grid_step_degrees']} degrees")
    print(f"Sites Returned: {config['default_number_of_sites']}")
    print(f"Parallel Scoring: {config['parallel_processing']} ({config['max_workers']} workers)")
    print(f"Recommendation Source: {config['recommendation_source']}")

if __name__ == '__main__':
    config = get_default_config()
    errors = validate_config(config)

    if errors:
        print("Configuration Validation Errors:")
        for param, error in errors.items():
            print(f"  {param}: {error}")
    else:
        print("✓ Configuration validation passed")
        print_config_summary(config)

    scenarios = get_scenario_configs()
    print(f"\nAvailable scenarios: {list(scenarios.keys())}")
