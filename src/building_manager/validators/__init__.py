"""Invariant validation for building models.

- hierarchy: floor numbering and stacking, floor dimensions, occupied area,
  room and sensor uniqueness, evaluator references, maintenance order
"""

from building_manager.validators.hierarchy import ValidationError, validate_building

__all__ = ["ValidationError", "validate_building"]
