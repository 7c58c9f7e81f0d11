"""Service layer: framework-agnostic token lifecycle logic."""
