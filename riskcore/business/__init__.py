"""Business layer.

- config/: Risk settings loaded from YAML
- risk/: Risk engine and snapshots
- cli/: Command line interface
"""
