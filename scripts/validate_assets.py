#!/usr/bin/env python3
"""
Run the asset validator from a source checkout without installing it.

Checks every entity list registered in config/asset_validations.toml and
prints the problems found, for example:

    python scripts/validate_assets.py run --format html
"""

import sys
from pathlib import Path

# The package lives next to this script
scripts_dir = Path(__file__).parent
if str(scripts_dir) not in sys.path:
    sys.path.insert(0, str(scripts_dir))

from asset_validator.cli import app

if __name__ == "__main__":
    app(prog_name="validate_assets.py")
