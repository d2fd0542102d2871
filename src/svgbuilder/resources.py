import json
from importlib import resources
from typing import Dict


def load_regional() -> Dict[str, Dict[str, str]]:
    """Localised messages keyed by language code; ``""`` is the English default."""
    with resources.files(__package__).joinpath("data/regional.json").open("r", encoding="utf-8") as fh:
        return json.load(fh)
