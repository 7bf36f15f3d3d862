"""JSON output for statistics and rankings, and reading statistics back.

Statistics are written so they can be rendered later without refetching:
``credit repo owner/name --json > stats.json`` then ``credit render stats.json``.
Durations are stored as seconds.
"""

from typing import Optional

from pydantic import BaseModel, ValidationError

from github_credit.exceptions import DecodeError
from github_credit.models.statistics import Statistics


def dump_json(model: BaseModel, indent: Optional[int] = None) -> str:
    """Serialize any of our models to JSON."""
    return model.model_dump_json(indent=indent)


def load_statistics(text: str) -> Statistics:
    """Read statistics previously written by :func:`dump_json`.

    Raises:
        DecodeError: If ``text`` isn't a serialized ``Statistics``
    """
    try:
        return Statistics.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"Not a saved statistics file: {e}") from e
