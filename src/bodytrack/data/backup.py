"""Full JSON backups of a profile, its weight history and its evaluation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from bodytrack.errors import BodyTrackError, ImportFormatError
from bodytrack.profiles.evaluation import (
    NutritionEvaluation,
    evaluation_from_dict,
    evaluation_to_dict,
)
from bodytrack.tracking.models import (
    MAX_WEIGHT_KG,
    MIN_WEIGHT_KG,
    UserProfile,
    WeightEntry,
    is_weight_in_range,
)

logger = logging.getLogger(__name__)


@dataclass
class Backup:
    """Contents of a backup file."""

    profile: UserProfile
    entries: list[WeightEntry] = field(default_factory=list)
    evaluation: Optional[NutritionEvaluation] = None


def export_backup(
    profile: UserProfile,
    entries: Iterable[WeightEntry],
    evaluation: Optional[NutritionEvaluation] = None,
) -> str:
    """Serialize everything needed to restore an installation.

    Returns:
        Pretty-printed JSON text
    """
    data = {
        "exported_at": datetime.now().isoformat(),
        "profile": profile.to_dict(),
        "entries": [e.to_dict() for e in sorted(entries, key=lambda e: e.date)],
    }
    if evaluation is not None:
        data["nutrition_evaluation"] = evaluation_to_dict(evaluation)
    return json.dumps(data, indent=2, ensure_ascii=False)


def parse_backup(text: str) -> Backup:
    """Read a backup produced by export_backup().

    Raises:
        ImportFormatError: If the text is not JSON, lacks the profile or
            entries, any record cannot be rebuilt, or an entry weight is
            outside (0, 500] kg
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "profile" not in data or "entries" not in data:
        raise ImportFormatError("Invalid backup format: missing profile or entries")

    try:
        profile = UserProfile.from_dict(data["profile"])
        entries = [WeightEntry.from_dict(e) for e in data["entries"]]
        evaluation = None
        if data.get("nutrition_evaluation"):
            evaluation = evaluation_from_dict(data["nutrition_evaluation"])
    except (KeyError, TypeError, ValueError, BodyTrackError) as e:
        raise ImportFormatError(f"Invalid backup record: {e}") from e

    for position, entry in enumerate(entries, start=1):
        if not is_weight_in_range(entry.weight):
            raise ImportFormatError(
                f"Invalid backup entry {position} ({entry.date.isoformat()}): weight must be "
                f"greater than {MIN_WEIGHT_KG:g} and at most {MAX_WEIGHT_KG:g} kg, got {entry.weight:g}"
            )

    logger.debug("Parsed backup with %d entries", len(entries))
    return Backup(profile=profile, entries=entries, evaluation=evaluation)
