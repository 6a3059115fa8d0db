"""Quality menu — which labels a canvas offers, in manifest order."""

from typing import Any, Dict, List, Optional

from app.models import QualityChoice, QualityChoices
from app.services.manifest import Manifest, label_text


def enumerate_choices(manifest: Manifest, canvas: Dict[str, Any]) -> List[str]:
    """Quality labels in manifest order; the first of any duplicate label wins."""
    seen = set()
    labels = []
    for alternate in manifest.alternates(canvas):
        label = label_text(alternate.get("label"))
        if label in seen:
            continue
        seen.add(label)
        labels.append(label)
    return labels


def build_choices(labels: List[str], current: Optional[str] = None) -> QualityChoices:
    return QualityChoices(
        current=current,
        choices=[QualityChoice(label=label, selected=(label == current)) for label in labels],
    )
