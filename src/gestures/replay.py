"""
Recorded pointer traces.
Loads YAML sample files so gestures can be replayed without a window.
"""
from pathlib import Path
from typing import Any, Dict, List, Sequence
import yaml

from .config import ConfigError
from .pointer import PointerSample, SampleKind
from .types import MouseButton


def samples_from_points(points: Sequence[Sequence[float]],
                        button: int = MouseButton.RIGHT,
                        start: float = 0.0,
                        interval: float = 0.01) -> List[PointerSample]:
    """
    Synthesize a press-drag-release sequence through the given points.

    The first point is the press, the last one is repeated as the release.
    """
    samples = []
    if not points:
        return samples

    button = int(button)
    for index, (x, y) in enumerate(points):
        kind = SampleKind.PRESS if index == 0 else SampleKind.MOVE
        samples.append(PointerSample(
            x=float(x), y=float(y), buttons=button,
            timestamp=start + index * interval,
            kind=kind, button=button if index == 0 else 0,
        ))

    last_x, last_y = points[-1]
    samples.append(PointerSample(
        x=float(last_x), y=float(last_y), buttons=0,
        timestamp=start + len(points) * interval,
        kind=SampleKind.RELEASE, button=button,
    ))
    return samples


def _sample_from_dict(data: Dict[str, Any]) -> PointerSample:
    try:
        kind = SampleKind[str(data.get('kind', 'move')).upper()]
    except KeyError:
        raise ConfigError(f"Unknown sample kind: {data.get('kind')!r}") from None

    return PointerSample(
        x=float(data['x']),
        y=float(data['y']),
        buttons=int(data.get('buttons', 0)),
        timestamp=float(data.get('t', 0.0)),
        trusted=bool(data.get('trusted', True)),
        kind=kind,
        button=int(data.get('button', 0)),
        alt_key=bool(data.get('alt', False)),
        ctrl_key=bool(data.get('ctrl', False)),
        shift_key=bool(data.get('shift', False)),
        delta_y=float(data.get('delta_y', 0.0)),
    )


def load_samples(path: Path, button: int = MouseButton.RIGHT) -> List[PointerSample]:
    """
    Load a trace file.

    Two layouts are accepted: `samples:` with one mapping per event
    (x, y, buttons, t, kind, ...) or `points:` with plain [x, y] pairs,
    which are turned into a drag with the given button.
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if 'points' in data:
        return samples_from_points(data['points'], button)

    try:
        return [_sample_from_dict(entry) for entry in data.get('samples', [])]
    except ConfigError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Malformed sample in {path}: {e}") from None
