"""
Sun state persistence.

The cycle survives restarts through a small JSON file holding the
PersistedState fields. A missing or unreadable file means a fresh dawn.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

from pydantic import BaseModel, Field, ValidationError

from suncycle.config import STATE_FILE
from suncycle.state import Phase
from suncycle.logger import get_logger

logger = get_logger("persistence")

Channel = Annotated[float, Field(ge=0.0, le=1.0)]


class PersistedState(BaseModel):
    """Everything needed to resume the cycle where it stopped."""
    rotated_angle: float = Field(0.0, ge=0.0, description="Unwrapped rotation since the last dawn")
    phase: Phase = Phase.DAWN
    current_color: tuple[Channel, Channel, Channel] = (0.0, 0.0, 0.0)
    desired_color: tuple[Channel, Channel, Channel] = (0.0, 0.0, 0.0)
    current_intensity: float = Field(0.0, ge=0.0)
    desired_intensity: float = Field(0.0, ge=0.0)
    initialized: bool = False


def get_state_path(path: Optional[str] = None) -> Path:
    """Get path to the state file, create directory if needed."""
    state_path = Path(path or STATE_FILE)
    state_path.parent.mkdir(parents=True, exist_ok=True)
    return state_path


def save_state(state: PersistedState, path: Optional[str] = None) -> None:
    """
    Write state to the JSON file.

    Args:
        state: State to persist
        path: Override for STATE_FILE
    """
    state_path = get_state_path(path)

    try:
        with open(state_path, 'w') as f:
            json.dump(state.model_dump(mode="json"), f, indent=2)

        logger.debug(f"Saved sun state to {state_path}: phase={state.phase.value}, angle={state.rotated_angle:.2f}")

    except Exception:
        logger.error(f"Failed to save sun state to {state_path}", exc_info=True)
        raise


def load_state(path: Optional[str] = None) -> Optional[PersistedState]:
    """
    Read state from the JSON file.

    Returns:
        PersistedState, or None when the file is missing or invalid
    """
    state_path = get_state_path(path)

    if not state_path.exists():
        logger.info(f"No saved sun state at {state_path}, starting fresh")
        return None

    try:
        with open(state_path, 'r') as f:
            data = json.load(f)

        state = PersistedState.model_validate(data)
        logger.info(f"Loaded sun state from {state_path}: phase={state.phase.value}, angle={state.rotated_angle:.2f}")
        return state

    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in sun state file: {e}")
        return None
    except ValidationError as e:
        logger.error(f"Invalid sun state in {state_path}: {e}")
        return None
