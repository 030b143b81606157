"""
ProjectStore: Single source of truth for all mutable project data in a session.

The project itself is held as an immutable ProjectData value. Every mutation
operation on ProjectStore computes a partial StateUpdate and swaps in a new
ProjectData built by apply_update(), so readers never observe a half-applied
change.

Design:
- ProjectData is frozen; sequences are tuples
- All changes go through ProjectStore operations (no ambient globals)
- Mutations are serialized by a lock, since advisory results are applied
  from worker threads
- Missing requirement ids are silent no-ops
"""

import threading
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, TypedDict

from catalog import Component, get_component
from logging_utils import get_logger

logger = get_logger(__name__)


class ProjectPhase(str, Enum):
    """Workflow phases, in display order."""
    REQUIREMENTS = "requirements"
    COMPONENTS = "components"
    MODELING = "modeling"
    PROGRAMMING = "programming"
    REPORT = "report"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class RequirementType(str, Enum):
    FUNCTIONAL = "functional"
    ECONOMIC = "economic"
    SAFETY = "safety"


class RequirementStatus(str, Enum):
    PENDING = "pending"
    DEFINED = "defined"


def status_for(description: str) -> RequirementStatus:
    """A requirement is defined once its description has non-blank text."""
    return RequirementStatus.DEFINED if description.strip() else RequirementStatus.PENDING


@dataclass(frozen=True)
class Requirement:
    """A user-authored system requirement."""
    id: str
    type: RequirementType
    description: str = ""
    status: RequirementStatus = RequirementStatus.PENDING

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "type": self.type.value,
            "description": self.description,
            "status": self.status.value,
        }


class StateUpdate(TypedDict, total=False):
    """
    Partial project update.

    Store operations build one of these rather than mutating fields,
    which keeps every change explicit and testable.
    """
    project_name: str
    requirements: tuple[Requirement, ...]
    selected_components: tuple[Component, ...]
    math_model: str
    arduino_code: str


@dataclass(frozen=True)
class ProjectData:
    """
    Immutable snapshot of a student's project.

    - requirements keep insertion order
    - selected_components keep insertion order and never repeat an id
    - math_model and arduino_code hold the latest advisory output or user edit
    """
    project_name: str = ""
    requirements: tuple[Requirement, ...] = field(default_factory=tuple)
    selected_components: tuple[Component, ...] = field(default_factory=tuple)
    math_model: str = ""
    arduino_code: str = ""

    def apply_update(self, update: StateUpdate) -> "ProjectData":
        """
        Apply a partial update, returning a new ProjectData.

        Args:
            update: Mapping of field names to new values.

        Returns:
            New ProjectData with updates applied.

        Raises:
            KeyError: If the update names a field ProjectData doesn't have.
        """
        unknown = set(update) - set(self.__dataclass_fields__)
        if unknown:
            raise KeyError(f"Unknown ProjectData fields: {sorted(unknown)}")
        return replace(self, **update) if update else self

    def requirement(self, requirement_id: str) -> Requirement | None:
        for req in self.requirements:
            if req.id == requirement_id:
                return req
        return None

    def selected_ids(self) -> list[str]:
        return [c.id for c in self.selected_components]

    def total_cost(self) -> Decimal:
        """Sum of cost over exactly the selected components."""
        return sum((c.cost for c in self.selected_components), Decimal("0"))

    def to_snapshot(self) -> dict[str, Any]:
        """JSON-compatible copy sent to the advisory gateway for context."""
        return {
            "project_name": self.project_name,
            "requirements": [r.to_dict() for r in self.requirements],
            "selected_components": [c.to_dict() for c in self.selected_components],
            "math_model": self.math_model,
            "arduino_code": self.arduino_code,
        }


class ProjectStore:
    """
    Owns the current phase and project data for one session.

    Usage:
        store = ProjectStore()
        req = store.add_requirement("safety")
        store.update_requirement_description(req.id, "Must stop within 200ms")
        store.toggle_component_selection("ard-uno")
        store.total_cost()  # Decimal("25.00")
    """

    def __init__(self, data: ProjectData | None = None, phase: ProjectPhase = ProjectPhase.REQUIREMENTS):
        self._data = data or ProjectData()
        self._phase = ProjectPhase(phase)
        self._lock = threading.RLock()

    # === Reads ===

    @property
    def phase(self) -> ProjectPhase:
        return self._phase

    @property
    def data(self) -> ProjectData:
        return self._data

    def snapshot(self) -> dict[str, Any]:
        return self._data.to_snapshot()

    def total_cost(self) -> Decimal:
        return self._data.total_cost()

    def is_selected(self, component_id: str) -> bool:
        return component_id in self._data.selected_ids()

    # === Phase ===

    def set_phase(self, phase: ProjectPhase | str) -> None:
        """Switch the active view. Never touches project data."""
        self._phase = ProjectPhase(phase)
        logger.debug("Phase set to %s", self._phase.value)

    # === Project data ===

    def set_project_name(self, name: str) -> None:
        self._apply({"project_name": name})

    def add_requirement(self, req_type: RequirementType | str) -> Requirement:
        """Append a new empty, pending requirement of the given type."""
        req_type = RequirementType(req_type)
        with self._lock:
            existing = {r.id for r in self._data.requirements}
            new_id = _new_requirement_id()
            while new_id in existing:
                new_id = _new_requirement_id()

            requirement = Requirement(id=new_id, type=req_type)
            self._apply({"requirements": self._data.requirements + (requirement,)})

        logger.debug("Added %s requirement %s", req_type.value, new_id)
        return requirement

    def update_requirement_description(self, requirement_id: str, text: str) -> None:
        """Replace a requirement's description; no-op if the id is unknown."""
        with self._lock:
            if self._data.requirement(requirement_id) is None:
                logger.debug("Ignoring update for unknown requirement %s", requirement_id)
                return
            requirements = tuple(
                replace(r, description=text, status=status_for(text)) if r.id == requirement_id else r
                for r in self._data.requirements
            )
            self._apply({"requirements": requirements})

    def remove_requirement(self, requirement_id: str) -> None:
        with self._lock:
            requirements = tuple(r for r in self._data.requirements if r.id != requirement_id)
            if len(requirements) == len(self._data.requirements):
                logger.debug("Ignoring removal of unknown requirement %s", requirement_id)
                return
            self._apply({"requirements": requirements})

    def toggle_component_selection(self, component_id: str) -> None:
        """Deselect the component if selected, otherwise add it from the catalog."""
        with self._lock:
            selected = self._data.selected_components
            if any(c.id == component_id for c in selected):
                self._apply({"selected_components": tuple(c for c in selected if c.id != component_id)})
                return

            component = get_component(component_id)
            if component is None:
                logger.warning("Ignoring toggle of unknown component %s", component_id)
                return
            self._apply({"selected_components": selected + (component,)})

    def set_math_model(self, text: str) -> None:
        self._apply({"math_model": text})

    def set_arduino_code(self, text: str) -> None:
        self._apply({"arduino_code": text})

    def _apply(self, update: StateUpdate) -> None:
        with self._lock:
            self._data = self._data.apply_update(update)
        logger.debug("Applied update to %s", ", ".join(update))


def _new_requirement_id() -> str:
    return uuid.uuid4().hex[:12]
