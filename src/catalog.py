"""
Component catalog: the fixed, read-only list of purchasable hardware.

The catalog is built once at import time and never mutated, so it can be
shared freely between sessions and threads.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class ComponentCategory(str, Enum):
    """Hardware category of a catalog entry."""
    SENSOR = "sensor"
    ACTUATOR = "actuator"
    CONTROLLER = "controller"
    POWER = "power"


@dataclass(frozen=True)
class Component:
    """
    Immutable catalog entry.

    `specifications` maps informational labels (e.g. "Voltage") to display
    values; the keys are not typed fields.
    """
    id: str
    name: str
    category: ComponentCategory
    description: str
    cost: Decimal
    image: str = ""
    specifications: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self):
        if self.cost < 0:
            raise ValueError(f"Component {self.id!r} has negative cost: {self.cost}")

    def to_dict(self) -> dict:
        """JSON-compatible representation (cost as float)."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
            "specifications": dict(self.specifications),
            "cost": float(self.cost),
            "image": self.image,
        }


COMPONENT_CATALOG: tuple[Component, ...] = (
    Component(
        id="ard-uno",
        name="Arduino Uno R3",
        category=ComponentCategory.CONTROLLER,
        description="Universal 8-bit microcontroller board.",
        specifications={"Voltage": "5V", "I/O Pins": "14 Digital, 6 Analog", "Clock": "16MHz"},
        cost=Decimal("25.00"),
        image="https://picsum.photos/seed/arduino/200/200",
    ),
    Component(
        id="servo-mg996r",
        name="Servo MG996R",
        category=ComponentCategory.ACTUATOR,
        description="High torque metal gear servo motor.",
        specifications={"Torque": "11kg/cm", "Speed": "0.17s/60deg", "Voltage": "4.8V - 7.2V"},
        cost=Decimal("12.50"),
        image="https://picsum.photos/seed/servo/200/200",
    ),
    Component(
        id="sensor-ultra",
        name="HC-SR04 Ultrasonic",
        category=ComponentCategory.SENSOR,
        description="Distance measurement sensor.",
        specifications={"Range": "2cm - 400cm", "Resolution": "0.3cm", "Angle": "15 deg"},
        cost=Decimal("4.00"),
        image="https://picsum.photos/seed/ultra/200/200",
    ),
    Component(
        id="dc-pump",
        name="12V DC Water Pump",
        category=ComponentCategory.ACTUATOR,
        description="Miniature submersible water pump.",
        specifications={"Flow Rate": "240L/H", "Head": "3m", "Current": "400mA"},
        cost=Decimal("8.00"),
        image="https://picsum.photos/seed/pump/200/200",
    ),
)

_BY_ID: dict[str, Component] = {c.id: c for c in COMPONENT_CATALOG}


def get_component(component_id: str) -> Component | None:
    """Look up a catalog entry by id. Returns None for unknown ids."""
    return _BY_ID.get(component_id)


def components_by_category(category: ComponentCategory | str) -> list[Component]:
    """All catalog entries of a category, in catalog order."""
    category = ComponentCategory(category)
    return [c for c in COMPONENT_CATALOG if c.category == category]
