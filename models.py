from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from errors import ValidationError

NEW_COMPONENT_ID = -1
FALLBACK_CATEGORY = "Other"

# (lower bound, multiplier, suffix), first match wins
SI_PREFIXES = (
    (1e9, 1e-9, "G"),
    (1e6, 1e-6, "M"),
    (1e3, 1e-3, "k"),
    (1.0, 1.0, ""),
    (1e-3, 1e3, "m"),
    (1e-6, 1e6, "µ"),
    (1e-9, 1e9, "n"),
    (1e-12, 1e12, "p"),
)


class ComponentKind(str, Enum):
    PASSIVE = "passive"
    ACTIVE = "active"


def format_value(value: float) -> str:
    """
    Format a passive value with an SI prefix and three significant digits.

    Examples:
        10000.0 -> '10k', 100e-9 -> '100n', 1e-12 -> '1p'

    The prefix is picked before rounding, so a value just under a boundary
    rounds up in %g notation: 999.9 -> '1e+03', 999999 -> '1e+03k'.
    """
    for bound, multiplier, suffix in SI_PREFIXES:
        if value >= bound:
            return f"{value * multiplier:.3g}{suffix}"
    return f"{value:.3g}"


SUFFIX_SCALE = {suffix: bound for bound, _, suffix in SI_PREFIXES if suffix}
SUFFIX_SCALE["u"] = SUFFIX_SCALE["µ"]


def parse_value(text: str) -> float:
    """Parse '4.7k', '100n' or '0.5' into a float in the base unit."""
    text = text.strip()
    if text and text[-1] in SUFFIX_SCALE:
        return float(text[:-1]) * SUFFIX_SCALE[text[-1]]
    return float(text)


@dataclass
class Category:
    """
    Dataclass representing a component category.

    Attributes:
        id: Unique identifier (None until stored)
        name: Category name, unique across all categories
        is_passive: Components hydrate as passive parts (takes precedence)
        is_active: Components hydrate as active parts
        default_unit: Unit suggested for new components (e.g. 'Ω')
        is_system: Built-in category, cannot be deleted or renamed
    """
    id: int = None
    name: str = ""
    is_passive: bool = False
    is_active: bool = False
    default_unit: str = ""
    is_system: bool = False

    @property
    def kind(self) -> Optional[ComponentKind]:
        """Variant selected by the flags, None when neither flag is set."""
        if self.is_passive:
            return ComponentKind.PASSIVE
        if self.is_active:
            return ComponentKind.ACTIVE
        return None


SYSTEM_CATEGORIES = (
    Category(name="Resistor", is_passive=True, default_unit="Ω", is_system=True),
    Category(name="Capacitor", is_passive=True, default_unit="F", is_system=True),
    Category(name="Inductor", is_passive=True, default_unit="H", is_system=True),
    Category(name="IC", is_active=True, is_system=True),
    Category(name="Transistor", is_active=True, is_system=True),
    Category(name="Diode", is_active=True, is_system=True),
    Category(name="Connector", is_system=True),
    Category(name=FALLBACK_CATEGORY, is_system=True),
)

# Checked on add, independent of the stored is_system flags
RESERVED_CATEGORY_NAMES = tuple(c.name for c in SYSTEM_CATEGORIES)


def is_reserved_name(name: str) -> bool:
    folded = name.strip().casefold()
    return any(folded == reserved.casefold() for reserved in RESERVED_CATEGORY_NAMES)


@dataclass
class PassiveFields:
    """
    Parameters of a passive part.

    Attributes:
        value: Magnitude in the SI base unit (ohms, farads, henries)
        unit: Unit symbol (e.g. 'Ω')
        package: Physical package (e.g. '0805')
    """
    kind: ClassVar[ComponentKind] = ComponentKind.PASSIVE

    value: float = 0.0
    unit: str = ""
    package: str = ""

    def to_columns(self) -> Tuple[float, str, str]:
        return self.value, self.package, self.unit

    @classmethod
    def from_columns(cls, param_1, param_2, extra_data) -> "PassiveFields":
        return cls(value=param_1 or 0.0, unit=extra_data or "", package=param_2 or "")

    @property
    def formatted_value(self) -> str:
        return format_value(self.value)

    def describe(self) -> str:
        return f"{self.formatted_value} {self.unit}, Package: {self.package}"


@dataclass
class ActiveFields:
    """
    Parameters of an active part.

    Attributes:
        operating_voltage: Operating voltage in volts
        pin_count: Number of pins
        datasheet_link: Datasheet URL, may be empty
    """
    kind: ClassVar[ComponentKind] = ComponentKind.ACTIVE

    operating_voltage: float = 0.0
    pin_count: int = 1
    datasheet_link: str = ""

    def to_columns(self) -> Tuple[float, str, str]:
        return self.operating_voltage, str(self.pin_count), self.datasheet_link

    @classmethod
    def from_columns(cls, param_1, param_2, extra_data) -> "ActiveFields":
        try:
            pin_count = int(param_2)
        except (TypeError, ValueError):
            pin_count = 0
        return cls(operating_voltage=param_1 or 0.0, pin_count=pin_count,
                   datasheet_link=extra_data or "")

    def describe(self) -> str:
        details = f"{self.operating_voltage:.1f}V, {self.pin_count} pins"
        if self.datasheet_link:
            details += ", Datasheet available"
        return details


VARIANTS = {
    ComponentKind.PASSIVE: PassiveFields,
    ComponentKind.ACTIVE: ActiveFields,
}


@dataclass
class Component:
    """
    Dataclass representing an electronic component in inventory.

    Attributes:
        id: Unique identifier (NEW_COMPONENT_ID until stored)
        name: Component name or part number (e.g. 'RES-10K-0805')
        manufacturer: Optional manufacturer name
        quantity: Current stock count
        category: Name of the category the component belongs to
        params: Passive or active parameters, tagged by their kind
    """
    id: int = NEW_COMPONENT_ID
    name: str = ""
    manufacturer: str = ""
    quantity: int = 0
    category: str = FALLBACK_CATEGORY
    params: Union[PassiveFields, ActiveFields] = field(default_factory=PassiveFields)

    @property
    def kind(self) -> ComponentKind:
        return self.params.kind

    def is_low_stock(self, threshold: int) -> bool:
        return self.quantity < threshold

    def describe(self) -> str:
        return self.params.describe()

    def copy(self) -> "Component":
        return replace(self, params=replace(self.params))


def validate_category(category: Category) -> None:
    if not category.name or not category.name.strip():
        raise ValidationError("Category name is required.")


def validate_component(component: Component, category: Optional[Category]) -> None:
    """
    Check a component against the rules of its target category.

    Raises:
        ValidationError: On the first rule the component breaks
    """
    if not component.name or not component.name.strip():
        raise ValidationError("Component name is required.")
    if component.quantity < 0:
        raise ValidationError("Quantity cannot be negative.")
    if category is None:
        raise ValidationError(f"Unknown category '{component.category}'.")

    params = component.params
    if category.kind is None:
        return
    if params.kind != category.kind:
        raise ValidationError(
            f"'{category.name}' components need {category.kind.value} parameters."
        )
    if params.kind == ComponentKind.PASSIVE:
        if params.value <= 0:
            raise ValidationError("Please enter a positive component value.")
    else:
        if params.operating_voltage <= 0:
            raise ValidationError("Please enter a positive operating voltage.")
        if params.pin_count < 1:
            raise ValidationError("Pin count must be at least 1.")
