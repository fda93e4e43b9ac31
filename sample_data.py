import logging

from component_store import ComponentStore
from models import ActiveFields, Component, PassiveFields

logger = logging.getLogger(__name__)


def _passive(name, manufacturer, quantity, category, value, unit, package):
    return Component(name=name, manufacturer=manufacturer, quantity=quantity, category=category,
                     params=PassiveFields(value=value, unit=unit, package=package))


def _active(name, manufacturer, quantity, category, voltage, pins, datasheet=""):
    return Component(name=name, manufacturer=manufacturer, quantity=quantity, category=category,
                     params=ActiveFields(operating_voltage=voltage, pin_count=pins,
                                         datasheet_link=datasheet))


SAMPLE_COMPONENTS = (
    # Resistors
    _passive("RES-10R-0805", "Yageo", 100, "Resistor", 10.0, "Ω", "0805"),
    _passive("RES-100R-0805", "Yageo", 150, "Resistor", 100.0, "Ω", "0805"),
    _passive("RES-1K-0603", "Vishay", 200, "Resistor", 1000.0, "Ω", "0603"),
    _passive("RES-4K7-0805", "Panasonic", 75, "Resistor", 4700.0, "Ω", "0805"),
    _passive("RES-10K-0805", "Yageo", 8, "Resistor", 10000.0, "Ω", "0805"),
    _passive("RES-100K-1206", "Vishay", 50, "Resistor", 100000.0, "Ω", "1206"),
    # Capacitors
    _passive("CAP-100nF-0805", "Murata", 300, "Capacitor", 100e-9, "F", "0805"),
    _passive("CAP-1uF-0805", "Samsung", 5, "Capacitor", 1e-6, "F", "0805"),
    _passive("CAP-10uF-1206", "Murata", 120, "Capacitor", 10e-6, "F", "1206"),
    _passive("CAP-100pF-0603", "TDK", 180, "Capacitor", 100e-12, "F", "0603"),
    # Inductors
    _passive("IND-10uH-1210", "Wurth", 45, "Inductor", 10e-6, "H", "1210"),
    _passive("IND-100uH-THT", "Bourns", 3, "Inductor", 100e-6, "H", "Radial"),
    # ICs
    _active("ATmega328P", "Microchip", 25, "IC", 5.0, 28,
            "https://ww1.microchip.com/downloads/en/DeviceDoc/ATmega328P.pdf"),
    _active("STM32F103C8T6", "STMicroelectronics", 15, "IC", 3.3, 48,
            "https://www.st.com/resource/en/datasheet/stm32f103c8.pdf"),
    _active("NE555", "Texas Instruments", 50, "IC", 15.0, 8,
            "https://www.ti.com/lit/ds/symlink/ne555.pdf"),
    _active("LM7805", "ON Semiconductor", 7, "IC", 35.0, 3),
    _active("ESP32-WROOM-32", "Espressif", 12, "IC", 3.3, 38,
            "https://www.espressif.com/sites/default/files/documentation/esp32-wroom-32_datasheet_en.pdf"),
    # Transistors
    _active("2N2222A", "ON Semiconductor", 200, "Transistor", 40.0, 3),
    _active("BC547B", "Fairchild", 150, "Transistor", 45.0, 3),
    _active("IRF540N", "Infineon", 6, "Transistor", 100.0, 3),
    # Diodes
    _active("1N4148", "Vishay", 500, "Diode", 100.0, 2),
    _active("1N4007", "ON Semiconductor", 300, "Diode", 1000.0, 2),
    _active("LED-RED-5mm", "Kingbright", 9, "Diode", 2.0, 2),
    # Connectors and other parts carry only a package
    _passive("JST-XH-2P", "JST", 40, "Connector", 0.0, "", "2.54mm"),
    _passive("USB-C-16P", "GCT", 4, "Connector", 0.0, "", "SMD"),
    _passive("CR2032-HOLDER", "Keystone", 20, "Other", 0.0, "", "THT"),
)


def populate_sample_data(store: ComponentStore, enabled: bool) -> int:
    """
    Insert the demonstration components into an empty inventory.

    Args:
        store: Component store to write to
        enabled: Feature flag from configuration

    Returns:
        Number of components inserted (0 when disabled or not empty)
    """
    if not enabled:
        return 0
    if store.count() > 0:
        logger.debug("Sample data already exists, skipping population")
        return 0

    for component in SAMPLE_COMPONENTS:
        store.add(component.copy())
    logger.info("Populated %d sample components", len(SAMPLE_COMPONENTS))
    return len(SAMPLE_COMPONENTS)
