import pytest

from database import InventoryDB
from events import ChangeNotifier, Event
from models import ActiveFields, Component, PassiveFields


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def db(notifier):
    with InventoryDB(":memory:", notifier=notifier) as inventory:
        yield inventory


@pytest.fixture
def published(notifier):
    """Names of events published during the test, in order."""
    seen = []
    for event in Event:
        notifier.subscribe(event, lambda *args, event=event: seen.append(event))
    return seen


@pytest.fixture
def resistor():
    return Component(name="RES-4K7-0805", manufacturer="Panasonic", quantity=75,
                     category="Resistor", params=PassiveFields(4700.0, "Ω", "0805"))


@pytest.fixture
def mcu():
    return Component(name="STM32F103C8T6", manufacturer="STMicroelectronics", quantity=15,
                     category="IC",
                     params=ActiveFields(3.3, 48, "https://www.st.com/resource/en/datasheet/stm32f103c8.pdf"))


@pytest.fixture
def make_passive():
    def make(name, quantity=10, category="Resistor", value=100.0, unit="Ω", package="0805"):
        return Component(name=name, manufacturer="Yageo", quantity=quantity, category=category,
                         params=PassiveFields(value, unit, package))
    return make
