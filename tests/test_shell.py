import pytest

from config import AppConfig
from models import ActiveFields, Category, Component, PassiveFields
from shell import CategoryNames, handle_command, parse_args


@pytest.fixture
def seeded(db):
    db.populate_sample_data(True)
    return db


def run(db, command, capsys, config=None):
    result = handle_command(db, command, config)
    return result, capsys.readouterr().out


def test_parse_args():
    assert parse_args(["-id", "5", "-f"]) == {"-id": "5", "-f": True}
    assert parse_args(["-v", "RES 10"]) == {"-v": "RES 10"}


def test_list_empty(db, capsys):
    _, out = run(db, "l", capsys)
    assert "No components found." in out


def test_list_marks_low_stock(seeded, capsys):
    _, out = run(seeded, "l", capsys)
    assert "RES-10K-0805" in out
    assert "LOW" in out

    config = AppConfig()
    config.ui.show_low_stock_warnings = False
    _, out = run(seeded, "l", capsys, config)
    assert "LOW" not in out


def test_search(seeded, capsys):
    _, out = run(seeded, "s -v res", capsys)
    assert "RES-10R-0805" in out
    assert "CAP-100nF-0805" not in out


def test_info(seeded, capsys):
    cid = seeded.search_by_name("RES-4K7")[0].id
    _, out = run(seeded, f"info -id {cid}", capsys)
    assert "4.7kΩ" in out
    assert "0805" in out

    _, out = run(seeded, "info -id 9999", capsys)
    assert "Component not found." in out


def test_update_fields(seeded, capsys):
    cid = seeded.search_by_name("RES-4K7")[0].id

    _, out = run(seeded, f"u -id {cid} -f quantity -v 3", capsys)
    assert "Updated." in out
    _, out = run(seeded, f"u -id {cid} -f value -v 2.2k", capsys)
    assert "Updated." in out
    _, out = run(seeded, f"u -id {cid} -f pins -v 8", capsys)
    assert "Invalid ID or field." in out

    component = seeded.get_component(cid)
    assert component.quantity == 3
    assert component.params.value == pytest.approx(2200.0)


def test_update_rejected_by_validation(seeded, capsys):
    cid = seeded.search_by_name("NE555")[0].id
    _, out = run(seeded, f"u -id {cid} -f pins -v 0", capsys)
    assert "Error: Pin count must be at least 1." in out
    assert seeded.get_component(cid).params.pin_count == 8


def test_delete_component(seeded, capsys):
    cid = seeded.search_by_name("NE555")[0].id
    _, out = run(seeded, f"d -id {cid}", capsys)
    assert "Deleted." in out
    assert seeded.get_component(cid) is None

    _, out = run(seeded, "d", capsys)
    assert "Error: Missing -id argument" in out


def test_add_component_interactively(db, capsys, monkeypatch):
    answers = iter(["IC", "ATtiny85", "Microchip", "12", "5", "8", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    _, out = run(db, "a", capsys)

    assert "Component added with ID:" in out
    component = db.search_by_name("ATtiny85")[0]
    assert component.params == ActiveFields(5.0, 8, "")


def test_add_passive_uses_category_unit(db, capsys, monkeypatch):
    answers = iter(["Capacitor", "CAP-22pF-0603", "TDK", "50", "22p", "0603"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    run(db, "a", capsys)

    params = db.search_by_name("CAP-22pF")[0].params
    assert params.unit == "F"
    assert params.package == "0603"
    assert params.value == pytest.approx(22e-12)


def test_category_commands(seeded, capsys):
    _, out = run(seeded, "ac -n Crystal -k passive -u Hz", capsys)
    assert "Category added with ID:" in out
    crystal = seeded.get_category_by_name("Crystal")
    assert crystal.is_passive and crystal.default_unit == "Hz"

    _, out = run(seeded, f"ec -id {crystal.id} -n Crystals", capsys)
    assert "Updated." in out

    _, out = run(seeded, "c", capsys)
    assert "Crystals" in out
    assert "Resistor" in out

    _, out = run(seeded, "ac -n resistor", capsys)
    assert "reserved category name" in out

    _, out = run(seeded, "ac -n Thing -k weird", capsys)
    assert "Error: Unknown kind" in out


def test_category_flags_without_values(seeded, capsys):
    before = len(seeded.list_categories())

    _, out = run(seeded, "ac -n Crystal -u", capsys)
    assert "Error: Missing -u argument" in out
    _, out = run(seeded, "ac -n Crystal -k", capsys)
    assert "Error: Missing -k argument" in out
    _, out = run(seeded, "ac -u Hz -n", capsys)
    assert "Error: Missing -n argument" in out
    assert len(seeded.list_categories()) == before
    assert seeded.get_category_by_name("Crystal") is None

    cid = seeded.add_category(Category(name="Crystal", is_passive=True, default_unit="Hz"))
    _, out = run(seeded, f"ec -id {cid} -n", capsys)
    assert "Error: Missing -n argument" in out
    _, out = run(seeded, f"ec -id {cid} -k", capsys)
    assert "Error: Missing -k argument" in out
    _, out = run(seeded, f"ec -id {cid} -u", capsys)
    assert "Error: Missing -u argument" in out

    crystal = seeded.get_category(cid)
    assert crystal.name == "Crystal"
    assert crystal.is_passive and not crystal.is_active
    assert crystal.default_unit == "Hz"


def test_delete_category_confirms_and_moves(db, capsys, monkeypatch):
    run(db, "ac -n Thermistor", capsys)
    cid = db.get_category_by_name("Thermistor").id
    db.add_component(Component(name="NTC-10K", quantity=4, category="Thermistor",
                               params=PassiveFields(10000.0)))

    monkeypatch.setattr("builtins.input", lambda prompt="": "n")
    _, out = run(db, f"dc -id {cid}", capsys)
    assert "Cancelled." in out
    assert db.get_category(cid) is not None

    _, out = run(db, f"dc -id {cid} -f", capsys)
    assert "1 component(s) moved to Other." in out
    assert db.get_category(cid) is None


def test_delete_system_category_refused(db, capsys):
    cid = db.get_category_by_name("Other").id
    _, out = run(db, f"dc -id {cid}", capsys)
    assert "cannot be deleted" in out
    assert db.get_category(cid) is not None


def test_low_stock_and_summary(seeded, capsys):
    _, out = run(seeded, "lw -t 6", capsys)
    assert "CAP-1uF-0805" in out
    assert "IRF540N" not in out

    _, out = run(seeded, "lw -t", capsys)
    assert "Error: Missing -t argument" in out

    _, out = run(seeded, "sm", capsys)
    assert "Components: 26" in out
    assert "- Connector: 2" in out


def test_exit_and_unknown(db, capsys):
    result, out = run(db, "x", capsys)
    assert result == "exit"
    _, out = run(db, "frobnicate", capsys)
    assert "Unknown command." in out


def test_category_names_follow_changes(db):
    names = CategoryNames(db)
    assert "Resistor" in names.words()

    db.add_category(Category(name="Crystal"))
    assert "Crystal" in names.words()

    names.close()
    db.add_category(Category(name="Relay"))
    assert "Relay" not in names.words()
