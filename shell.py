import argparse
import logging
import shlex

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from tabulate import tabulate

from config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from database import InventoryDB, open_inventory
from errors import InventoryError
from events import Event
from logic import category_deletion_impact, get_inventory_summary, get_low_stock_components
from models import (ActiveFields, Category, ComponentKind, Component, PassiveFields,
                    parse_value)
from strings import (ACTIVE_FIELDS, CATEGORY_KINDS, COMMANDS, COMMON_FIELDS, HELP_TEXT,
                     PASSIVE_FIELDS)

logger = logging.getLogger(__name__)

COMMON_SETTERS = {
    "name": str,
    "manufacturer": str,
    "quantity": int,
    "category": str,
}

PARAM_SETTERS = {
    "value": ("value", parse_value),
    "unit": ("unit", str),
    "package": ("package", str),
    "voltage": ("operating_voltage", float),
    "pins": ("pin_count", int),
    "datasheet": ("datasheet_link", str),
}


class CategoryNames:
    """Category names offered for completion, refreshed on CATEGORIES_CHANGED."""

    def __init__(self, db: InventoryDB):
        self.db = db
        self.names = []
        self.refresh()
        self.subscription = db.subscribe(Event.CATEGORIES_CHANGED, self.refresh)

    def refresh(self):
        self.names = [c.name for c in self.db.list_categories()]

    def words(self):
        return COMMANDS + self.names

    def close(self):
        self.subscription.cancel()


def print_components(components, threshold: int, warn: bool = True):
    table = [[
        c.id, c.category, c.name, c.quantity, c.describe(),
        "LOW" if warn and c.is_low_stock(threshold) else ""
    ] for c in components]
    headers = ["ID", "Category", "Name", "Qty", "Details", "Stock"]
    print(tabulate(table, headers=headers, tablefmt="github"))


def print_component_info(c: Component):
    rows = [
        ["Name", c.name],
        ["Manufacturer", c.manufacturer],
        ["Category", c.category],
        ["Quantity", c.quantity],
    ]
    if c.kind == ComponentKind.ACTIVE:
        rows += [
            ["Operating voltage", f"{c.params.operating_voltage} V"],
            ["Pins", c.params.pin_count],
            ["Datasheet", c.params.datasheet_link],
        ]
    else:
        rows += [
            ["Value", f"{c.params.formatted_value}{c.params.unit}"],
            ["Package", c.params.package],
        ]
    print(tabulate(rows, tablefmt="github"))


def kind_flags(kind: str):
    if kind not in CATEGORY_KINDS:
        raise ValueError(f"Unknown kind '{kind}', expected one of: {', '.join(CATEGORY_KINDS)}")
    return kind == "passive", kind == "active"


def kind_label(category: Category) -> str:
    return category.kind.value if category.kind else "none"


def prompt_component(db: InventoryDB):
    category = db.get_category_by_name(input("Category: ").strip())
    if category is None:
        print("Unknown category.")
        return None

    component = Component(
        name=input("Name: "),
        manufacturer=input("Manufacturer: "),
        quantity=int(input("Quantity: ")),
        category=category.name,
    )
    if category.kind == ComponentKind.ACTIVE:
        component.params = ActiveFields(
            operating_voltage=float(input("Operating voltage (V): ")),
            pin_count=int(input("Pin count: ")),
            datasheet_link=input("Datasheet link: "),
        )
    elif category.kind == ComponentKind.PASSIVE:
        component.params = PassiveFields(
            value=parse_value(input(f"Value ({category.default_unit}, e.g. 4.7k): ")),
            unit=category.default_unit,
            package=input("Package: "),
        )
    else:
        component.params = PassiveFields(package=input("Package: "))
    return component


def handle_command(db: InventoryDB, command: str, config: AppConfig = None):
    config = config or AppConfig()
    threshold = config.ui.low_stock_threshold
    warn = config.ui.show_low_stock_warnings
    try:
        tokens = shlex.split(command)
        if not tokens:
            return

        cmd = tokens[0].lower()
        args = parse_args(tokens[1:])

        if cmd in ("help", "h"):
            print(HELP_TEXT)

        elif cmd == "f":
            print("Fields:")
            for field in COMMON_FIELDS:
                print(f"- {field}")
            print("Passive: " + ", ".join(PASSIVE_FIELDS))
            print("Active: " + ", ".join(ACTIVE_FIELDS))

        elif cmd == "l":
            components = db.list_components()
            if components:
                print_components(components, threshold, warn)
            else:
                print("No components found.")

        elif cmd == "a":
            component = prompt_component(db)
            if component:
                cid = db.add_component(component)
                print(f"Component added with ID: {cid}")

        elif cmd == "s":
            value = args.get("-v")
            if value and value is not True:
                components = db.search_by_name(value)
                if components:
                    print_components(components, threshold, warn)
                else:
                    print("No results.")
            else:
                print("Please specify search value with -v")

        elif cmd == "lc":
            name = args.get("-c")
            if not name or name is True:
                print("Please specify category with -c")
                return
            components = db.list_by_category(name)
            if components:
                print_components(components, threshold, warn)
            else:
                print("No components in category.")

        elif cmd == "info":
            c = db.get_component(require_int(args, "-id"))
            if c:
                print_component_info(c)
            else:
                print("Component not found.")

        elif cmd == "u":
            comp_id = require_int(args, "-id")
            field = args.get("-f")
            value = args.get("-v")
            component = db.get_component(comp_id)
            if component is None or value is None or value is True:
                print("Invalid ID or field.")
            elif field in COMMON_SETTERS:
                setattr(component, field, COMMON_SETTERS[field](value))
                db.update_component(component)
                print("Updated.")
            elif field in PARAM_SETTERS and hasattr(component.params, PARAM_SETTERS[field][0]):
                attr, convert = PARAM_SETTERS[field]
                setattr(component.params, attr, convert(value))
                db.update_component(component)
                print("Updated.")
            else:
                print("Invalid ID or field.")

        elif cmd == "d":
            db.delete_component(require_int(args, "-id"))
            print("Deleted.")

        elif cmd == "c":
            table = [[
                cat.id, cat.name, kind_label(cat), cat.default_unit,
                "yes" if cat.is_system else "", db.component_count_for_category(cat.name)
            ] for cat in db.list_categories()]
            headers = ["ID", "Name", "Kind", "Unit", "System", "Components"]
            print(tabulate(table, headers=headers, tablefmt="github"))

        elif cmd == "ac":
            name = require_str(args, "-n")
            is_passive, is_active = kind_flags(require_str(args, "-k") if "-k" in args else "none")
            unit = require_str(args, "-u") if "-u" in args else ""
            cid = db.add_category(Category(name=name, is_passive=is_passive,
                                           is_active=is_active, default_unit=unit))
            print(f"Category added with ID: {cid}")

        elif cmd == "ec":
            category = db.get_category(require_int(args, "-id"))
            if category is None:
                print("Category not found.")
                return
            if "-n" in args:
                category.name = require_str(args, "-n")
            if "-k" in args:
                category.is_passive, category.is_active = kind_flags(require_str(args, "-k"))
            if "-u" in args:
                category.default_unit = require_str(args, "-u")
            db.update_category(category)
            print("Updated.")

        elif cmd == "dc":
            cat_id = require_int(args, "-id")
            category = db.get_category(cat_id)
            if category is None:
                print("Category not found.")
                return
            can_delete, count = category_deletion_impact(db, cat_id)
            if not can_delete:
                print(f"'{category.name}' is a system category and cannot be deleted.")
                return
            if count and "-f" not in args:
                confirm = input(f"{count} component(s) will move to Other. Delete? [y/N]: ").strip().lower()
                if confirm != 'y':
                    print("Cancelled.")
                    return
            moved = db.delete_category(cat_id)
            print(f"Deleted. {moved} component(s) moved to Other." if moved else "Deleted.")

        elif cmd == "lw":
            limit = require_int(args, "-t") if "-t" in args else threshold
            components = get_low_stock_components(db, limit)
            if components:
                print_components(components, limit)
            else:
                print("No low-stock components found.")

        elif cmd == "sm":
            summary = get_inventory_summary(db, threshold)
            print(f"Components: {summary['total']} | Units: {summary['units']} | "
                  f"Low stock: {summary['low_stock']}")
            for name, count in summary["categories"].items():
                print(f"- {name}: {count}")

        elif cmd == "x":
            print("Exiting.")
            return "exit"

        else:
            print("Unknown command. Type 'h' for help.")

    except (InventoryError, ValueError) as e:
        print(f"Error: {str(e)}")


def parse_args(tokens: list) -> dict:
    args = {}
    i = 0
    while i < len(tokens):
        if tokens[i].startswith("-") and not tokens[i].startswith("--") and i + 1 < len(tokens):
            args[tokens[i]] = tokens[i + 1]
            i += 2
        else:
            args[tokens[i]] = True
            i += 1
    return args


def require_int(args: dict, key: str) -> int:
    value = args.get(key)
    if value is None or value is True:
        raise ValueError(f"Missing {key} argument")
    return int(value)


def require_str(args: dict, key: str) -> str:
    value = args.get(key)
    if value is None or value is True:
        raise ValueError(f"Missing {key} argument")
    return value


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def repl(config: AppConfig):
    print(f"{config.app.name} {config.app.version} inventory shell. Type 'h' for help.")
    with open_inventory(config) as db:
        names = CategoryNames(db)
        session = PromptSession(
            history=InMemoryHistory(),
            completer=WordCompleter(names.words, ignore_case=True),
        )
        try:
            while True:
                try:
                    lines = session.prompt(">>> ").strip().splitlines()
                    for line in lines:
                        line = line.strip()
                        if not line:
                            continue
                        if handle_command(db, line, config) == "exit":
                            return
                except KeyboardInterrupt:
                    continue
                except EOFError:
                    break
        finally:
            names.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Electronic component inventory shell")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="path to config.json")
    parser.add_argument("--db", help="database file, overrides the config")
    options = parser.parse_args(argv)

    config = load_config(options.config)
    if options.db:
        config.database.path = options.db
    configure_logging(config.logging.level)
    logger.debug("Using database %s", config.database.path)
    repl(config)


if __name__ == "__main__":
    main()
