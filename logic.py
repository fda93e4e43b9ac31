from typing import Any, Dict, List, Tuple

from database import InventoryDB
from models import Component


def get_low_stock_components(db: InventoryDB, threshold: int) -> List[Component]:
    """
    Retrieve the components that are below the stock threshold.

    Args:
        db: Instance of InventoryDB
        threshold: Quantity below which a component counts as low stock

    Returns:
        Components ordered by ascending quantity
    """
    return db.list_low_stock(threshold)


def get_inventory_summary(db: InventoryDB, threshold: int) -> Dict[str, Any]:
    """
    Summarize the inventory: totals, low-stock count and components per category.

    Args:
        db: Instance of InventoryDB
        threshold: Low-stock threshold from configuration

    Returns:
        Dictionary with 'total', 'units', 'low_stock' and 'categories'
        (category name -> component count, in category order)
    """
    components = db.list_components()
    per_category = {category.name: 0 for category in db.list_categories()}
    for component in components:
        per_category[component.category] = per_category.get(component.category, 0) + 1

    return {
        "total": len(components),
        "units": sum(c.quantity for c in components),
        "low_stock": sum(1 for c in components if c.is_low_stock(threshold)),
        "categories": per_category,
    }


def category_deletion_impact(db: InventoryDB, category_id: int) -> Tuple[bool, int]:
    """
    Check whether a category can be deleted before asking the user.

    Returns:
        Tuple where:
            - First value is True if the category exists and is not a system category
            - Second value is how many components would move to "Other"
    """
    if not db.can_delete_category(category_id):
        return False, 0
    return True, db.component_count_for_category(category_id)
