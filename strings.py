HELP_TEXT = '''
==================== HELP =====================
Components:
  l                            List components (short table)
  a                            Add new component (interactive)
  s -v VAL                     Search components by name
  lc -c CATEGORY               List components of a category
  info -id ID                  Show all details of a component
  u -id ID -f FIELD -v VAL     Update field of component by ID
  d -id ID                     Delete component by ID

Categories:
  c                            List categories with component counts
  ac -n NAME [-k KIND] [-u U]  Add category (KIND: passive, active, none)
  ec -id ID [-n NAME] [-k KIND] [-u U]
                               Edit category
  dc -id ID [-f]               Delete category, components move to Other

Reports & Utilities:
  lw [-t N]                    List low-stock components (default from config)
  sm                           Show inventory summary
  f                            List all updatable component fields
  x                            Exit program
==============================================='''

COMMON_FIELDS = ["name", "manufacturer", "quantity", "category"]
PASSIVE_FIELDS = ["value", "unit", "package"]
ACTIVE_FIELDS = ["voltage", "pins", "datasheet"]

CATEGORY_KINDS = ["passive", "active", "none"]

COMMANDS = ["h", "help", "f", "l", "a", "s", "lc", "info", "u", "d",
            "c", "ac", "ec", "dc", "lw", "sm", "x"]
