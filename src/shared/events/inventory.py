"""Event type names published by the Inventory context.

No other context consumes these yet; the names are listed so that
subscribers and operators refer to the same strings.
"""

INVENTORY_CREATED = "InventoryCreated"
INVENTORY_INCREASED = "InventoryIncreased"
INVENTORY_DECREASED = "InventoryDecreased"
INVENTORY_LOW_STOCK = "InventoryLowStock"
INVENTORY_OUT_OF_STOCK = "InventoryOutOfStock"
