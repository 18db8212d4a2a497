"""Game configuration constants and fixed storage widths."""

# Grid dimensions
GRID_SIZE = 10

# Fleet configuration (ship order is part of the board encoding)
SHIP_LENGTHS = (5, 4, 3, 3, 2)
NUM_SHIPS = len(SHIP_LENGTHS)
TOTAL_SHIP_CELLS = sum(SHIP_LENGTHS)  # 17 hits sink the whole fleet

# Bit widths of the persisted encodings
SHIP_FIELD_BITS = 8  # each of x, y, orientation
BOARD_BITS = NUM_SHIPS * 3 * SHIP_FIELD_BITS  # 120
SHOT_COORD_BITS = 4
SHOT_BITS = 2 * SHOT_COORD_BITS  # 8
HIT_COUNT_BITS = 5
HIT_COUNTS_BITS = 2 * HIT_COUNT_BITS  # 10
HIT_TARGET_BITS = 7
HIT_LOG_BITS = TOTAL_SHIP_CELLS * HIT_TARGET_BITS  # 119
HIT_HISTORY_BITS = HIT_COUNTS_BITS + 2 * HIT_LOG_BITS  # 248

# Off-channel history trees
TREE_DEPTH = 8
TREE_LEAVES = 2**TREE_DEPTH  # 256

# Player slots
HOST = 0
JOINER = 1
