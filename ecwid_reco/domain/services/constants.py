# Constants for the related-products engine.
MAX_RECOMMENDATIONS = 3  # Size of every cross-sell, upsell and category list

# Price-tier upsell: candidate must cost at least 20% more than the source
UPSELL_PRICE_MULTIPLIER = 1.2
# ...and strictly more than source + this, so float noise never counts as a step up
MIN_PRICE_DIFFERENCE = 0.01

# Pseudo-category meaning "all products of the store"
DEFAULT_CATEGORY = "default"

# Batch progress is logged / emitted every N items
PROGRESS_EVERY = 10

# Strategy labels reported in ProductRecommendations.strategies
STRATEGY_CROSS_SELL = "cross-sell"                      # order co-occurrence
STRATEGY_CROSS_SELL_FALLBACK = "cross-sell-fallback"    # price-tier upsell used for cross-sell
STRATEGY_CROSS_SELL_CATEGORY = "cross-sell-category-fallback"
STRATEGY_CROSS_SELL_GLOBAL = "cross-sell-global-fallback"
STRATEGY_UPSELL = "upsell"                              # price-tier upsell
STRATEGY_CATEGORY = "category"                          # most expensive in same category
STRATEGY_GLOBAL = "global"                              # most expensive in store
