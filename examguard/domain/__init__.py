"""Domain layer: session models, violation bookkeeping and errors."""
