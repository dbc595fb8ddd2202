"""Voice command parsing: normalize, match, resolve, dispatch."""
