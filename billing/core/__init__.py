"""Domain core: exception hierarchy and the records the rollup engine works on."""
