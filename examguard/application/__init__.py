"""Application layer: ports to the outside world and the monitoring services."""
