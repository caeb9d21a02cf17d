"""Progress state and ETA estimation."""
