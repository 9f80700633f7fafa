"""Settings and named policy presets."""
