"""Engine-agnostic building blocks: data types, events and configuration."""
