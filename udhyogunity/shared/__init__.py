"""Cross-cutting helpers shared by every layer (telemetry, small utilities)."""
