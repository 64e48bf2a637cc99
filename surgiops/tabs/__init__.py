"""Per-tab state controllers built on the service layer."""
