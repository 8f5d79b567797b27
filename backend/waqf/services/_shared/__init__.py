"""Building blocks shared by every service (errors, base class, ports)."""
