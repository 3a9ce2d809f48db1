"""SolarWatch - Historical solar events timeline with an admin panel."""
