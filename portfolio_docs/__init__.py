"""Document hierarchy service for portfolio companies."""
