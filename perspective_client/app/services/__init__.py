"""Services for building and sending analyze requests."""
