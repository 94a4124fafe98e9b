"""Small pure helpers shared by the catalog, cart and admin layers."""
