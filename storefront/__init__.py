"""ProMonitor storefront: catalog, cart, checkout and admin back-office."""
