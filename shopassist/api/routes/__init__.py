"""Route modules for the ShopAssist proxy."""
