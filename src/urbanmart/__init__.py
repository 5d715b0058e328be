"""UrbanMart marketplace: orders, delivery dispatch and delivery organizations."""
