"""Program catalog CRUD."""
