from app.services.catalog import REALM_ORDER, REALMS, get_realm, successor_of

__all__ = ["REALM_ORDER", "REALMS", "get_realm", "successor_of"]
