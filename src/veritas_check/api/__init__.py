from veritas_check.api.app import app

__all__ = ["app"]
