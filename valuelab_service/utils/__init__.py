from valuelab_service.utils.json import sanitize_for_json

__all__ = ["sanitize_for_json"]
