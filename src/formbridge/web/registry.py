from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

# public model name -> (mapped class, fields to import by default)
_registry: Dict[str, Tuple[Type[Any], List[str]]] = {}


def form_model(name: str, only_fields: Optional[Sequence[str]] = None):
    """
    Decorator to expose a mapped class through the form endpoints.
    ``only_fields`` limits which fields the form imports.
    """

    def decorator(cls: Type[Any]):
        _registry[name] = (cls, list(only_fields or []))
        return cls

    return decorator


def get_form_model(name: str) -> Optional[Tuple[Type[Any], List[str]]]:
    return _registry.get(name)


def registered_models() -> List[str]:
    return sorted(_registry)
