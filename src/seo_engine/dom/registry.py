# src/seo_engine/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, Callable, Optional, Type

from .core import ElementBase, ElementDefinition

logger = logging.getLogger(__name__)

ELEMENTS_PACKAGE = "seo_engine.dom.elements"


class DOMRegistry:
    """
    Central registry for specialized DOM element models and their parsers.

    Dynamically discovers ElementDefinition modules from the
    'seo_engine.dom.elements' package. Discovery runs once per process; after
    that the registry is read-only.
    """

    _parsers: Dict[str, Callable] = {}
    _models: Dict[str, Type[ElementBase]] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Registers all element definitions found in the elements package.

        Every module exposing a `DEFINITION` attribute (an `ElementDefinition`)
        contributes a parser for each of its tag names.
        """
        if cls._loaded:
            return

        elements_pkg = importlib.import_module(ELEMENTS_PACKAGE)

        for _, name, _ in pkgutil.iter_modules(elements_pkg.__path__):
            module = importlib.import_module(f"{ELEMENTS_PACKAGE}.{name}")
            defn = getattr(module, "DEFINITION", None)
            if not isinstance(defn, ElementDefinition):
                continue

            for tag_name in defn.tag_names:
                cls._parsers[tag_name] = defn.parser
                cls._models[tag_name] = defn.model

            logger.debug("Element definition loaded: %s", ", ".join(sorted(defn.tag_names)))

        cls._loaded = True

    @classmethod
    def get_parser(cls, tag_name: str) -> Optional[Callable]:
        """Retrieves the parser function for a specific HTML tag."""
        return cls._parsers.get(tag_name)

    @classmethod
    def get_model(cls, tag_name: str) -> Type[ElementBase]:
        """Returns the element model for a tag, ElementBase for generic tags."""
        return cls._models.get(tag_name, ElementBase)

    @classmethod
    def registered_tags(cls):
        return sorted(cls._parsers)
