from .css_builder import (
    BuilderEvent,
    Combinator,
    CompoundSelector,
    DuplicateFragmentError,
    FragmentCategory,
    InvalidCombinatorError,
    OutOfOrderError,
    RenderableProtocol,
    SelectorBuilder,
    SelectorError,
    SelectorFragmentDict,
    SelectorFragmentSet,
    selector_builder,
)
from .objects import Rectangle, RectangleDict, deserialize, rectangle, serialize

__version__ = "0.1.0"

__all__ = [
    "BuilderEvent",
    "Combinator",
    "CompoundSelector",
    "DuplicateFragmentError",
    "FragmentCategory",
    "InvalidCombinatorError",
    "OutOfOrderError",
    "Rectangle",
    "RectangleDict",
    "RenderableProtocol",
    "SelectorBuilder",
    "SelectorError",
    "SelectorFragmentDict",
    "SelectorFragmentSet",
    "deserialize",
    "rectangle",
    "selector_builder",
    "serialize",
]
