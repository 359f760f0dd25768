"""
Plain object helpers: a rectangle factory and a JSON bridge.

``deserialize`` rebuilds an instance of a given class from JSON text without calling the
class initializer: methods come from the class, fields are copied from the parsed object.
Classes with a ``from_dict`` classmethod are rebuilt through it instead.
"""

import json
import logging
from typing import Any, Dict, Type, TypedDict, TypeVar, Union

T = TypeVar("T")

Number = Union[int, float]

_logger: logging.Logger = logging.getLogger(__name__)


class RectangleDict(TypedDict):
    """Typed dictionary for representing a rectangle."""

    width: Number
    height: Number


class Rectangle:
    """A rectangle with a width, a height and an area."""

    def __init__(self, width: Number, height: Number) -> None:
        """
        Initialize a rectangle.

        Args:
            width: The rectangle width.
            height: The rectangle height.
        """
        self.width: Number = width
        self.height: Number = height

    def area(self) -> Number:
        """Return width * height."""
        return self.width * self.height

    def to_dict(self) -> RectangleDict:
        """Convert the rectangle to a dictionary."""
        return {"width": self.width, "height": self.height}

    def __repr__(self) -> str:
        return f"Rectangle(width={self.width}, height={self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rectangle):
            return False
        return (self.width, self.height) == (other.width, other.height)

    def __hash__(self) -> int:
        return hash((self.width, self.height))


def rectangle(width: Number, height: Number) -> Rectangle:
    """
    Create a rectangle.

    Args:
        width: The rectangle width.
        height: The rectangle height.

    Returns:
        Rectangle: The new rectangle, e.g. rectangle(10, 20).area() == 200.
    """
    return Rectangle(width, height)


def _own_fields(value: Any) -> Dict[str, Any]:
    """Return the JSON-ready fields of an object the json module cannot encode."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    try:
        return dict(vars(value))
    except TypeError:
        raise TypeError(
            f"Object of type {type(value).__name__} is not JSON serializable"
        ) from None


def serialize(value: Any, **kwargs: Any) -> str:
    """
    Serialize a value to JSON text.

    Args:
        value: The value to serialize. Objects are encoded via to_dict() if they
            define it, otherwise via their instance fields.
        **kwargs: Extra keyword arguments for json.dumps (e.g. sort_keys=True).

    Returns:
        str: Compact JSON text unless 'indent' or 'separators' is given.
    """
    if "indent" not in kwargs:
        kwargs.setdefault("separators", (",", ":"))
    kwargs.setdefault("default", _own_fields)
    text = json.dumps(value, **kwargs)
    _logger.debug(f"Serialized {type(value).__name__}: {text}")
    return text


def deserialize(capabilities: Type[T], text: str) -> T:
    """
    Build an instance of a class from a JSON object.

    Args:
        capabilities: The class providing the instance's methods.
        text: JSON text holding an object whose keys become instance fields.
            Classes that define a from_dict() classmethod are rebuilt through it.

    Returns:
        T: A new instance of 'capabilities' carrying the parsed fields.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
        TypeError: If the JSON value is not an object.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError(
            f"Expected a JSON object for {capabilities.__name__}, "
            f"got {type(data).__name__}"
        )
    from_dict = getattr(capabilities, "from_dict", None)
    if callable(from_dict):
        _logger.debug(f"Deserializing {capabilities.__name__} via from_dict()")
        return from_dict(data)
    instance = capabilities.__new__(capabilities)
    for name, value in data.items():
        setattr(instance, name, value)
    _logger.debug(f"Deserialized {capabilities.__name__} with fields: {list(data)}")
    return instance
