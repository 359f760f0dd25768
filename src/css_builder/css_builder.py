"""
CSS selector builder for composing simple and compound selectors.

This module provides a fluent builder for CSS simple selectors made of element, id,
class, attribute, pseudo-class and pseudo-element fragments. Fragments are validated as
they are added: they must appear in grammar order and the element, id and pseudo-element
fragments may only occur once. Simple selectors can be joined with combinators into
compound selectors. Rejected fragments are reported via the 'error_found' event before
the corresponding exception is raised.
"""

import logging
from enum import Enum, IntEnum
from typing import (
    Callable,
    Dict,
    Final,
    List,
    Optional,
    Protocol,
    TypedDict,
    Union,
    runtime_checkable,
)

# === Constants ===


class Constants:
    """Centralized constants for error messages and rendering."""

    DUPLICATE_MESSAGE: Final[str] = (
        "Element, id and pseudo-element should not occur more then one time "
        "inside the selector"
    )
    ORDER_MESSAGE: Final[str] = (
        "Selector parts should be arranged in the following order: element, id, "
        "class, attribute, pseudo-class, pseudo-element"
    )
    COMBINATOR_SEPARATOR: Final[str] = " "


class FragmentCategory(IntEnum):
    """Fragment categories of a simple selector, valued by their grammar order."""

    ELEMENT = 0
    ID = 1
    CLASS = 2
    ATTRIBUTE = 3
    PSEUDO_CLASS = 4
    PSEUDO_ELEMENT = 5

    @property
    def prefix(self) -> str:
        """Return the text rendered before a fragment of this category."""
        return _PREFIXES[self]

    @property
    def suffix(self) -> str:
        """Return the text rendered after a fragment of this category."""
        return "]" if self is FragmentCategory.ATTRIBUTE else ""

    @property
    def is_singleton(self) -> bool:
        """Return True if at most one fragment of this category is allowed."""
        return self in (
            FragmentCategory.ELEMENT,
            FragmentCategory.ID,
            FragmentCategory.PSEUDO_ELEMENT,
        )

    @property
    def label(self) -> str:
        """Return the human readable name (e.g., 'pseudo-class')."""
        return self.name.lower().replace("_", "-")


_PREFIXES: Final[Dict[FragmentCategory, str]] = {
    FragmentCategory.ELEMENT: "",
    FragmentCategory.ID: "#",
    FragmentCategory.CLASS: ".",
    FragmentCategory.ATTRIBUTE: "[",
    FragmentCategory.PSEUDO_CLASS: ":",
    FragmentCategory.PSEUDO_ELEMENT: "::",
}


class BuilderEvent(str, Enum):
    """Events dispatched by the selector builder."""

    FRAGMENT_ADDED = "fragment_added"
    ERROR_FOUND = "error_found"
    SELECTOR_RENDERED = "selector_rendered"


# === Errors ===


class SelectorError(Exception):
    """Base class for errors raised while building a selector."""


class DuplicateFragmentError(SelectorError):
    """Raised when an element, id or pseudo-element is supplied twice."""

    def __init__(self, category: FragmentCategory) -> None:
        super().__init__(Constants.DUPLICATE_MESSAGE)
        self.category: FragmentCategory = category


class OutOfOrderError(SelectorError):
    """Raised when a fragment follows a fragment of a later grammar category."""

    def __init__(self, category: FragmentCategory, present: FragmentCategory) -> None:
        super().__init__(Constants.ORDER_MESSAGE)
        self.category: FragmentCategory = category
        self.present: FragmentCategory = present


class InvalidCombinatorError(SelectorError, ValueError):
    """Raised when a combinator symbol is not one of ' ', '>', '+', '~'."""

    def __init__(self, symbol: object) -> None:
        super().__init__(
            f"Invalid combinator {symbol!r}: expected one of "
            f"{', '.join(repr(c.value) for c in Combinator)}"
        )
        self.symbol: object = symbol


# === Protocols ===


@runtime_checkable
class RenderableProtocol(Protocol):
    """Protocol for anything that renders to a selector string."""

    def render(self) -> str:
        """Return the selector text."""
        ...


class EventDispatcherProtocol(Protocol):
    """Protocol for dispatching builder events."""

    def dispatch(self, event: BuilderEvent, *args: object) -> None:
        """
        Dispatch an event to registered handlers.

        Args:
            event: The event being dispatched.
            *args: Arguments passed to every handler.
        """
        ...


# === Combinators ===


class Combinator(Enum):
    """The four CSS combinators."""

    DESCENDANT = " "
    CHILD = ">"
    ADJACENT_SIBLING = "+"
    GENERAL_SIBLING = "~"

    @classmethod
    def from_symbol(cls, symbol: Union["Combinator", str]) -> "Combinator":
        """
        Convert a symbol to a combinator.

        Args:
            symbol: A Combinator or one of the strings ' ', '>', '+', '~'.

        Returns:
            Combinator: The matching combinator.

        Raises:
            InvalidCombinatorError: If the symbol is not a known combinator.
        """
        if isinstance(symbol, cls):
            return symbol
        try:
            return cls(symbol)
        except ValueError:
            raise InvalidCombinatorError(symbol) from None


# === Core Data Structures ===


class SelectorFragmentDict(TypedDict):
    """Typed dictionary for representing the fragments of a simple selector."""

    element: Optional[str]
    id: Optional[str]
    classes: List[str]
    attributes: List[str]
    pseudo_classes: List[str]
    pseudo_element: Optional[str]


class SelectorFragmentSet:
    """Accumulates the fragments of one simple selector."""

    def __init__(
        self,
        dispatcher: Optional[EventDispatcherProtocol] = None,
        clear_on_render: bool = False,
    ) -> None:
        """
        Initialize an empty fragment set.

        Args:
            dispatcher: Receiver for builder events, by default None.
            clear_on_render: Whether render() clears the fragments afterwards, by default False.
        """
        self.element_name: Optional[str] = None
        self.id_name: Optional[str] = None
        self.classes: List[str] = []
        self.attributes: List[str] = []
        self.pseudo_classes: List[str] = []
        self.pseudo_element_name: Optional[str] = None
        self._dispatcher = dispatcher
        self._clear_on_render = clear_on_render
        self._logger: logging.Logger = logging.getLogger(__name__)

    # -- fluent fragment methods --

    def element(self, name: str) -> "SelectorFragmentSet":
        """Set the element (type) selector, e.g. 'div'."""
        return self._add(FragmentCategory.ELEMENT, name)

    def id(self, name: str) -> "SelectorFragmentSet":
        """Set the id selector, rendered as '#name'."""
        return self._add(FragmentCategory.ID, name)

    def class_(self, name: str) -> "SelectorFragmentSet":
        """Append a class selector, rendered as '.name'."""
        return self._add(FragmentCategory.CLASS, name)

    def attribute(self, raw: str) -> "SelectorFragmentSet":
        """Append a raw attribute selector, e.g. 'href$=".png"'."""
        return self._add(FragmentCategory.ATTRIBUTE, raw)

    def pseudo_class(self, name: str) -> "SelectorFragmentSet":
        """Append a pseudo-class, rendered as ':name'."""
        return self._add(FragmentCategory.PSEUDO_CLASS, name)

    def pseudo_element(self, name: str) -> "SelectorFragmentSet":
        """Set the pseudo-element, rendered as '::name'."""
        return self._add(FragmentCategory.PSEUDO_ELEMENT, name)

    klass = class_
    attr = attribute

    def combine(
        self, symbol: Union[Combinator, str], right: RenderableProtocol
    ) -> "CompoundSelector":
        """Join this selector with another one using a combinator."""
        return CompoundSelector(self, symbol, right)

    # -- state --

    def _values(self, category: FragmentCategory) -> List[str]:
        """
        Return the fragments recorded for a category, in insertion order.

        Args:
            category: The category to look up.

        Returns:
            List[str]: The recorded fragments (at most one for singletons).
            Empty element, id and pseudo-element names count as absent.
        """
        if category is FragmentCategory.ELEMENT:
            return [self.element_name] if self.element_name else []
        if category is FragmentCategory.ID:
            return [self.id_name] if self.id_name else []
        if category is FragmentCategory.CLASS:
            return self.classes
        if category is FragmentCategory.ATTRIBUTE:
            return self.attributes
        if category is FragmentCategory.PSEUDO_CLASS:
            return self.pseudo_classes
        return [self.pseudo_element_name] if self.pseudo_element_name else []

    def highest_category(self) -> Optional[FragmentCategory]:
        """
        Return the latest grammar category that already holds a fragment.

        Returns:
            Optional[FragmentCategory]: The category, or None if the set is empty.
        """
        for category in reversed(FragmentCategory):
            if self._values(category):
                return category
        return None

    def is_empty(self) -> bool:
        """Return True if no fragment has been added."""
        return self.highest_category() is None

    def _check(self, category: FragmentCategory) -> Optional[SelectorError]:
        if category.is_singleton and self._values(category):
            return DuplicateFragmentError(category)
        present = self.highest_category()
        if present is not None and present > category:
            return OutOfOrderError(category, present)
        return None

    def _add(self, category: FragmentCategory, value: str) -> "SelectorFragmentSet":
        """
        Validate and record a fragment.

        Args:
            category: The category of the fragment.
            value: The fragment text.

        Returns:
            SelectorFragmentSet: This set, for chaining.

        Raises:
            DuplicateFragmentError: If a singleton category is already set.
            OutOfOrderError: If a fragment of a later category is already present.
        """
        error = self._check(category)
        if error is not None:
            message = f"Cannot add {category.label} '{value}': {error}"
            self._logger.warning(f"Error: {message}")
            if self._dispatcher:
                self._dispatcher.dispatch(BuilderEvent.ERROR_FOUND, message)
            raise error

        if category is FragmentCategory.ELEMENT:
            self.element_name = value
        elif category is FragmentCategory.ID:
            self.id_name = value
        elif category is FragmentCategory.PSEUDO_ELEMENT:
            self.pseudo_element_name = value
        else:
            self._values(category).append(value)

        self._logger.debug(f"Added {category.label} fragment: {value}")
        if self._dispatcher:
            self._dispatcher.dispatch(BuilderEvent.FRAGMENT_ADDED, self, category, value)
        return self

    def clear(self) -> None:
        """Remove every fragment from the set."""
        self.element_name = None
        self.id_name = None
        self.classes = []
        self.attributes = []
        self.pseudo_classes = []
        self.pseudo_element_name = None

    # -- output --

    def _text(self) -> str:
        return "".join(
            f"{category.prefix}{value}{category.suffix}"
            for category in FragmentCategory
            for value in self._values(category)
        )

    def render(self) -> str:
        """
        Render the fragments in grammar order.

        Returns:
            str: The selector text, e.g. 'a#main.nav[href]:hover::after'.
        """
        result = self._text()
        if self._clear_on_render:
            self.clear()
        self._logger.debug(f"Rendered selector: {result}")
        if self._dispatcher:
            self._dispatcher.dispatch(BuilderEvent.SELECTOR_RENDERED, result)
        return result

    def to_dict(self) -> SelectorFragmentDict:
        """Convert the fragment set to a dictionary."""
        return {
            "element": self.element_name,
            "id": self.id_name,
            "classes": list(self.classes),
            "attributes": list(self.attributes),
            "pseudo_classes": list(self.pseudo_classes),
            "pseudo_element": self.pseudo_element_name,
        }

    @classmethod
    def from_dict(cls, data: SelectorFragmentDict) -> "SelectorFragmentSet":
        """
        Rebuild a fragment set from its dictionary form.

        Fragments are replayed in grammar order through the fluent methods, so the
        usual duplicate and order checks apply.

        Args:
            data: A mapping shaped like the output of to_dict(); missing keys are empty.

        Returns:
            SelectorFragmentSet: A new, unbound fragment set.
        """
        fragments = cls()
        if data.get("element"):
            fragments.element(data["element"])
        if data.get("id"):
            fragments.id(data["id"])
        for name in data.get("classes") or []:
            fragments.class_(name)
        for raw in data.get("attributes") or []:
            fragments.attribute(raw)
        for name in data.get("pseudo_classes") or []:
            fragments.pseudo_class(name)
        if data.get("pseudo_element"):
            fragments.pseudo_element(data["pseudo_element"])
        return fragments

    def __str__(self) -> str:
        """Return the selector text without clearing, even when clear_on_render is set."""
        return self._text()

    def __repr__(self) -> str:
        """Return a string representation of the fragment set."""
        return f"SelectorFragmentSet({self.to_dict()})"

    def __eq__(self, other: object) -> bool:
        """
        Compare this fragment set with another for equality.

        Args:
            other: Another object to compare with.

        Returns:
            True if both sets hold the same fragments, else False.
        """
        if not isinstance(other, SelectorFragmentSet):
            return False
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        """Compute a hash for the fragment set based on its fragments."""
        return hash(
            (
                self.element_name,
                self.id_name,
                tuple(self.classes),
                tuple(self.attributes),
                tuple(self.pseudo_classes),
                self.pseudo_element_name,
            )
        )


class CompoundSelector:
    """Two renderable selectors joined by a combinator."""

    def __init__(
        self,
        left: RenderableProtocol,
        combinator: Union[Combinator, str],
        right: RenderableProtocol,
    ) -> None:
        """
        Initialize a compound selector.

        Args:
            left: The selector on the left of the combinator.
            combinator: A Combinator or one of ' ', '>', '+', '~'.
            right: The selector on the right of the combinator.

        Raises:
            InvalidCombinatorError: If the combinator is not a known symbol.
            TypeError: If either side does not provide render().
        """
        for side in (left, right):
            if not isinstance(side, RenderableProtocol):
                raise TypeError(
                    f"Cannot combine {type(side).__name__}: render() is required"
                )
        self._left = left
        self._combinator = Combinator.from_symbol(combinator)
        self._right = right

    @property
    def left(self) -> RenderableProtocol:
        return self._left

    @property
    def combinator(self) -> Combinator:
        return self._combinator

    @property
    def right(self) -> RenderableProtocol:
        return self._right

    def render(self) -> str:
        """
        Render both sides and join them with the padded combinator symbol.

        Returns:
            str: The compound selector text, e.g. 'div > p'.
        """
        sep = Constants.COMBINATOR_SEPARATOR
        return (
            f"{self._left.render()}{sep}{self._combinator.value}{sep}"
            f"{self._right.render()}"
        )

    def combine(
        self, symbol: Union[Combinator, str], right: RenderableProtocol
    ) -> "CompoundSelector":
        """Join this compound selector with another selector."""
        return CompoundSelector(self, symbol, right)

    def __str__(self) -> str:
        """Return the selector text; fragment sets on either side are not cleared."""
        sep = Constants.COMBINATOR_SEPARATOR
        return (
            f"{_side_text(self._left)}{sep}{self._combinator.value}{sep}"
            f"{_side_text(self._right)}"
        )

    def __repr__(self) -> str:
        """Return a string representation of the compound selector."""
        return (
            f"CompoundSelector({self._left!r}, {self._combinator.value!r}, "
            f"{self._right!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompoundSelector):
            return False
        return (self._left, self._combinator, self._right) == (
            other._left,
            other._combinator,
            other._right,
        )

    def __hash__(self) -> int:
        """Compute a hash for the compound selector based on both sides and the combinator."""
        return hash((self._left, self._combinator, self._right))


def _side_text(side: RenderableProtocol) -> str:
    if isinstance(side, (SelectorFragmentSet, CompoundSelector)):
        return str(side)
    return side.render()


# === Main Builder ===


class SelectorBuilder:
    """Facade that starts a new selector chain for every fragment call."""

    def __init__(self, clear_on_render: bool = False) -> None:
        """
        Initialize the selector builder.

        Args:
            clear_on_render: Whether rendered fragment sets are cleared afterwards, by default False.
        """
        self._clear_on_render = clear_on_render
        self._event_handlers: Dict[str, List[Callable[..., None]]] = {
            event.value: [] for event in BuilderEvent
        }
        self._logger: logging.Logger = logging.getLogger(__name__)

    def on(self, event: Union[BuilderEvent, str], handler: Callable[..., None]) -> None:
        """
        Register an event handler for builder events.

        Args:
            event: The event to listen for ('fragment_added', 'error_found', 'selector_rendered').
            handler: The function to call when the event occurs.
        """
        key = event.value if isinstance(event, BuilderEvent) else event
        if key in self._event_handlers:
            self._event_handlers[key].append(handler)
            self._logger.debug(f"Registered handler for event: {key}")

    def dispatch(self, event: BuilderEvent, *args: object) -> None:
        """
        Dispatch an event to registered handlers.

        Args:
            event: The event being dispatched.
            *args: Arguments passed to every handler.
        """
        for handler in self._event_handlers[event.value]:
            handler(*args)

    def new_selector(self) -> SelectorFragmentSet:
        """Return an empty fragment set bound to this builder."""
        return SelectorFragmentSet(self, self._clear_on_render)

    def element(self, name: str) -> SelectorFragmentSet:
        return self.new_selector().element(name)

    def id(self, name: str) -> SelectorFragmentSet:
        return self.new_selector().id(name)

    def class_(self, name: str) -> SelectorFragmentSet:
        return self.new_selector().class_(name)

    def attribute(self, raw: str) -> SelectorFragmentSet:
        return self.new_selector().attribute(raw)

    def pseudo_class(self, name: str) -> SelectorFragmentSet:
        return self.new_selector().pseudo_class(name)

    def pseudo_element(self, name: str) -> SelectorFragmentSet:
        return self.new_selector().pseudo_element(name)

    klass = class_
    attr = attribute

    def combine(
        self,
        left: RenderableProtocol,
        symbol: Union[Combinator, str],
        right: RenderableProtocol,
    ) -> CompoundSelector:
        """
        Compose two selectors with a combinator.

        Args:
            left: The selector on the left.
            symbol: A Combinator or one of ' ', '>', '+', '~'.
            right: The selector on the right.

        Returns:
            CompoundSelector: The composed selector.
        """
        try:
            compound = CompoundSelector(left, symbol, right)
        except InvalidCombinatorError as e:
            self._logger.warning(f"Error: {e}")
            self.dispatch(BuilderEvent.ERROR_FOUND, str(e))
            raise
        self._logger.debug(f"Combined selectors with {compound.combinator.name}")
        return compound

    def __repr__(self) -> str:
        return f"SelectorBuilder(clear_on_render={self._clear_on_render})"


# 'class' is a keyword, so builder.class('x') is spelled getattr(builder, 'class')('x').
setattr(SelectorFragmentSet, "class", SelectorFragmentSet.class_)
setattr(SelectorBuilder, "class", SelectorBuilder.class_)

selector_builder: Final[SelectorBuilder] = SelectorBuilder()
