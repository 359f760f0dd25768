import logging

from css_builder import (
    BuilderEvent,
    Combinator,
    Rectangle,
    SelectorBuilder,
    SelectorError,
    deserialize,
    rectangle,
    serialize,
)


def on_error_found(error: str) -> None:
    """
    Callback for when the builder rejects a fragment.

    Args:
        error (str): The error message.
    """
    print(f"Selector error: {error}")


def main() -> None:
    """Build a few selectors and round-trip a rectangle through JSON."""
    logging.basicConfig(level=logging.INFO)

    builder = SelectorBuilder()
    builder.on(BuilderEvent.ERROR_FOUND, on_error_found)

    print(builder.id("main").class_("container").class_("editable").render())
    print(builder.element("a").attribute('href$=".png"').pseudo_class("focus").render())

    rows = builder.combine(
        builder.element("tr").pseudo_class("nth-of-type(even)"),
        Combinator.DESCENDANT,
        builder.element("td").pseudo_class("nth-of-type(even)"),
    )
    table = builder.combine(builder.element("table").id("data"), "~", rows)
    print(
        builder.combine(
            builder.element("div").id("main").class_("container").class_("draggable"),
            "+",
            table,
        ).render()
    )

    try:
        builder.class_("a").element("div")
    except SelectorError as e:
        print(f"Rejected: {type(e).__name__}")

    text = serialize(rectangle(10, 20))
    print(text, deserialize(Rectangle, text).area())


if __name__ == "__main__":
    main()
