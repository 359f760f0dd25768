import logging
import os
import sys
import unittest
from typing import List
from unittest.mock import Mock

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))
from css_builder import (
    BuilderEvent,
    Combinator,
    CompoundSelector,
    DuplicateFragmentError,
    FragmentCategory,
    InvalidCombinatorError,
    OutOfOrderError,
    SelectorBuilder,
    SelectorError,
    SelectorFragmentSet,
    selector_builder,
)

logging.basicConfig(level=logging.DEBUG)


class TestSelectorBuilderRendering(unittest.TestCase):
    def setUp(self) -> None:
        """
        Set up the test environment for rendering tests.
        """
        self.builder: SelectorBuilder = SelectorBuilder()

    def test_id_and_classes(self) -> None:
        """
        Test an id followed by two classes.
        """
        result: str = (
            self.builder.id("main").class_("container").class_("editable").render()
        )
        self.assertEqual(result, "#main.container.editable")

    def test_element_attribute_pseudo_class(self) -> None:
        """
        Test an element with an attribute selector and a pseudo-class.
        """
        result: str = (
            self.builder.element("a")
            .attribute('href$=".png"')
            .pseudo_class("focus")
            .render()
        )
        self.assertEqual(result, 'a[href$=".png"]:focus')

    def test_all_fragments_in_grammar_order(self) -> None:
        """
        Test every fragment category rendered with its separator.
        """
        result: str = (
            self.builder.element("li")
            .id("first")
            .class_("item")
            .class_("active")
            .attribute("data-x")
            .attribute('lang|="en"')
            .pseudo_class("hover")
            .pseudo_class("first-child")
            .pseudo_element("before")
            .render()
        )
        self.assertEqual(
            result,
            'li#first.item.active[data-x][lang|="en"]:hover:first-child::before',
        )

    def test_repeated_class_is_kept(self) -> None:
        """
        Test that duplicate classes are allowed and rendered twice.
        """
        result: str = self.builder.class_("a").class_("a").render()
        self.assertEqual(result, ".a.a")

    def test_single_fragment_chains(self) -> None:
        """
        Test chains started from each fragment category.
        """
        self.assertEqual(self.builder.element("p").render(), "p")
        self.assertEqual(self.builder.id("x").render(), "#x")
        self.assertEqual(self.builder.attribute("href").render(), "[href]")
        self.assertEqual(self.builder.pseudo_class("root").render(), ":root")
        self.assertEqual(self.builder.pseudo_element("selection").render(), "::selection")

    def test_aliases(self) -> None:
        """
        Test the 'class', 'klass' and 'attr' spellings.
        """
        chain: SelectorFragmentSet = getattr(self.builder, "class")("a")
        chain = getattr(chain, "class")("b").klass("c").attr("title")
        self.assertEqual(chain.render(), ".a.b.c[title]")

    def test_render_is_repeatable(self) -> None:
        """
        Test that render() does not clear fragments by default.
        """
        chain: SelectorFragmentSet = self.builder.element("div").class_("box")
        self.assertEqual(chain.render(), "div.box")
        self.assertEqual(chain.render(), "div.box", "Second render should match")
        self.assertEqual(str(chain), "div.box")

    def test_clear_on_render(self) -> None:
        """
        Test that clear_on_render empties the fragment set after rendering.
        """
        builder: SelectorBuilder = SelectorBuilder(clear_on_render=True)
        chain: SelectorFragmentSet = builder.element("div").id("main")
        self.assertEqual(chain.render(), "div#main")
        self.assertEqual(chain.render(), "", "Second render should be empty")
        self.assertTrue(chain.is_empty())
        self.assertEqual(chain.element("span").render(), "span")

    def test_str_does_not_clear(self) -> None:
        """
        Test that str() leaves the fragments in place under clear_on_render.
        """
        builder: SelectorBuilder = SelectorBuilder(clear_on_render=True)
        chain: SelectorFragmentSet = builder.element("p").class_("note")
        self.assertEqual(str(chain), "p.note")
        self.assertEqual(f"{chain}", "p.note")
        compound: CompoundSelector = builder.combine(chain, ">", builder.element("em"))
        self.assertEqual(str(compound), "p.note > em")
        self.assertEqual(chain.render(), "p.note", "render() should still see fragments")
        self.assertEqual(chain.render(), "")

    def test_from_dict(self) -> None:
        """
        Test rebuilding a fragment set from its dictionary form.
        """
        chain: SelectorFragmentSet = (
            self.builder.element("a").id("home").attribute("href").pseudo_element("after")
        )
        rebuilt: SelectorFragmentSet = SelectorFragmentSet.from_dict(chain.to_dict())
        self.assertEqual(rebuilt, chain)
        self.assertEqual(rebuilt.render(), "a#home[href]::after")
        self.assertEqual(SelectorFragmentSet.from_dict({"classes": ["x"]}).render(), ".x")

    def test_independent_chains(self) -> None:
        """
        Test that chains started from the same builder do not share fragments.
        """
        first: SelectorFragmentSet = self.builder.element("div")
        second: SelectorFragmentSet = self.builder.element("span")
        first.class_("one")
        self.assertEqual(second.render(), "span")
        self.assertEqual(first.render(), "div.one")
        self.assertIsNot(first, second)

    def test_module_builder(self) -> None:
        """
        Test the module-level default builder.
        """
        self.assertEqual(selector_builder.element("ul").render(), "ul")
        self.assertEqual(selector_builder.element("ol").render(), "ol")

    def test_to_dict(self) -> None:
        """
        Test the dictionary form of a fragment set.
        """
        chain: SelectorFragmentSet = (
            self.builder.element("a").class_("x").pseudo_class("hover")
        )
        self.assertEqual(
            chain.to_dict(),
            {
                "element": "a",
                "id": None,
                "classes": ["x"],
                "attributes": [],
                "pseudo_classes": ["hover"],
                "pseudo_element": None,
            },
        )
        self.assertEqual(chain, self.builder.element("a").class_("x").pseudo_class("hover"))
        self.assertNotEqual(chain, self.builder.element("a"))
        self.assertEqual(chain.highest_category(), FragmentCategory.PSEUDO_CLASS)


class TestSelectorBuilderValidation(unittest.TestCase):
    def setUp(self) -> None:
        """
        Set up the test environment for validation tests.
        """
        self.builder: SelectorBuilder = SelectorBuilder()

    def test_duplicate_id(self) -> None:
        """
        Test that a second id raises DuplicateFragmentError.
        """
        chain: SelectorFragmentSet = self.builder.element("div").id("main")
        with self.assertRaises(DuplicateFragmentError) as ctx:
            chain.id("x")
        self.assertEqual(ctx.exception.category, FragmentCategory.ID)
        self.assertIn("should not occur more then one time", str(ctx.exception))

    def test_duplicate_element(self) -> None:
        """
        Test that a second element raises DuplicateFragmentError.
        """
        with self.assertRaises(DuplicateFragmentError):
            self.builder.element("div").element("span")

    def test_duplicate_pseudo_element(self) -> None:
        """
        Test that a second pseudo-element raises DuplicateFragmentError.
        """
        with self.assertRaises(DuplicateFragmentError):
            self.builder.pseudo_element("before").pseudo_element("after")

    def test_element_after_class(self) -> None:
        """
        Test that an element after a class raises OutOfOrderError.
        """
        with self.assertRaises(OutOfOrderError) as ctx:
            self.builder.class_("a").element("div")
        self.assertEqual(ctx.exception.category, FragmentCategory.ELEMENT)
        self.assertEqual(ctx.exception.present, FragmentCategory.CLASS)
        self.assertIn("arranged in the following order", str(ctx.exception))

    def test_id_after_class(self) -> None:
        """
        Test that an id after a class raises OutOfOrderError.
        """
        with self.assertRaises(OutOfOrderError):
            self.builder.class_("a").id("main")

    def test_order_violations(self) -> None:
        """
        Test every fragment added after a strictly later category.
        """
        cases = [
            (lambda: self.builder.id("x").element("a")),
            (lambda: self.builder.attribute("href").class_("a")),
            (lambda: self.builder.pseudo_class("hover").attribute("href")),
            (lambda: self.builder.pseudo_element("after").pseudo_class("hover")),
            (lambda: self.builder.pseudo_element("after").element("a")),
        ]
        for case in cases:
            with self.subTest(case=case):
                with self.assertRaises(OutOfOrderError):
                    case()

    def test_empty_names_are_absent(self) -> None:
        """
        Test that empty element, id and pseudo-element names do not count as set.
        """
        self.assertEqual(self.builder.element("").element("div").render(), "div")
        self.assertEqual(self.builder.id("").element("a").render(), "a")
        self.assertEqual(
            self.builder.pseudo_element("").pseudo_class("hover").render(), ":hover"
        )
        self.assertTrue(self.builder.element("").is_empty())

    def test_duplicate_takes_precedence(self) -> None:
        """
        Test that a repeated id after a class reports the duplicate.
        """
        with self.assertRaises(DuplicateFragmentError):
            self.builder.id("a").class_("b").id("c")

    def test_errors_share_base_class(self) -> None:
        """
        Test that builder errors derive from SelectorError.
        """
        with self.assertRaises(SelectorError):
            self.builder.pseudo_class("hover").class_("a")


class TestSelectorCombination(unittest.TestCase):
    def setUp(self) -> None:
        """
        Set up the test environment for combination tests.
        """
        self.builder: SelectorBuilder = SelectorBuilder()

    def test_nested_combine(self) -> None:
        """
        Test three nested combinations, including the descendant combinator.
        """
        b = self.builder
        result: str = b.combine(
            b.element("div").id("main").class_("container").class_("draggable"),
            "+",
            b.combine(
                b.element("table").id("data"),
                "~",
                b.combine(
                    b.element("tr").pseudo_class("nth-of-type(even)"),
                    " ",
                    b.element("td").pseudo_class("nth-of-type(even)"),
                ),
            ),
        ).render()
        self.assertEqual(
            result,
            "div#main.container.draggable + table#data ~ "
            "tr:nth-of-type(even)   td:nth-of-type(even)",
        )

    def test_combination_law(self) -> None:
        """
        Test that a combination renders as left + ' + ' + right.
        """
        left: SelectorFragmentSet = self.builder.element("h1")
        right: SelectorFragmentSet = self.builder.element("p").class_("lead")
        expected: str = left.render() + " + " + right.render()
        self.assertEqual(self.builder.combine(left, "+", right).render(), expected)

    def test_combinator_enum(self) -> None:
        """
        Test combining with Combinator members and the fluent combine().
        """
        compound: CompoundSelector = self.builder.element("ul").combine(
            Combinator.CHILD, self.builder.element("li")
        )
        self.assertEqual(compound.render(), "ul > li")
        self.assertEqual(compound.combinator, Combinator.CHILD)
        chained: CompoundSelector = compound.combine("~", self.builder.class_("x"))
        self.assertEqual(str(chained), "ul > li ~ .x")

    def test_invalid_combinator(self) -> None:
        """
        Test that an unknown combinator symbol is rejected.
        """
        with self.assertRaises(InvalidCombinatorError):
            self.builder.combine(self.builder.element("a"), "|", self.builder.element("b"))
        with self.assertRaises(ValueError):
            Combinator.from_symbol(">>")

    def test_combine_requires_render(self) -> None:
        """
        Test that both sides must provide render().
        """
        with self.assertRaises(TypeError):
            self.builder.combine("div", ">", self.builder.element("p"))

    def test_selectors_are_hashable(self) -> None:
        """
        Test that equal selectors hash equally and can be stored in sets.
        """
        first: CompoundSelector = self.builder.combine(
            self.builder.element("ul"), ">", self.builder.element("li")
        )
        second: CompoundSelector = self.builder.combine(
            self.builder.element("ul"), ">", self.builder.element("li")
        )
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(len({first, second}), 1)
        self.assertEqual(
            len({self.builder.class_("a"), self.builder.class_("a"), self.builder.class_("b")}),
            2,
        )

    def test_combine_any_renderable(self) -> None:
        """
        Test combining arbitrary objects that provide render().
        """
        left: Mock = Mock()
        left.render.return_value = "nav"
        compound: CompoundSelector = self.builder.combine(left, " ", self.builder.element("a"))
        self.assertEqual(compound.render(), "nav   a")
        left.render.assert_called_once_with()


class TestSelectorBuilderEvents(unittest.TestCase):
    def setUp(self) -> None:
        """
        Set up the test environment for event tests.
        """
        self.builder: SelectorBuilder = SelectorBuilder()

    def test_event_fragment_added(self) -> None:
        """
        Test the fragment_added event.
        """
        added: List[FragmentCategory] = []
        self.builder.on(
            "fragment_added", lambda fragments, category, value: added.append(category)
        )
        self.builder.element("a").class_("b")
        self.assertEqual(added, [FragmentCategory.ELEMENT, FragmentCategory.CLASS])

    def test_event_error_found(self) -> None:
        """
        Test that error_found is dispatched before the error is raised.
        """
        errors_found: List[str] = []
        self.builder.on(BuilderEvent.ERROR_FOUND, errors_found.append)
        with self.assertRaises(OutOfOrderError):
            self.builder.class_("a").element("div")
        self.assertEqual(len(errors_found), 1, "Should trigger error_found")
        self.assertIn("Cannot add element 'div'", errors_found[0])

    def test_event_error_found_for_combinator(self) -> None:
        """
        Test that an invalid combinator dispatches error_found.
        """
        errors_found: List[str] = []
        self.builder.on("error_found", errors_found.append)
        with self.assertRaises(InvalidCombinatorError):
            self.builder.combine(self.builder.element("a"), "/", self.builder.element("b"))
        self.assertEqual(len(errors_found), 1)

    def test_event_selector_rendered(self) -> None:
        """
        Test the selector_rendered event.
        """
        rendered: List[str] = []
        self.builder.on("selector_rendered", rendered.append)
        self.builder.combine(self.builder.element("a"), ">", self.builder.id("b")).render()
        self.assertEqual(rendered, ["a", "#b"])

    def test_unknown_event_ignored(self) -> None:
        """
        Test that registering an unknown event is a no-op.
        """
        handler: Mock = Mock()
        self.builder.on("unknown_event", handler)
        self.builder.element("a").render()
        handler.assert_not_called()


if __name__ == "__main__":
    unittest.main()
