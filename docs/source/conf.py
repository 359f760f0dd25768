import os
import sys

import tomlkit

sys.path.insert(0, os.path.abspath("../../src"))


def get_version():
    pyproject_path = os.path.abspath("../../pyproject.toml")
    try:
        with open(pyproject_path, "r", encoding="utf-8") as f:
            data = tomlkit.parse(f.read())
        return data.get("project", {}).get("version", "0.0.0")
    except (FileNotFoundError, KeyError):
        return "0.0.0"


# Configuration file for the Sphinx documentation builder.
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

release = str(get_version())
version = ".".join(release.split(".")[:2])

project = "CSS Builder"
copyright = "2025, OniMock"
author = "OniMock"

# -- General configuration ---------------------------------------------------

extensions = ["sphinx.ext.autodoc", "sphinx.ext.viewcode", "sphinx.ext.napoleon"]

templates_path = ["_templates"]
exclude_patterns = ["modules.rst"]

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_rtd_theme"
autodoc_member_order = "groupwise"

# Modules whose qualified prefix is stripped from rendered docstrings.
_MODULE_PREFIXES = ("css_builder.css_builder.", "css_builder.objects.")


def skip(app, what, name, obj, skip, options):
    if name == "__init__":
        return False
    return skip


def process_docstring(app, what, name, obj, options, lines):
    for i in range(len(lines)):
        for prefix in _MODULE_PREFIXES:
            lines[i] = lines[i].replace(prefix, "")


def setup(app):
    app.connect("autodoc-skip-member", skip)
    app.connect("autodoc-process-docstring", process_docstring)
