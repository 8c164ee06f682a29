"""
bddgen: recording-to-BDD test generator with self-healing locators.

Turns a browser interaction recording into a page object, a Gherkin feature
and a pytest step module, and resolves element locators at run time through
ranked fallback strategies with a shared cache.
"""

__version__ = "0.1.0"
