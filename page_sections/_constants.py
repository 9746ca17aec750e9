"""Common literal values used across page_sections.

These constants keep metadata keys, form field names, and template naming
centralized so the hooks, templates, and tests can import the same values
without drifting. Intended for internal use within the page_sections package.

Examples
--------
>>> from page_sections import _constants
>>> _constants.SECTION_TEMPLATE.format(type_id="feature")
'_section-feature.jinja'
>>> _constants.SECTION_FORM_KEY.format(type_id="text")
'section-text'
"""

SECTIONS_META_KEY = "sections"
HIDE_HEADER_META_KEY = "hide_header"
SECTION_TEMPLATE = "_section-{type_id}.jinja"
SECTION_FORM_KEY = "section-{type_id}"
ORDER_PREFIX = "builder-section-"
PAGE_TEMPLATE_FIELD = "page_template"
UNCONSTRAINED_IMAGE_SIZE = (9999, 9999)
SECRET_ENV_VAR = "PAGE_SECTIONS_SECRET"
