"""Common literal values used across affiliate_pages.

These constants keep shortcode defaults, URL shapes, and metadata filenames
centralized so the content pipeline, generators, and tests can import the same
values without drifting. Intended for internal use within the affiliate_pages
package.

Examples
--------
>>> from affiliate_pages import _constants
>>> _constants.SITE_META_TEMPLATE.format(site="techflow")
'.affiliate-pages-techflow-meta.json'
>>> _constants.PRODUCT_URL_TEMPLATE.format(site="techflow", slug="mouse")
'/techflow/products/mouse'
"""

DEFAULT_PRODUCT_VARIANT = "default"
PRODUCT_VARIANTS = ("default", "compact", "featured")
DEFAULT_PRODUCTS_LIMIT = 3

PRODUCT_URL_TEMPLATE = "/{site}/products/{slug}"
CATEGORY_URL_TEMPLATE = "/{site}/categories/{slug}"

SITE_META_TEMPLATE = ".affiliate-pages-{site}-meta.json"
