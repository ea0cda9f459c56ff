"""WooCommerce bulk price editor service.

This package exposes a filtered, paginated product grid and inline field
editing over the host store's REST API. Product data, categories, tax classes,
users and capabilities all live in the host platform; the service only owns
the editor settings and a per-user request counter.
"""

__version__ = "0.1.0"
